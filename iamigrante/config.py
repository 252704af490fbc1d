"""Configuration module for IA Migrante"""

import os
from pathlib import Path

# Base directories
BASE_DIR = Path(os.getenv("IAMIGRANTE_HOME", str(Path.home() / ".iamigrante")))
DATA_DIR = BASE_DIR / "data"

# Persistent Q&A history (SQLite)
DB_PATH = Path(os.getenv("IAMIGRANTE_DB", str(DATA_DIR / "ia_migrante.db")))

# Knowledge base sources, tried in order; built-in defaults if none loads
KNOWLEDGE_BASE_PATHS = [
    Path(p) for p in (
        os.getenv("IAMIGRANTE_KB", ""),
        str(DATA_DIR / "nolivos_immigration_ai_extended.json"),
        "dataset/nolivos_immigration_ai_extended.json",
        "dataset/nolivos_immigration_qa.json",
    ) if p
]

# Ephemeral cache
CACHE_TTL_SECONDS = 3600
CACHE_MAX_ENTRIES = 1000

# Knowledge base search
KB_FUZZY_THRESHOLD = 30       # percent, language-aware search
GENERAL_FUZZY_THRESHOLD = 50  # percent, language-agnostic lookup

# Complexity classifier
COMPLEX_MIN_KEYWORDS = 2
COMPLEX_MIN_LENGTH = 100  # characters

# Generative backend (Ollama)
OLLAMA_URL = os.getenv("OLLAMA_URL", "http://localhost:11434/api/generate")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "llama3.2:1b")
LLM_TEMPERATURE = 0.1
LLM_MAX_TOKENS = 1000
LLM_RETRY_MAX_TOKENS = 800
LLM_TIMEOUT = float(os.getenv("OLLAMA_TIMEOUT", "120"))  # seconds
MIN_GENERATED_LENGTH = 200  # shorter replies are treated as suspicious

# CLI settings
CLI_ASSISTANT = "IA Migrante"
CLI_WIDTH = 80

_TRUTHY = {"1", "true", "yes", "on"}


def force_new_response() -> bool:
    """True when FORCE_NEW_RESPONSE asks to skip cache, store and knowledge base."""
    return os.getenv("FORCE_NEW_RESPONSE", "").strip().lower() in _TRUTHY


def ensure_dirs():
    """Create the data directory if it doesn't exist."""
    for directory in [BASE_DIR, DATA_DIR, DB_PATH.parent]:
        directory.mkdir(parents=True, exist_ok=True)
