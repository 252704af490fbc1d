"""IA Migrante - layered question-answering pipeline for immigration topics"""

__version__ = "0.1.0"
__author__ = "IA Migrante Team"
__powered_by__ = "Ollama · SQLite"

from .text import Language, detect_language, normalize
from .agent import ImmigrationAgent

__all__ = [
    "ImmigrationAgent",
    "Language",
    "detect_language",
    "normalize",
    "__version__",
]
