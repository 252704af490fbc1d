"""Heuristic gate deciding which questions go to the generative backend"""

import logging

from . import config
from .text import normalize

logger = logging.getLogger(__name__)

# Legal/procedural terms; matched as substrings of the normalized question
IMMIGRATION_KEYWORDS = (
    "tps", "eb1", "eb2", "eb3", "ajust", "estatus", "status", "green card",
    "deportacion", "asilo", "visa", "i-485", "i-130", "i-140", "waiver", "perdon",
    "inadmisible", "overstay", "daca", "vawa", "u visa", "t visa", "245(i)", "245(k)",
    "asylum", "citizenship", "ciudadania", "naturalizacion", "naturalization", "parole",
    "adjustment", "removal", "deportation", "appeal", "apelacion", "h1b", "h2a", "h2b",
    "refugee", "refugiado", "credible fear", "miedo creible", "priority date",
    "fecha prioritaria",
)


def count_keywords(question: str) -> int:
    normalized = normalize(question)
    return sum(1 for keyword in IMMIGRATION_KEYWORDS if keyword in normalized)


def is_complex(question: str) -> bool:
    """True when the question names several legal terms or is long."""
    if not question:
        return False
    keywords = count_keywords(question)
    complex_question = (
        keywords >= config.COMPLEX_MIN_KEYWORDS or len(question) > config.COMPLEX_MIN_LENGTH
    )
    logger.debug(f"Complexity: {keywords} keywords, {len(question)} chars -> {complex_question}")
    return complex_question
