"""Text normalization and language detection shared by every matcher"""

import re
from enum import Enum
from typing import List


class Language(str, Enum):
    """Supported answer languages"""

    ES = "es"
    EN = "en"


# Only these code points are folded; everything else passes through unchanged
_ACCENT_TABLE = str.maketrans({
    "á": "a", "é": "e", "í": "i", "ó": "o", "ú": "u", "ü": "u", "ñ": "n",
    "à": "a", "è": "e", "ì": "i", "ò": "o", "ù": "u",
})

_WORD_RE = re.compile(r"\b\w+\b")

_SPANISH_WORDS = frozenset({
    "el", "la", "los", "las", "un", "una", "unos", "unas", "y", "o", "pero", "porque",
    "como", "cuando", "donde", "cual", "quien", "que", "esto", "esta", "estos", "estas",
    "ese", "esa", "esos", "esas", "para", "por", "con", "sin", "sobre", "bajo", "ante",
    "entre", "desde", "hacia", "hasta", "según", "durante", "mediante", "excepto",
    "salvo", "menos", "más", "muy", "mucho", "poco", "bastante", "demasiado", "casi",
    "aproximadamente", "todo", "nada", "algo", "alguien", "nadie", "ninguno", "alguno",
})

_ENGLISH_WORDS = frozenset({
    "the", "of", "and", "a", "to", "in", "is", "you", "that", "it", "he", "was", "for",
    "on", "are", "as", "with", "his", "they", "i", "at", "be", "this", "have", "from",
    "or", "one", "had", "by", "word", "but", "not", "what", "all", "were", "we", "when",
    "your", "can", "said", "there", "use", "an", "each", "which", "she", "do", "how",
    "their", "if", "will", "up", "other", "about", "out", "many", "then", "them", "these",
    "so", "some", "her", "would", "make", "like", "him", "into", "time", "has", "look",
})


def normalize(text: str) -> str:
    """Lowercase and strip the accented vowels and ñ used in Spanish."""
    if not text:
        return ""
    return text.lower().translate(_ACCENT_TABLE)


def tokenize(text: str) -> List[str]:
    """Split lowercased text into word tokens."""
    return _WORD_RE.findall((text or "").lower())


def detect_language(text: str) -> Language:
    """
    Vote between Spanish and English by counting stop words.

    Ties, empty input and text with no known stop words resolve to English.
    """
    spanish_count = 0
    english_count = 0
    for word in tokenize(text):
        if word in _SPANISH_WORDS:
            spanish_count += 1
        if word in _ENGLISH_WORDS:
            english_count += 1

    return Language.ES if spanish_count > english_count else Language.EN
