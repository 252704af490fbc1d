"""Static immigration knowledge base: loading and search"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from . import config
from . import curated
from .text import Language, normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KnowledgeEntry:
    """Single question/answer record"""

    question: str
    answer: str
    language: Optional[Language] = None

    @classmethod
    def from_dict(cls, data: Dict, category: str = None) -> Optional["KnowledgeEntry"]:
        """Build an entry from a JSON record; None if the record is unusable."""
        if not isinstance(data, dict):
            return None
        answer = data.get("answer")
        question = data.get("question")
        if not question and category:
            question = f"¿{category}?"
        if not isinstance(question, str) or not isinstance(answer, str):
            return None
        if not question.strip() or not answer.strip():
            return None

        raw_lang = data.get("language", Language.ES.value if category else None)
        try:
            language = Language(raw_lang) if raw_lang else None
        except ValueError:
            logger.debug(f"Unknown language {raw_lang!r} for: {question[:50]}")
            language = None
        return cls(question=question, answer=answer, language=language)


# Built-in entries used when no knowledge file can be read
_DEFAULT_ENTRIES = (
    KnowledgeEntry(
        question="¿Qué es una visa de trabajo?",
        answer=(
            "Una visa de trabajo es un documento oficial que permite a un extranjero trabajar "
            "legalmente en un país durante un período determinado. Los requisitos y procesos "
            "varían según el país emisor y el tipo de trabajo."
        ),
        language=Language.ES,
    ),
    KnowledgeEntry(
        question="¿Cómo solicitar asilo?",
        answer=(
            "El proceso de solicitud de asilo generalmente implica presentarse ante las "
            "autoridades migratorias y expresar temor de regresar al país de origen debido a "
            "persecución por motivos de raza, religión, nacionalidad, opinión política o "
            "pertenencia a un grupo social específico. Es recomendable buscar asesoría legal "
            "especializada."
        ),
        language=Language.ES,
    ),
)

_CURATED_ENTRIES = tuple(
    KnowledgeEntry(question=q, answer=a, language=lang)
    for q, a, lang in curated.KNOWLEDGE_ENTRIES
)

# Phrases used to tell the curated variants apart, normalized like the questions
_LONG_STRICT = (normalize("años sin estatus"), "years")
_LONG_RELAXED = (normalize("años"), "years")
_DEFAULT_STRICT = ("visa de turista", "b2 visa")


def parse_knowledge(data) -> List[KnowledgeEntry]:
    """
    Convert a decoded JSON document into entries.

    Accepts ``{"data": [...]}`` or ``{"<category>": [...], ...}``. Records
    without a usable question/answer are skipped.
    """
    if not isinstance(data, dict):
        raise ValueError("knowledge base must be a JSON object")

    entries: List[KnowledgeEntry] = []
    skipped = 0
    if isinstance(data.get("data"), list):
        groups: Iterable[Tuple[Optional[str], list]] = [(None, data["data"])]
    else:
        groups = [(cat, items) for cat, items in data.items() if isinstance(items, list)]

    for category, items in groups:
        for item in items:
            entry = KnowledgeEntry.from_dict(item, category=category)
            if entry is None:
                skipped += 1
                continue
            entries.append(entry)

    if skipped:
        logger.warning(f"Skipped {skipped} malformed knowledge records")
    return entries


class KnowledgeBase:
    """
    Read-only collection of immigration Q&A loaded once at startup.

    Search order: domain special case, exact match, fuzzy token overlap.
    """

    def __init__(
        self,
        paths: Sequence[Union[str, Path]] = None,
        entries: Iterable[KnowledgeEntry] = None,
        fuzzy_threshold: int = None,
    ):
        self.fuzzy_threshold = (
            config.KB_FUZZY_THRESHOLD if fuzzy_threshold is None else fuzzy_threshold
        )
        self.loaded_from: Optional[Path] = None

        if entries is not None:
            loaded = list(entries)
        else:
            loaded = self._load(config.KNOWLEDGE_BASE_PATHS if paths is None else paths)

        self._entries: Tuple[KnowledgeEntry, ...] = tuple(loaded) + _CURATED_ENTRIES
        # Normalized questions, computed once
        self._normalized: Tuple[str, ...] = tuple(normalize(e.question) for e in self._entries)
        logger.info(f"Knowledge base ready with {len(self._entries)} entries")

    # ── Loading ──────────────────────────────────────────────────────────────

    def _load(self, paths: Sequence[Union[str, Path]]) -> List[KnowledgeEntry]:
        for raw_path in paths:
            path = Path(raw_path)
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                entries = parse_knowledge(data)
            except FileNotFoundError:
                logger.info(f"Knowledge file not found: {path}")
                continue
            except (OSError, ValueError) as e:
                # json.JSONDecodeError is a ValueError
                logger.error(f"Failed to load knowledge base from {path}: {e}")
                continue
            self.loaded_from = path
            logger.info(f"Loaded {len(entries)} knowledge entries from {path}")
            return entries

        logger.error("No knowledge base could be loaded, using built-in defaults")
        return list(_DEFAULT_ENTRIES)

    # ── Accessors ────────────────────────────────────────────────────────────

    @property
    def entries(self) -> Tuple[KnowledgeEntry, ...]:
        return self._entries

    @property
    def using_defaults(self) -> bool:
        return self.loaded_from is None

    def __len__(self) -> int:
        return len(self._entries)

    def get_statistics(self) -> Dict:
        by_language: Dict[str, int] = {}
        for e in self._entries:
            key = e.language.value if e.language else "unlabeled"
            by_language[key] = by_language.get(key, 0) + 1
        return {
            "total_entries": len(self._entries),
            "by_language": by_language,
            "source": str(self.loaded_from) if self.loaded_from else "built-in defaults",
        }

    # ── Search ───────────────────────────────────────────────────────────────

    def search(self, question: str, language: Language) -> str:
        """Return the best answer for ``question`` in ``language``, or ''."""
        normalized = normalize(question)
        language = Language(language)

        if curated.is_special_case(normalized):
            answer = self._search_special_case(normalized, language)
            if answer:
                return answer

        answer = self._search_exact(normalized, language)
        if answer:
            return answer

        return self._search_fuzzy(normalized, language, self.fuzzy_threshold)

    def lookup(self, question: str, threshold: int = None) -> str:
        """Language-agnostic lookup with the stricter general-purpose threshold."""
        normalized = normalize(question)
        for entry, entry_q in zip(self._entries, self._normalized):
            if entry_q == normalized:
                return entry.answer
        return self._search_fuzzy(
            normalized, None,
            config.GENERAL_FUZZY_THRESHOLD if threshold is None else threshold,
        )

    def _in_language(self, language: Language):
        for entry, entry_q in zip(self._entries, self._normalized):
            if entry.language == language:
                yield entry, entry_q

    def _search_special_case(self, normalized: str, language: Language) -> str:
        long_period = curated.has_long_period_without_status(normalized)
        logger.debug(
            "Long period without status detected" if long_period
            else "No long period without status detected"
        )

        for entry, q in self._in_language(language):
            if "tps" not in q or "eb1" not in q:
                continue
            is_long = any(p in q for p in _LONG_STRICT)
            if long_period and is_long:
                logger.debug("Found curated answer for long period without status")
                return entry.answer
            if not long_period and not is_long and any(p in q for p in _DEFAULT_STRICT):
                logger.debug("Found curated answer for B2 → TPS → EB1")
                return entry.answer

        # Second pass, less specific
        for entry, q in self._in_language(language):
            if "tps" not in q or "eb1" not in q:
                continue
            if not long_period or any(p in q for p in _LONG_RELAXED):
                logger.debug("Found alternative answer for B2 → TPS → EB1")
                return entry.answer

        return ""

    def _search_exact(self, normalized: str, language: Language) -> str:
        for entry, q in self._in_language(language):
            if q == normalized:
                return entry.answer
        return ""

    def _search_fuzzy(self, normalized: str, language: Optional[Language], threshold: int) -> str:
        words = normalized.split()
        if not words:
            return ""
        important = [w for w in words if len(w) > 3]

        for entry, q in zip(self._entries, self._normalized):
            if language is not None and entry.language is not None and entry.language != language:
                continue
            matches = sum(1 for w in important if w in q)
            if matches and matches * 100 // len(words) > threshold:
                return entry.answer
        return ""
