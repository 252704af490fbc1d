"""Main IA Migrante agent - orchestrates the resolution pipeline"""

import logging
from typing import Dict, Optional

from . import config
from . import curated
from .cache import AnswerCache
from .classifier import is_complex
from .knowledge import KnowledgeBase
from .llm import GenerativeResponder
from .responses import KeywordResponder
from .store import HistoryStore
from .text import Language, detect_language, normalize

logger = logging.getLogger(__name__)

GENERIC_DISCLAIMER = {
    Language.ES: (
        "No tengo información específica sobre esa consulta. Para preguntas sobre "
        "inmigración, le recomiendo consultar con un abogado especializado o visitar el sitio "
        "web oficial de USCIS para obtener información actualizada."
    ),
    Language.EN: (
        "I don't have specific information about that query. For immigration questions, I "
        "recommend consulting with a specialized attorney or visiting the official USCIS "
        "website for up-to-date information."
    ),
}


class ImmigrationAgent:
    """
    Answers immigration questions through a layered pipeline.

    Decision chain:
      1. Curated answer for the B2 → TPS → EB1 case (Spanish only)
      2. Cache → history store → knowledge base (skipped when forcing)
      3. Generative backend for complex questions
      4. Keyword answers, then a generic disclaimer

    Every answer except curated answers, cache hits and generator apologies
    is written back to the store and the cache.
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBase = None,
        store: HistoryStore = None,
        cache: AnswerCache = None,
        generator: GenerativeResponder = None,
        keywords: KeywordResponder = None,
        force_regenerate: Optional[bool] = None,
    ):
        logger.info("Initializing IA Migrante agent...")
        self.knowledge_base = knowledge_base if knowledge_base is not None else KnowledgeBase()
        self.store = store if store is not None else HistoryStore()
        self.cache = cache if cache is not None else AnswerCache()
        self.generator = generator if generator is not None else GenerativeResponder()
        self.keywords = keywords if keywords is not None else KeywordResponder()
        # None means "ask the environment on every call"
        self._force_regenerate = force_regenerate
        self.last_source = ""

    @classmethod
    def from_config(cls, force_regenerate: Optional[bool] = None) -> "ImmigrationAgent":
        """Build every component from ``config`` settings."""
        return cls(
            knowledge_base=KnowledgeBase(config.KNOWLEDGE_BASE_PATHS),
            store=HistoryStore(config.DB_PATH),
            cache=AnswerCache(config.CACHE_TTL_SECONDS, config.CACHE_MAX_ENTRIES),
            generator=GenerativeResponder(),
            keywords=KeywordResponder(),
            force_regenerate=force_regenerate,
        )

    @property
    def force_regenerate(self) -> bool:
        if self._force_regenerate is None:
            return config.force_new_response()
        return self._force_regenerate

    # ── Internal helpers ─────────────────────────────────────────────────────

    def _remember(self, question: str, answer: str, language: Language):
        self.store.upsert(question, answer, language)
        self.cache.put(question, answer)

    def _resolve(self, question: str) -> str:
        language = detect_language(question)
        normalized = normalize(question)
        logger.debug(f"Question language: {language.value}")

        if not normalized.strip():
            self.last_source = "fallback"
            return GENERIC_DISCLAIMER[language]

        # ── 1. Curated B2 → TPS → EB1 answer ────────────────────────────────
        if language == Language.ES and curated.is_special_case(normalized):
            self.last_source = "curated"
            logger.info("B2/TPS/EB1 case detected, returning curated answer")
            return curated.curated_answer(
                language, curated.has_long_period_without_status(normalized)
            )

        # ── 2. Cache → store → knowledge base ───────────────────────────────
        if self.force_regenerate:
            logger.info("Forced regeneration, skipping cache, history and knowledge base")
        else:
            answer = self.cache.get(question)
            if answer:
                self.last_source = "cache"
                logger.debug("Answer found in cache")
                return answer

            answer = self.store.find(question, language)
            if answer:
                self.last_source = "store"
                logger.debug("Answer found in history")
                self.cache.put(question, answer)
                return answer

            answer = self.knowledge_base.search(question, language)
            if answer:
                self.last_source = "knowledge"
                logger.debug("Answer found in knowledge base")
                self._remember(question, answer, language)
                return answer

        # ── 3. Generative backend ────────────────────────────────────────────
        if is_complex(question):
            logger.info("Complex question, querying the generative backend")
            result = self.generator.generate_answer(question, language)
            self.last_source = "generative"
            if result.transient:
                logger.info("Generated reply is an apology, not remembering it")
            else:
                self._remember(question, result.text, language)
            return result.text

        # ── 4. Keyword answers, then disclaimer ──────────────────────────────
        answer = self.keywords.match(question)
        if answer:
            self.last_source = "keyword"
        else:
            answer = GENERIC_DISCLAIMER[language]
            self.last_source = "fallback"
        self._remember(question, answer, language)
        return answer

    # ── Public API ───────────────────────────────────────────────────────────

    def answer(self, question: str) -> str:
        """Resolve ``question`` to a non-empty answer. Never raises."""
        self.last_source = ""
        try:
            return self._resolve(question or "")
        except Exception as e:
            logger.exception(f"Unexpected error while answering: {e}")
            self.last_source = "fallback"
            return GENERIC_DISCLAIMER[detect_language(question or "")]

    ask = answer

    def get_statistics(self) -> Dict:
        return {
            "knowledge": self.knowledge_base.get_statistics(),
            "cache_entries": len(self.cache),
            "history_entries": self.store.count(),
            "history_available": self.store.available,
            "force_regenerate": self.force_regenerate,
        }

    def format_statistics(self) -> str:
        stats = self.get_statistics()
        kb = stats["knowledge"]
        languages = ", ".join(f"{k}: {v}" for k, v in sorted(kb["by_language"].items()))
        lines = [
            "IA Migrante statistics",
            f"  Knowledge entries : {kb['total_entries']} ({languages})",
            f"  Knowledge source  : {kb['source']}",
            f"  Cached answers    : {stats['cache_entries']}",
            f"  Stored history    : {stats['history_entries']}"
            + ("" if stats["history_available"] else " (database unavailable)"),
            f"  Force regenerate  : {'on' if stats['force_regenerate'] else 'off'}",
        ]
        return "\n".join(lines)

    def clear_memory(self):
        """Forget cached and stored answers; the knowledge base is untouched."""
        self.cache.clear()
        self.store.clear()

    def close(self):
        self.store.close()
