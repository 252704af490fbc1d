import pytest

from iamigrante import curated
from iamigrante.agent import GENERIC_DISCLAIMER, ImmigrationAgent
from iamigrante.cache import AnswerCache
from iamigrante.knowledge import KnowledgeBase
from iamigrante.llm import BACKEND_ERROR, GenerativeResponder
from iamigrante.responses import DEFAULT_ANSWER, DEFAULT_RULES, KeywordResponder
from iamigrante.store import HistoryStore
from iamigrante.text import Language

from .conftest import FakeClient, FakeGenerator

RULES = {rule.trigger: rule.response for rule in DEFAULT_RULES}

WORK_VISA_QUESTION = "¿Qué es una visa de trabajo?"
WORK_VISA_ANSWER = (
    "Una visa de trabajo es un documento oficial que permite a un extranjero trabajar "
    "legalmente en un país durante un período determinado. Los requisitos y procesos "
    "varían según el país emisor y el tipo de trabajo."
)
COMPLEX_QUESTION = "¿Puedo ajustar estatus con TPS si tengo una petición I-130?"
GENERATED_ES = "La persona puede solicitar el ajuste de estatus con la ayuda de un abogado. " * 4
SPECIAL_LONG_ES = "Entré con visa B2, estuve 3 años sin estatus y luego TPS. ¿Ajuste por EB1?"
SPECIAL_DEFAULT_ES = "Entré con visa B2, luego TPS. ¿Puedo ajustar por EB1?"


def test_knowledge_base_exact_match(agent, store):
    assert agent.answer(WORK_VISA_QUESTION) == WORK_VISA_ANSWER
    assert agent.last_source == "knowledge"
    assert store.upserts == 1
    assert store.find(WORK_VISA_QUESTION, Language.ES) == WORK_VISA_ANSWER


def test_green_card_keyword_answer(agent, generator):
    assert agent.answer("hello, tell me about green card") == RULES["green card"]
    assert agent.last_source == "keyword"
    assert generator.calls == []


def test_second_call_is_served_from_cache(agent, store, knowledge_base, generator):
    first = agent.answer(WORK_VISA_QUESTION)
    finds, searches = store.finds, knowledge_base.searches

    second = agent.answer(WORK_VISA_QUESTION)

    assert second == first
    assert agent.last_source == "cache"
    assert store.finds == finds
    assert knowledge_base.searches == searches
    assert generator.calls == []


def test_cache_expiry_falls_back_to_store(agent, clock):
    agent.answer(WORK_VISA_QUESTION)
    clock.advance(3600)

    assert agent.answer(WORK_VISA_QUESTION) == WORK_VISA_ANSWER
    assert agent.last_source == "store"


def test_store_hit_is_copied_into_cache(agent, store):
    store.upsert("What is parole?", "Parole answer", Language.EN)

    assert agent.answer("What is parole?") == "Parole answer"
    assert agent.last_source == "store"
    assert "What is parole?" in agent.cache


def test_special_case_spanish_returns_curated(agent, store, generator):
    # a stale cached answer must not win
    agent.cache.put(SPECIAL_LONG_ES, "stale")

    assert agent.answer(SPECIAL_LONG_ES) == curated.ANSWER_LONG_ES
    assert agent.last_source == "curated"
    assert store.upserts == 0
    assert generator.calls == []


def test_special_case_spanish_default_returns_curated(agent, store, generator):
    agent.cache.put(SPECIAL_DEFAULT_ES, "stale")

    assert agent.answer(SPECIAL_DEFAULT_ES) == curated.ANSWER_DEFAULT_ES
    assert agent.last_source == "curated"
    assert store.upserts == 0
    assert generator.calls == []


def test_special_case_english_goes_through_knowledge_base(agent):
    question = "I entered with a B2 visa and later got TPS, can I adjust as EB1?"
    assert agent.answer(question) == curated.ANSWER_DEFAULT_EN
    assert agent.last_source == "knowledge"


def test_complex_question_uses_generator(agent, store, generator):
    assert agent.answer(COMPLEX_QUESTION) == "generated answer"
    assert agent.last_source == "generative"
    assert generator.calls == [(COMPLEX_QUESTION, Language.ES)]
    assert store.find(COMPLEX_QUESTION, Language.ES) == "generated answer"
    assert COMPLEX_QUESTION in agent.cache


def test_backend_apology_is_not_remembered(knowledge_base, store, clock, offline):
    client = FakeClient(offline, GENERATED_ES)
    agent = ImmigrationAgent(
        knowledge_base=knowledge_base,
        store=store,
        cache=AnswerCache(clock=clock),
        generator=GenerativeResponder(client),
        keywords=KeywordResponder(),
        force_regenerate=False,
    )

    assert agent.answer(COMPLEX_QUESTION) == BACKEND_ERROR[Language.ES]
    assert agent.last_source == "generative"
    assert store.upserts == 0
    assert COMPLEX_QUESTION not in agent.cache

    clock.advance(36000)
    assert agent.answer(COMPLEX_QUESTION) == GENERATED_ES.strip()
    assert agent.last_source == "generative"
    assert len(client.calls) == 2
    assert store.find(COMPLEX_QUESTION, Language.ES) == GENERATED_ES.strip()


def test_transient_generator_reply_is_returned_but_not_stored(agent, store, generator):
    generator.transient = True

    assert agent.answer(COMPLEX_QUESTION) == "generated answer"
    assert store.upserts == 0
    assert COMPLEX_QUESTION not in agent.cache


def test_simple_unknown_question_gets_disclaimer(agent, store, generator):
    question = "¿Cuál es el horario de la oficina?"

    assert agent.answer(question) == GENERIC_DISCLAIMER[Language.ES]
    assert agent.last_source == "fallback"
    assert store.upserts == 1
    assert generator.calls == []


@pytest.mark.parametrize("question", ["", "   ", "xyz", "?", "DACA", "¿hola?"])
def test_always_answers(agent, question):
    answer = agent.answer(question)
    assert isinstance(answer, str) and answer.strip()


def test_blank_question_gets_english_disclaimer(agent, store):
    assert agent.answer("") == GENERIC_DISCLAIMER[Language.EN]
    assert store.upserts == 0


def test_force_regenerate_skips_lookups(knowledge_base, store, generator):
    agent = ImmigrationAgent(knowledge_base, store, AnswerCache(), generator,
                             KeywordResponder(), force_regenerate=True)

    assert agent.answer(WORK_VISA_QUESTION) == RULES["trabajo"]
    assert agent.last_source == "keyword"
    assert knowledge_base.searches == 0
    assert store.finds == 0


def test_force_regenerate_from_environment(monkeypatch, knowledge_base, store, generator):
    agent = ImmigrationAgent(knowledge_base, store, AnswerCache(), generator, KeywordResponder())
    monkeypatch.setenv("FORCE_NEW_RESPONSE", "1")

    agent.answer(WORK_VISA_QUESTION)
    assert knowledge_base.searches == 0

    monkeypatch.setenv("FORCE_NEW_RESPONSE", "0")
    agent.answer("hello, tell me about green card")
    assert knowledge_base.searches == 1


def test_broken_store_does_not_break_answers(tmp_path, generator):
    agent = ImmigrationAgent(
        KnowledgeBase(paths=[]), HistoryStore(tmp_path), AnswerCache(), generator,
        KeywordResponder(), force_regenerate=False,
    )
    assert agent.answer(WORK_VISA_QUESTION) == WORK_VISA_ANSWER


def test_unexpected_error_returns_disclaimer(store, generator):
    class ExplodingKnowledgeBase(KnowledgeBase):
        def search(self, question, language):
            raise RuntimeError("boom")

    agent = ImmigrationAgent(
        ExplodingKnowledgeBase(paths=[]), store, AnswerCache(), generator,
        KeywordResponder(), force_regenerate=False,
    )
    assert agent.answer(WORK_VISA_QUESTION) == GENERIC_DISCLAIMER[Language.ES]
    assert agent.last_source == "fallback"


def test_keyword_default_is_not_used_as_pipeline_answer(agent):
    assert agent.answer("¿Cuál es el horario de la oficina?") != DEFAULT_ANSWER


def test_ask_is_an_alias(agent):
    assert agent.ask(WORK_VISA_QUESTION) == WORK_VISA_ANSWER


def test_statistics(agent):
    agent.answer(WORK_VISA_QUESTION)
    stats = agent.get_statistics()

    assert stats["knowledge"]["total_entries"] == 6
    assert stats["cache_entries"] == 1
    assert stats["history_entries"] == 1
    assert "Knowledge entries" in agent.format_statistics()


def test_clear_memory(agent):
    agent.answer(WORK_VISA_QUESTION)
    agent.clear_memory()

    assert len(agent.cache) == 0
    assert agent.store.count() == 0
