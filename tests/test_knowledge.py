import json

import pytest

from iamigrante import curated
from iamigrante.knowledge import KnowledgeBase, KnowledgeEntry, parse_knowledge
from iamigrante.text import Language

WORK_VISA_ANSWER = (
    "Una visa de trabajo es un documento oficial que permite a un extranjero trabajar "
    "legalmente en un país durante un período determinado. Los requisitos y procesos "
    "varían según el país emisor y el tipo de trabajo."
)


@pytest.fixture
def kb():
    return KnowledgeBase(paths=[])


def _write(path, data):
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


def test_defaults_when_nothing_loads(kb, tmp_path):
    assert kb.using_defaults
    assert len(kb) == 2 + len(curated.KNOWLEDGE_ENTRIES)

    missing = KnowledgeBase(paths=[tmp_path / "missing.json"])
    assert missing.loaded_from is None
    assert len(missing) == len(kb)


def test_loads_data_layout(tmp_path):
    path = _write(tmp_path / "kb.json", {
        "data": [
            {"question": "What is DACA?", "answer": "DACA answer", "language": "en"},
            {"question": "", "answer": "no question"},
            {"question": "no answer"},
            "not a record",
        ]
    })
    kb = KnowledgeBase(paths=[path])

    assert kb.loaded_from == path
    assert len(kb) == 1 + len(curated.KNOWLEDGE_ENTRIES)
    assert kb.search("What is DACA?", Language.EN) == "DACA answer"


def test_loads_category_layout():
    entries = parse_knowledge({"asilo": [{"answer": "Respuesta de asilo"}], "meta": "x"})
    assert entries == [KnowledgeEntry("¿asilo?", "Respuesta de asilo", Language.ES)]


def test_broken_file_falls_through_to_next_path(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    good = _write(tmp_path / "good.json", {"data": [
        {"question": "¿Qué es VAWA?", "answer": "Respuesta VAWA", "language": "es"},
    ]})

    kb = KnowledgeBase(paths=[broken, good])
    assert kb.loaded_from == good


def test_exact_match(kb):
    assert kb.search("¿Qué es una visa de trabajo?", Language.ES) == WORK_VISA_ANSWER
    assert kb.search("¿QUE ES UNA VISA DE TRABAJO?", Language.ES) == WORK_VISA_ANSWER


def test_exact_match_respects_language(kb):
    assert kb.search("¿Qué es una visa de trabajo?", Language.EN) == ""


def test_special_case_default_spanish(kb):
    question = "Entré con visa de turista B2, obtuve TPS, ¿puedo ajustar por EB1?"
    assert kb.search(question, Language.ES) == curated.ANSWER_DEFAULT_ES


def test_special_case_long_period_spanish(kb):
    question = "Entré con visa B2, estuve 3 años sin estatus y luego TPS. ¿Ajuste por EB1?"
    assert kb.search(question, Language.ES) == curated.ANSWER_LONG_ES


def test_special_case_english_variants(kb):
    default = "I entered with a B2 visa and later got TPS, can I adjust as EB1?"
    long_period = "I entered on a B2 visa, was out of status for 3 years, then got TPS. Can I adjust as EB1?"

    assert kb.search(default, Language.EN) == curated.ANSWER_DEFAULT_EN
    assert kb.search(long_period, Language.EN) == curated.ANSWER_LONG_EN


def test_fuzzy_match():
    kb = KnowledgeBase(entries=[
        KnowledgeEntry("¿Cuánto cuesta renovar el permiso de trabajo?", "Costo", Language.ES),
    ])
    assert kb.search("renovar permiso trabajo", Language.ES) == "Costo"
    assert kb.search("quiero saber algo sobre renovar mi pasaporte hoy mismo ya", Language.ES) == ""


def test_lookup_uses_stricter_threshold():
    kb = KnowledgeBase(entries=[
        KnowledgeEntry("¿Cuánto cuesta renovar el permiso de trabajo?", "Costo", Language.ES),
    ])
    # 2 of 4 tokens overlap: 50%
    question = "renovar permiso de conducir"
    assert kb.search(question, Language.ES) == "Costo"
    assert kb.lookup(question) == ""
    assert kb.lookup("renovar permiso trabajo") == "Costo"


def test_statistics(kb):
    stats = kb.get_statistics()
    assert stats["total_entries"] == len(kb)
    assert stats["by_language"] == {"es": 4, "en": 2}
    assert stats["source"] == "built-in defaults"
