from iamigrante.classifier import count_keywords, is_complex


def test_single_keyword_short_question_is_simple():
    assert count_keywords("hello, tell me about green card") == 1
    assert not is_complex("hello, tell me about green card")


def test_several_keywords_are_complex():
    assert is_complex("¿Puedo ajustar estatus con TPS?")
    assert is_complex("Do I need a waiver for my I-485?")


def test_keywords_match_without_accents():
    assert count_keywords("Deportación y asilo") == 2


def test_long_question_is_complex():
    assert is_complex("x" * 101)
    assert not is_complex("x" * 100)


def test_empty_question():
    assert not is_complex("")
