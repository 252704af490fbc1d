from iamigrante.cache import AnswerCache


def test_put_then_get(clock):
    cache = AnswerCache(clock=clock)
    cache.put("What is DACA?", "DACA answer")
    assert cache.get("What is DACA?") == "DACA answer"


def test_keys_are_normalized(clock):
    cache = AnswerCache(clock=clock)
    cache.put("¿Qué es el TPS?", "TPS answer")
    assert cache.get("¿que es el tps?") == "TPS answer"
    assert "¿QUÉ ES EL TPS?" in cache


def test_entry_expires_after_ttl(clock):
    cache = AnswerCache(ttl=3600, clock=clock)
    cache.put("q", "a")

    clock.advance(3599)
    assert cache.get("q") == "a"

    clock.advance(1)
    assert cache.get("q") is None
    assert len(cache) == 0


def test_missing_key(clock):
    assert AnswerCache(clock=clock).get("nothing here") is None


def test_full_cache_evicts_oldest_insert(clock):
    cache = AnswerCache(clock=clock)
    assert cache.max_entries == 1000

    for i in range(1000):
        cache.put(f"question {i}", f"answer {i}")
        clock.advance(1)
    # reading does not refresh the insertion time
    assert cache.get("question 0") == "answer 0"

    cache.put("question 1000", "answer 1000")

    assert len(cache) == 1000
    assert cache.get("question 0") is None
    assert cache.get("question 1") == "answer 1"
    assert cache.get("question 1000") == "answer 1000"


def test_overwriting_existing_key_does_not_evict(clock):
    cache = AnswerCache(max_entries=2, clock=clock)
    cache.put("a", "1")
    clock.advance(1)
    cache.put("b", "2")
    clock.advance(1)
    cache.put("a", "3")

    assert len(cache) == 2
    assert cache.get("a") == "3"
    assert cache.get("b") == "2"


def test_clear(clock):
    cache = AnswerCache(clock=clock)
    cache.put("a", "1")
    cache.clear()
    assert len(cache) == 0


def test_zero_capacity_put_does_not_fail(clock):
    cache = AnswerCache(max_entries=0, clock=clock)
    cache.put("a", "1")
    cache.put("b", "2")

    assert len(cache) == 1
    assert cache.get("b") == "2"
