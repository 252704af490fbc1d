"""Shared fixtures: fake clock, fake backends and a wired-up agent"""

import pytest

from iamigrante.agent import ImmigrationAgent
from iamigrante.cache import AnswerCache
from iamigrante.knowledge import KnowledgeBase
from iamigrante.llm import BackendUnavailable, Generation
from iamigrante.responses import KeywordResponder
from iamigrante.store import HistoryStore


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeClient:
    """Stands in for OllamaClient; replies are returned in order."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def generate(self, prompt, max_tokens=None):
        self.calls.append((prompt, max_tokens))
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeGenerator:
    def __init__(self, reply="generated answer", transient=False):
        self.reply = reply
        self.transient = transient
        self.calls = []

    def generate_answer(self, question, language):
        self.calls.append((question, language))
        return Generation(self.reply, self.transient)

    def generate(self, question, language):
        return self.generate_answer(question, language).text


class CountingStore(HistoryStore):
    def __init__(self, db_path=":memory:"):
        self.finds = 0
        self.upserts = 0
        super().__init__(db_path)

    def find(self, question, language):
        self.finds += 1
        return super().find(question, language)

    def upsert(self, question, answer, language):
        self.upserts += 1
        super().upsert(question, answer, language)


class CountingKnowledgeBase(KnowledgeBase):
    def __init__(self, *args, **kwargs):
        self.searches = 0
        super().__init__(*args, **kwargs)

    def search(self, question, language):
        self.searches += 1
        return super().search(question, language)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("FORCE_NEW_RESPONSE", raising=False)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    s = CountingStore()
    yield s
    s.close()


@pytest.fixture
def knowledge_base():
    # No files: built-in defaults plus curated entries
    return CountingKnowledgeBase(paths=[])


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def agent(knowledge_base, store, clock, generator):
    return ImmigrationAgent(
        knowledge_base=knowledge_base,
        store=store,
        cache=AnswerCache(clock=clock),
        generator=generator,
        keywords=KeywordResponder(),
        force_regenerate=False,
    )


@pytest.fixture
def offline():
    return BackendUnavailable("connection refused")
