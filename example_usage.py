"""
Simple usage example for IA Migrante

Answers a few questions with an in-memory history database and shows
which pipeline stage produced each answer. Complex questions need a
running Ollama server (http://localhost:11434); without one they get an
apology or the curated answer.
"""

from iamigrante import ImmigrationAgent
from iamigrante.knowledge import KnowledgeBase
from iamigrante.store import HistoryStore


def main():
    print("=" * 60)
    print("IA Migrante Simple Example")
    print("=" * 60)
    print()

    agent = ImmigrationAgent(
        knowledge_base=KnowledgeBase(paths=[]),
        store=HistoryStore(":memory:"),
    )

    print("✓ Agent initialized!\n")

    questions = [
        "¿Qué es una visa de trabajo?",
        "¿Qué es una visa de trabajo?",
        "hello, tell me about green card",
        "Entré con visa B2, estuve años sin estatus y luego obtuve TPS. ¿Puedo ajustar por EB1?",
    ]

    for i, question in enumerate(questions, 1):
        print("=" * 60)
        print(f"\n📝 Example {i}\n")
        print(f"Question: {question}")
        answer = agent.ask(question)
        print(f"Source:   {agent.last_source}")
        print(f"Answer:\n{answer}\n")

    print("=" * 60)
    print("\n📊 Statistics\n")
    print(agent.format_statistics())
    print("\n✅ Examples complete!")
    agent.close()


if __name__ == "__main__":
    main()
