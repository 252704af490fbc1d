import pytest

from iamigrante import cli, config
from iamigrante.agent import ImmigrationAgent


@pytest.fixture
def patched(monkeypatch, agent, tmp_path):
    monkeypatch.setattr(config, "ensure_dirs", lambda: None)
    monkeypatch.setattr(config, "DB_PATH", tmp_path / "ia_migrante.db")
    monkeypatch.setattr(ImmigrationAgent, "from_config", lambda force_regenerate=None: agent)
    return agent


def test_parser_defaults():
    args = cli.build_parser().parse_args([])
    assert args.question is None
    assert args.force is None
    assert not args.reset
    assert args.typewriter


def test_one_shot_question(patched, capsys):
    cli.main(["--no-typewriter", "hello, tell me about green card"])

    out = capsys.readouterr().out
    assert "Pregunta: hello, tell me about green card" in out
    assert "Green Card" in out
    assert "Source: topic guide" in out


def test_reset_removes_database(patched, capsys):
    config.DB_PATH.write_text("")
    cli.main(["--reset", "--no-typewriter", "¿Qué es una visa de trabajo?"])

    assert not config.DB_PATH.exists()
    assert "knowledge base" in capsys.readouterr().out


def test_empty_question_exits_with_error(patched):
    with pytest.raises(SystemExit) as exc:
        cli.main(["   "])
    assert exc.value.code == 1


def test_commands(patched, capsys):
    shell = cli.IAMigranteCLI(typewriter=False)
    shell.agent = patched

    assert shell.handle_command("help") is True
    assert shell.handle_command("stats") is True
    assert shell.handle_command("¿Qué es DACA?") is None
    assert shell.handle_command("quit") is False
    assert "IA Migrante statistics" in capsys.readouterr().out


def test_one_shot_closes_agent_when_interrupted(patched, monkeypatch):
    closed = []

    def interrupt(question):
        raise KeyboardInterrupt

    monkeypatch.setattr(patched, "answer", interrupt)
    monkeypatch.setattr(patched, "close", lambda: closed.append(True))

    with pytest.raises(KeyboardInterrupt):
        cli.main(["--no-typewriter", "¿Qué es DACA?"])
    assert closed == [True]
