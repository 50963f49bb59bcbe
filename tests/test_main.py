"""Tests for the lexinav entry point."""

import pytest

from lexinav import __main__ as entry
from lexinav.config import Config


@pytest.fixture
def launched(tmp_path, monkeypatch):
    """Capture run_app calls instead of starting the TUI."""
    calls = []
    monkeypatch.setattr(entry, "run_app", lambda *args: calls.append(args))
    monkeypatch.setattr(entry, "setup_logging", lambda config: None)
    monkeypatch.setattr("sys.argv", ["lexinav"])
    return calls


def use_config(monkeypatch, config):
    monkeypatch.setattr(entry.Config, "load", classmethod(lambda cls: config))


class TestResolve:
    def test_empty_id_is_root(self, lexicon):
        assert entry.resolve(lexicon, "") == lexicon.root

    def test_known_id(self, lexicon):
        assert entry.resolve(lexicon, "root.animal.fur") == lexicon["root.animal.fur"]

    def test_unknown_id_falls_back(self, lexicon):
        assert entry.resolve(lexicon, "root.nothing") == lexicon.root


class TestMain:
    def test_runs_app_on_configured_focus(self, tmp_path, lexicon_file, launched, monkeypatch):
        use_config(monkeypatch, Config(
            lexicon_path=lexicon_file,
            focus="root.animal.cat",
            root="root.animal",
            data_directory=tmp_path / "data",
        ))

        assert entry.main() == 0
        (config, access, state), = launched
        assert state.lemma.id == "root.animal.cat"
        assert state.root.id == "root.animal"
        assert access.lexicon.path == lexicon_file

    def test_command_line_lexicon(self, tmp_path, lexicon_file, launched, monkeypatch):
        use_config(monkeypatch, Config(
            lexicon_path=tmp_path / "missing.taskpaper",
            data_directory=tmp_path / "data",
        ))
        monkeypatch.setattr("sys.argv", ["lexinav", str(lexicon_file)])

        assert entry.main() == 0
        (config, access, state), = launched
        assert config.lexicon_path == lexicon_file
        assert state.lemma.id == "root"

    def test_missing_lexicon_fails(self, tmp_path, launched, monkeypatch, capsys):
        use_config(monkeypatch, Config(
            lexicon_path=tmp_path / "missing.taskpaper",
            data_directory=tmp_path / "data",
        ))

        assert entry.main() == 1
        assert launched == []
        assert "Error: cannot read" in capsys.readouterr().err

    def test_keyboard_interrupt(self, tmp_path, lexicon_file, monkeypatch):
        def interrupted(*args):
            raise KeyboardInterrupt

        use_config(monkeypatch, Config(lexicon_path=lexicon_file, data_directory=tmp_path))
        monkeypatch.setattr(entry, "run_app", interrupted)
        monkeypatch.setattr(entry, "setup_logging", lambda config: None)
        monkeypatch.setattr("sys.argv", ["lexinav"])

        assert entry.main() == 0
