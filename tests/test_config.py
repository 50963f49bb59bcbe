"""Tests for lexinav.config module."""

from pathlib import Path

import pytest

from lexinav.config import Config, LoggingConfig, WatchConfig, get_default_data_dir


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Point config and data locations at a temp directory."""
    config_dir = tmp_path / ".config" / "lexinav"
    data_dir = tmp_path / ".local" / "share" / "lexinav"
    monkeypatch.setattr("lexinav.config.get_config_dir", lambda: config_dir)
    monkeypatch.setattr("lexinav.config.get_config_path", lambda: config_dir / "config.toml")
    monkeypatch.setattr("lexinav.config.get_default_data_dir", lambda: data_dir)
    return config_dir


class TestConfigDefaults:
    def test_default_data_directory(self):
        config = Config()
        assert config.data_directory == get_default_data_dir()

    def test_default_lexicon_path(self):
        config = Config()
        assert config.lexicon_path == get_default_data_dir() / "lexicon.taskpaper"

    def test_default_focus_and_root(self):
        config = Config()
        assert config.focus == ""
        assert config.root == ""

    def test_default_watch_config(self):
        config = Config()
        assert config.watch.enabled is True
        assert config.watch.debounce_seconds == 0.5

    def test_default_log_path(self):
        config = Config()
        assert config.get_log_path() == config.data_directory / "lexinav.log"

    def test_explicit_log_file(self, tmp_path):
        config = Config(logging=LoggingConfig(file=str(tmp_path / "nav.log")))
        assert config.get_log_path() == tmp_path / "nav.log"


class TestConfigSaveLoad:
    def test_save_creates_file(self, tmp_path, config_dir):
        config = Config(data_directory=tmp_path / "data")
        config.save()
        assert (config_dir / "config.toml").exists()

    def test_round_trip(self, tmp_path, config_dir):
        original = Config(
            lexicon_path=tmp_path / "words.taskpaper",
            focus="root.animal",
            root="root",
            data_directory=tmp_path / "data",
            watch=WatchConfig(enabled=False, debounce_seconds=1.5),
            logging=LoggingConfig(level="DEBUG", file=str(tmp_path / "nav.log")),
        )
        original.save()

        loaded = Config.load()
        assert loaded.lexicon_path == original.lexicon_path
        assert loaded.focus == original.focus
        assert loaded.root == original.root
        assert loaded.data_directory == original.data_directory
        assert loaded.watch.enabled is False
        assert loaded.watch.debounce_seconds == 1.5
        assert loaded.logging.level == "DEBUG"
        assert loaded.logging.file == original.logging.file

    def test_load_creates_defaults_when_missing(self, config_dir):
        config = Config.load()
        assert (config_dir / "config.toml").exists()
        assert config.focus == ""
        assert config.data_directory.exists()

    def test_load_partial_config(self, tmp_path, config_dir):
        config_dir.mkdir(parents=True)
        (config_dir / "config.toml").write_text(
            f'data_directory = "{tmp_path / "data"}"\nfocus = "root.fruit"\n'
        )

        config = Config.load()
        assert config.focus == "root.fruit"
        # Defaults for missing fields
        assert config.lexicon_path == tmp_path / "data" / "lexicon.taskpaper"
        assert config.root == ""
        assert config.watch.enabled is True
        assert config.logging.level == "WARNING"

    def test_load_expands_user(self, config_dir):
        config_dir.mkdir(parents=True)
        (config_dir / "config.toml").write_text('lexicon_path = "~/words.taskpaper"\n')

        config = Config.load()
        assert config.lexicon_path == Path.home() / "words.taskpaper"

    def test_log_level_normalized(self, config_dir):
        config_dir.mkdir(parents=True)
        (config_dir / "config.toml").write_text('[logging]\nlevel = "info"\n')

        assert Config.load().logging.level == "INFO"


class TestWatchConfig:
    def test_default(self):
        wc = WatchConfig()
        assert wc.enabled is True
        assert wc.debounce_seconds == 0.5


class TestLoggingConfig:
    def test_default(self):
        lc = LoggingConfig()
        assert lc.level == "WARNING"
        assert lc.file == ""
