"""Configuration loading and defaults for lexinav."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path


def get_config_dir() -> Path:
    """Get the lexinav config directory (XDG-style)."""
    return Path.home() / ".config" / "lexinav"


def get_config_path() -> Path:
    """Get the config file path."""
    return get_config_dir() / "config.toml"


def get_default_data_dir() -> Path:
    """Get the default data directory for lexicon and log files."""
    return Path.home() / ".local" / "share" / "lexinav"


@dataclass
class WatchConfig:
    """Lexicon file watching configuration."""

    enabled: bool = True
    debounce_seconds: float = 0.5


@dataclass
class LoggingConfig:
    """Log output configuration."""

    level: str = "WARNING"
    file: str = ""  # empty = lexinav.log in the data directory


@dataclass
class Config:
    """Application configuration."""

    lexicon_path: Path = field(
        default_factory=lambda: get_default_data_dir() / "lexicon.taskpaper"
    )
    focus: str = ""  # empty = lexicon root
    root: str = ""   # empty = lexicon root
    data_directory: Path = field(default_factory=lambda: get_default_data_dir())
    watch: WatchConfig = field(default_factory=WatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def get_log_path(self) -> Path:
        """Get the log file path, defaulting to the data directory."""
        if self.logging.file:
            return Path(self.logging.file).expanduser()
        return self.data_directory / "lexinav.log"

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from file or create defaults."""
        config_path = get_config_path()

        # Ensure config directory exists
        config_dir = get_config_dir()
        config_dir.mkdir(parents=True, exist_ok=True)

        if not config_path.exists():
            default_config = cls()
            default_config.data_directory.mkdir(parents=True, exist_ok=True)
            default_config.save()
            return default_config

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        # Parse data_directory first, the lexicon path defaults into it
        data_dir = data.get("data_directory", str(get_default_data_dir()))
        data_directory = Path(data_dir).expanduser()

        lexicon = data.get("lexicon_path", str(data_directory / "lexicon.taskpaper"))
        lexicon_path = Path(lexicon).expanduser()

        watch_data = data.get("watch", {})
        watch = WatchConfig(
            enabled=watch_data.get("enabled", True),
            debounce_seconds=float(watch_data.get("debounce_seconds", 0.5)),
        )

        log_data = data.get("logging", {})
        logging = LoggingConfig(
            level=str(log_data.get("level", "WARNING")).upper(),
            file=log_data.get("file", ""),
        )

        config = cls(
            lexicon_path=lexicon_path,
            focus=data.get("focus", ""),
            root=data.get("root", ""),
            data_directory=data_directory,
            watch=watch,
            logging=logging,
        )

        # Ensure data directory exists
        config.data_directory.mkdir(parents=True, exist_ok=True)

        return config

    def save(self) -> None:
        """Save configuration to file."""
        config_path = get_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        # Build TOML content manually (tomllib is read-only)
        lines = [
            '# lexinav Configuration',
            '',
            '# Lexicon outline file to browse',
            f'lexicon_path = "{self.lexicon_path}"',
            '',
            '# Lemma id to open at (empty = lexicon root)',
            f'focus = "{self.focus}"',
            '',
            '# Lemma id never backed past (empty = lexicon root)',
            f'root = "{self.root}"',
            '',
            '# Directory for data and logs',
            '# Default: ~/.local/share/lexinav',
            f'data_directory = "{self.data_directory}"',
            '',
            '# Reload the lexicon when its file changes',
            '[watch]',
            f'enabled = {str(self.watch.enabled).lower()}',
            f'debounce_seconds = {self.watch.debounce_seconds}',
            '',
            '[logging]',
            f'level = "{self.logging.level}"',
            f'file = "{self.logging.file}"  # empty = lexinav.log in data_directory',
        ]

        config_path.write_text("\n".join(lines) + "\n")
