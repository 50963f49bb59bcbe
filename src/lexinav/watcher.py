"""File system watcher that reloads the lexicon when its file changes."""

import logging
import threading
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .lexicon import Lexicon, LexiconAccess, LexiconError

logger = logging.getLogger(__name__)


class LexiconEventHandler(FileSystemEventHandler):
    """Handler for lexicon file changes with debouncing."""

    def __init__(
        self,
        lexicon_path: Path,
        access: LexiconAccess,
        on_change: Callable[[], None],
        debounce_seconds: float = 0.5,
    ):
        super().__init__()
        self.lexicon_path = lexicon_path.resolve()
        self.access = access
        self.on_change = on_change
        self.debounce_seconds = debounce_seconds
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None

    def _is_lexicon_file(self, path: str | bytes) -> bool:
        """Check if the path is the watched lexicon file."""
        if isinstance(path, bytes):
            path = path.decode()
        return Path(path).resolve() == self.lexicon_path

    def _schedule_reload(self) -> None:
        """Schedule a debounced reload, restarting any pending one."""
        logger.debug("Lexicon change detected: %s", self.lexicon_path)
        with self._lock:
            if self._timer:
                self._timer.cancel()

            self._timer = threading.Timer(
                self.debounce_seconds,
                self._process_pending,
            )
            self._timer.daemon = True
            self._timer.start()

    def _process_pending(self) -> None:
        """Reload the lexicon and swap it in, keeping the old one on failure."""
        with self._lock:
            self._timer = None

        if not self.lexicon_path.exists():
            logger.warning("Lexicon file removed: %s", self.lexicon_path)
            return

        try:
            lexicon = Lexicon.load(self.lexicon_path)
        except LexiconError as e:
            logger.warning("Keeping previous lexicon, reload failed: %s", e)
            return

        self.access.swap(lexicon)
        logger.info("Lexicon reloaded: %s", self.lexicon_path)
        self.on_change()

    def on_created(self, event: FileSystemEvent) -> None:
        """Handle file creation."""
        if not event.is_directory and self._is_lexicon_file(event.src_path):
            self._schedule_reload()

    def on_modified(self, event: FileSystemEvent) -> None:
        """Handle file modification."""
        if not event.is_directory and self._is_lexicon_file(event.src_path):
            self._schedule_reload()

    def on_moved(self, event: FileSystemEvent) -> None:
        """Handle a file being moved onto the lexicon path (atomic saves)."""
        if not event.is_directory:
            dest_path = getattr(event, "dest_path", "")
            if dest_path and self._is_lexicon_file(dest_path):
                self._schedule_reload()

    def cancel(self) -> None:
        """Cancel any pending reload."""
        with self._lock:
            if self._timer:
                self._timer.cancel()
                self._timer = None


class LexiconWatcher:
    """Watches the lexicon file's directory for changes to the file."""

    def __init__(
        self,
        lexicon_path: Path,
        access: LexiconAccess,
        on_change: Callable[[], None],
        debounce_seconds: float = 0.5,
    ):
        self.lexicon_path = lexicon_path
        self.access = access
        self.on_change = on_change
        self.debounce_seconds = debounce_seconds
        self._observer: Observer | None = None
        self._handler: LexiconEventHandler | None = None

    def start(self) -> None:
        """Start watching the lexicon file."""
        if self._observer is not None:
            return  # Already running

        self._handler = LexiconEventHandler(
            self.lexicon_path,
            self.access,
            self.on_change,
            self.debounce_seconds,
        )

        self._observer = Observer()
        self._observer.schedule(
            self._handler,
            str(self.lexicon_path.resolve().parent),
            recursive=False,
        )
        self._observer.daemon = True
        self._observer.start()
        logger.info("Lexicon watcher started: %s", self.lexicon_path)

    def stop(self) -> None:
        """Stop watching."""
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=1.0)
            self._observer = None
        if self._handler is not None:
            self._handler.cancel()
            self._handler = None

    def __enter__(self) -> "LexiconWatcher":
        self.start()
        return self

    def __exit__(self, *args) -> None:
        self.stop()
