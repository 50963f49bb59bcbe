"""Main Textual application for lexinav."""

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.events import Key
from textual.widgets import Footer
from textual.worker import Worker

from . import navigation
from .config import Config
from .lexicon import Lexicon, LexiconAccess
from .navigation import NavigationState
from .watcher import LexiconWatcher
from .widgets import BreadcrumbBar, SuggestionList

logger = logging.getLogger(__name__)


class LexiconApp(App):
    """lexinav - Lexicon Navigator TUI."""

    TITLE = "lexinav"
    SUB_TITLE = "Lexicon Navigator"

    CSS = """
    #suggestions {
        height: 1fr;
        border: solid $accent;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", priority=True),
        Binding("up", "select_previous", "Prev", show=False, priority=True),
        Binding("down", "select_next", "Next", show=False, priority=True),
        Binding("shift+tab", "select_previous", "Prev", show=False, priority=True),
        Binding("tab", "select_next", "Next", priority=True),
        Binding("enter", "enter", "Enter", priority=True),
        Binding("right", "enter", "Enter", show=False, priority=True),
        Binding("backspace", "backspace", "Back", priority=True),
        Binding("left", "back_out", "Up", show=False, priority=True),
        Binding("escape", "clear", "Clear", priority=True),
        Binding("ctrl+r", "reload", "Reload", priority=True),
    ]

    def __init__(
        self,
        config: Config,
        access: LexiconAccess,
        state: NavigationState,
    ) -> None:
        super().__init__()
        self.config = config
        self.access = access
        self.state = state
        self._watcher: LexiconWatcher | None = None

    def compose(self) -> ComposeResult:
        yield BreadcrumbBar(id="breadcrumb-bar")
        yield SuggestionList(id="suggestions")
        yield Footer()

    async def on_mount(self) -> None:
        """Render the initial state and start watching the lexicon file."""
        self._render_state()

        if self.config.watch.enabled and self.access.lexicon.path is not None:
            self._watcher = LexiconWatcher(
                self.access.lexicon.path,
                self.access,
                self._on_lexicon_change,
                debounce_seconds=self.config.watch.debounce_seconds,
            )
            self._watcher.start()

    async def on_unmount(self) -> None:
        """Clean up when app closes."""
        if self._watcher:
            self._watcher.stop()

    def _set_state(self, state: NavigationState) -> None:
        self.state = state
        self._render_state()

    def _render_state(self) -> None:
        self.query_one("#breadcrumb-bar", BreadcrumbBar).show(self.state)
        self.query_one("#suggestions", SuggestionList).show(self.state)
        self.sub_title = self.state.description

    def on_key(self, event: Key) -> None:
        """Type printable characters into the filter."""
        if event.is_printable and event.character:
            event.stop()
            self._set_state(navigation.append(self.state, event.character, self.access))

    def action_select_previous(self) -> None:
        self._set_state(navigation.select_previous(self.state))

    def action_select_next(self) -> None:
        self._set_state(navigation.select_next(self.state))

    def action_enter(self) -> None:
        self._set_state(navigation.enter(self.state, self.access))

    def action_backspace(self) -> None:
        self._set_state(navigation.backspace(self.state, self.access))

    def action_back_out(self) -> None:
        """Drop the whole filter, or back out one level when not filtering."""
        if self.state.input:
            self._set_state(navigation.replace(self.state, "", self.access))
        else:
            self._set_state(navigation.backspace(self.state, self.access))

    def action_clear(self) -> None:
        """Start over at the focus, keeping the cursor on the highlighted lemma."""
        self._set_state(
            navigation.reset(
                self.state,
                self.access,
                selecting=self.state.selected_suggestion,
                root=self.state.root,
            )
        )

    def action_reload(self) -> None:
        """Reload the lexicon file in the background."""
        if self.access.lexicon.path is None:
            self.notify("Lexicon was not loaded from a file", severity="warning")
            return
        self.notify("Reloading...")
        self.run_worker(self._background_reload, exclusive=True, thread=True)

    def _background_reload(self) -> Lexicon:
        """Load the lexicon file in a background thread."""
        return Lexicon.load(self.access.lexicon.path)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        """Handle background reload completion."""
        if event.worker.name != "_background_reload":
            return

        if event.state.name == "ERROR":
            logger.warning("Manual reload failed: %s", event.worker.error)
            self.notify(f"Reload failed: {event.worker.error}", severity="error")
            return

        if event.state.name != "SUCCESS":
            return

        lexicon = event.worker.result
        if lexicon is not None:
            self.access.swap(lexicon)
            self._handle_lexicon_change()

    def _on_lexicon_change(self) -> None:
        """Handle a reloaded lexicon (called from the watcher thread)."""
        self.call_from_thread(self._handle_lexicon_change)

    def _handle_lexicon_change(self) -> None:
        """Rebase the session onto the current lexicon on the main thread."""
        self._set_state(navigation.update(self.state, self.access))
        self.notify("Lexicon updated")


def run_app(config: Config, access: LexiconAccess, state: NavigationState) -> None:
    """Run the lexinav application."""
    app = LexiconApp(config, access, state)
    app.run()
