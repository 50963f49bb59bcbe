"""Breadcrumb and status bars for the focused lemma."""

from rich.text import Text

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Static

from ..navigation import NavigationState


def format_breadcrumbs(state: NavigationState) -> Text:
    """Render the breadcrumb path, dimming lemmas above the navigation root."""
    text = Text()
    above_root = state.root in state.breadcrumbs
    for i, lemma in enumerate(state.breadcrumbs):
        if i:
            text.append(".", style="dim")
        if lemma == state.root:
            above_root = False
        text.append(lemma.name, style="dim" if above_root else "bold")
    if state.input:
        marker = "?" if state.error is None else "+"
        text.append(marker, style="bold green" if state.error is None else "bold red")
        text.append(state.input, style="bold yellow")
    return text


def format_status(state: NavigationState) -> Text:
    """Render the last error, or a short summary when there is none."""
    if state.error is not None:
        return Text(str(state.error), style="bold red")
    selected = state.selected_suggestion
    if selected is None:
        return Text("No suggestions", style="dim")
    return Text(f"{selected}  ({state.selected_index + 1}/{len(state.suggestions)})")


class BreadcrumbBar(Vertical):
    """Shows where the session is focused and what the last transition did."""

    DEFAULT_CSS = """
    BreadcrumbBar {
        width: 100%;
        height: 2;
        background: $primary-background;
        padding: 0 1;
    }

    BreadcrumbBar > Static {
        height: 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static("", id="breadcrumbs")
        yield Static("", id="status")

    def show(self, state: NavigationState) -> None:
        """Show the breadcrumbs, input and status of a navigation state."""
        self.query_one("#breadcrumbs", Static).update(format_breadcrumbs(state))
        self.query_one("#status", Static).update(format_status(state))
