"""Suggestion list widget showing the children offered for the focus."""

from rich.text import Text

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Label, ListItem, ListView, Static

from ..lexicon import Lemma
from ..navigation import NavigationState


class SuggestionItem(ListItem):
    """A list item representing one suggested lemma."""

    def __init__(self, lemma: Lemma, match_length: int = 0) -> None:
        super().__init__()
        self.lemma = lemma
        self.match_length = match_length

    def compose(self) -> ComposeResult:
        yield Label(format_suggestion(self.lemma, self.match_length))


def format_suggestion(lemma: Lemma, match_length: int = 0) -> Text:
    """Render a lemma name with the typed prefix highlighted.

    Inherited lemmas are tagged with the type they come from.
    """
    text = Text()
    text.append(lemma.name[:match_length], style="bold yellow")
    text.append(lemma.name[match_length:])
    if lemma.is_inherited:
        source = next(iter(lemma.own_type.values()))
        text.append(f"  + {source.parent or source}", style="dim")
    return text


class SuggestionListView(ListView):
    """ListView that leaves every key to the app."""

    can_focus = False


class SuggestionList(Vertical):
    """Widget displaying the suggestions of a navigation state."""

    DEFAULT_CSS = """
    SuggestionList {
        width: 1fr;
        height: 1fr;
    }

    SuggestionList > #suggestion-header {
        background: $primary-background;
        color: $accent;
        text-style: bold;
        padding: 0 1;
        height: 1;
    }

    SuggestionList > #suggestion-list-view {
        height: 1fr;
    }

    SuggestionList ListItem {
        padding: 0 1;
    }

    SuggestionList ListItem.--highlight {
        background: $accent;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._suggestions: tuple[Lemma, ...] = ()

    def compose(self) -> ComposeResult:
        yield Static("SUGGESTIONS", id="suggestion-header")
        yield SuggestionListView(id="suggestion-list-view")

    @property
    def list_view(self) -> ListView:
        return self.query_one("#suggestion-list-view", ListView)

    def show(self, state: NavigationState) -> None:
        """Show the suggestions and cursor of a navigation state."""
        list_view = self.list_view

        # Rebuild only when the suggestions changed
        if state.suggestions != self._suggestions or any(
            isinstance(item, SuggestionItem) and item.match_length != len(state.input)
            for item in list_view.children
        ):
            self._suggestions = state.suggestions
            list_view.clear()
            for lemma in state.suggestions:
                list_view.append(SuggestionItem(lemma, len(state.input)))

        header = self.query_one("#suggestion-header", Static)
        header.update(f"SUGGESTIONS ({len(state.suggestions)})")

        list_view.index = state.selected_index
