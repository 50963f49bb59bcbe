"""Navigation state for browsing a lexicon one level at a time.

A NavigationState is an immutable value. Every transition below takes a
state (plus whatever input it needs) and returns a new one; failures are
recorded in ``state.error`` instead of being raised. Transitions that read
the lexicon do so through an explicit LexiconAccess handle, holding its
lock for exactly one observation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace as _evolve
from datetime import datetime

from .lexicon import Lemma, Lexicon, LexiconAccess
from .suggestions import children_sorted_by_type, is_valid_character, suggestions_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigationError:
    """Base for the outcomes a transition can record in ``state.error``."""


@dataclass(frozen=True)
class InvalidInputCharacter(NavigationError):
    """A typed character is not allowed at its position in a name."""

    character: str

    def __str__(self) -> str:
        return f"Invalid character {self.character!r}"


@dataclass(frozen=True)
class NoChildrenMatchInput(NavigationError):
    """The filter text matches none of the focused lemma's children."""

    input: str

    def __str__(self) -> str:
        return f"No children match {self.input!r}"


@dataclass(frozen=True)
class InvalidSelection(NavigationError):
    """A selection index is out of bounds, or there is nothing to select."""

    index: int | None

    def __str__(self) -> str:
        if self.index is None:
            return "Nothing selected"
        return f"Invalid selection {self.index}"


@dataclass(frozen=True)
class NavigationState:
    """Snapshot of a navigation session over a lexicon."""

    observed_at: datetime
    root: Lemma
    breadcrumbs: tuple[Lemma, ...]
    suggestions: tuple[Lemma, ...] = ()
    selected_index: int | None = None
    input: str = ""
    error: NavigationError | None = None

    @property
    def lemma(self) -> Lemma:
        """The focused lemma."""
        return self.breadcrumbs[-1]

    @property
    def selected_suggestion(self) -> Lemma | None:
        i = self.selected_index
        if i is None or not 0 <= i < len(self.suggestions):
            return None
        return self.suggestions[i]

    @property
    def description(self) -> str:
        if not self.input:
            return self.lemma.description
        marker = "?" if self.error is None else "+"
        return f"{self.lemma}{marker}{self.input}"

    def __str__(self) -> str:
        return self.description


def _first_index(suggestions: tuple[Lemma, ...]) -> int | None:
    return 0 if suggestions else None


def _index_of(suggestions: tuple[Lemma, ...], lemma: Lemma | None) -> int | None:
    if lemma is None:
        return None
    try:
        return suggestions.index(lemma)
    except ValueError:
        return None


def _bounded_root(root: Lemma, breadcrumbs: tuple[Lemma, ...]) -> Lemma:
    """Keep the navigation bound on the breadcrumb path."""
    if root in breadcrumbs:
        return root
    logger.warning(
        "Root %s is not an ancestor of %s, using %s",
        root, breadcrumbs[-1], breadcrumbs[0],
    )
    return breadcrumbs[0]


# Construction


def _navigate(lemma: Lemma, root: Lemma | None = None) -> NavigationState:
    breadcrumbs = tuple(lemma.lineage)
    suggestions = tuple(children_sorted_by_type(lemma))
    return NavigationState(
        observed_at=lemma.lexicon.date,
        root=_bounded_root(root or breadcrumbs[0], breadcrumbs),
        breadcrumbs=breadcrumbs,
        suggestions=suggestions,
        selected_index=_first_index(suggestions),
    )


def navigate(lemma: Lemma, access: LexiconAccess, root: Lemma | None = None) -> NavigationState:
    """Start a session focused on lemma, bounded above by root."""
    with access.read():
        return _navigate(lemma, root)


# Selection


def select_previous(state: NavigationState, cycle: bool = True) -> NavigationState:
    """Move the cursor up; from no selection this lands on index 0."""
    current = 1 if state.selected_index is None else state.selected_index
    return select(state, current - 1, cycle=cycle)


def select_next(state: NavigationState, cycle: bool = True) -> NavigationState:
    """Move the cursor down; from no selection this lands on index 0."""
    current = -1 if state.selected_index is None else state.selected_index
    return select(state, current + 1, cycle=cycle)


def select(state: NavigationState, index: int, cycle: bool = False) -> NavigationState:
    """Select a suggestion by index.

    Without cycling the index must be in bounds, otherwise the cursor stays
    put and InvalidSelection is recorded. With cycling the index wraps
    around the suggestion list in both directions.
    """
    count = len(state.suggestions)

    if not cycle:
        if not 0 <= index < count:
            return _evolve(state, error=InvalidSelection(index))
        return _evolve(state, selected_index=index, error=None)

    if count == 0:
        return _evolve(state, error=InvalidSelection(index))
    # Python's modulo is floored, so negative indices wrap from the end
    return _evolve(state, selected_index=index % count, error=None)


# Text input


def _filtered(state: NavigationState, text: str) -> NavigationState:
    """Recompute suggestions for text from the focus's full child set."""
    suggestions = tuple(suggestions_for(state.lemma, text))
    error = NoChildrenMatchInput(text) if text and not suggestions else None
    return _evolve(
        state,
        input=text,
        suggestions=suggestions,
        selected_index=_first_index(suggestions),
        error=error,
    )


def _append(state: NavigationState, character: str) -> NavigationState:
    state = _evolve(state, error=None)
    if not is_valid_character(character, appending_to=state.input):
        return _evolve(state, error=InvalidInputCharacter(character))
    return _filtered(state, state.input + character)


def _replace(state: NavigationState, text: str) -> NavigationState:
    state = _evolve(state, input="", error=None)
    accepted = ""
    for character in text:
        if not is_valid_character(character, appending_to=accepted):
            return _evolve(state, input=accepted, error=InvalidInputCharacter(character))
        accepted += character
    return _filtered(state, accepted)


def append(state: NavigationState, character: str, access: LexiconAccess) -> NavigationState:
    """Type one character into the filter."""
    with access.read():
        return _append(state, character)


def replace(state: NavigationState, text: str, access: LexiconAccess) -> NavigationState:
    """Retype the whole filter, stopping at the first invalid character."""
    with access.read():
        return _replace(state, text)


def backspace(state: NavigationState, access: LexiconAccess) -> NavigationState:
    """Delete one filter character, or back out one level when not filtering.

    Backing out stops at ``state.root``; at the root, or with a single
    breadcrumb, the state is returned unchanged.
    """
    with access.read():
        if state.input:
            return _filtered(state, state.input[:-1])

        if len(state.breadcrumbs) > 1:
            if state.lemma == state.root:
                return state
            removed = state.breadcrumbs[-1]
            breadcrumbs = state.breadcrumbs[:-1]
            suggestions = tuple(children_sorted_by_type(breadcrumbs[-1]))
            return _evolve(
                state,
                breadcrumbs=breadcrumbs,
                suggestions=suggestions,
                selected_index=_index_of(suggestions, removed),
                error=None,
            )

        return state


# Commit


def enter(state: NavigationState, access: LexiconAccess) -> NavigationState:
    """Descend into the selected suggestion."""
    with access.read():
        selected = state.selected_suggestion
        if selected is None:
            return _evolve(state, error=InvalidSelection(state.selected_index))

        suggestions = tuple(children_sorted_by_type(selected))
        return _evolve(
            state,
            breadcrumbs=state.breadcrumbs + (selected,),
            input="",
            suggestions=suggestions,
            selected_index=_first_index(suggestions),
            error=None,
        )


# Rebase and reset


def update(
    state: NavigationState,
    access: LexiconAccess,
    lexicon: Lexicon | None = None,
) -> NavigationState:
    """Re-synchronize a session with the current (or given) lexicon.

    The root and focus are looked up again by id, falling back to the
    lexicon root when they no longer exist. Breadcrumbs are rebuilt from
    the focus's lineage, the pending input is replayed, and the cursor
    follows the previously selected lemma if it is still offered.
    """
    with access.read() as current:
        lexicon = lexicon or current
        previous = state.selected_suggestion

        focus = lexicon.get(state.lemma.id) or lexicon.root
        root = lexicon.get(state.root.id) or lexicon.root
        breadcrumbs = tuple(focus.lineage)
        suggestions = tuple(children_sorted_by_type(focus))

        rebased = _evolve(
            state,
            observed_at=lexicon.date,
            root=_bounded_root(root, breadcrumbs),
            breadcrumbs=breadcrumbs,
            suggestions=suggestions,
            selected_index=_first_index(suggestions),
        )
        rebased = _replace(rebased, state.input)

        index = _index_of(rebased.suggestions, previous)
        if index is not None:
            rebased = _evolve(rebased, selected_index=index)

    logger.debug("Rebased %s onto lexicon dated %s", rebased, lexicon.date.isoformat())
    return rebased


def reset(
    state: NavigationState,
    access: LexiconAccess,
    to: Lemma | None = None,
    selecting: Lemma | None = None,
    root: Lemma | None = None,
) -> NavigationState:
    """Start over at ``to`` (default: the current focus), optionally
    placing the cursor on ``selecting``.

    Nothing of the current state is kept; pass ``root`` to bound the fresh
    session the same way.
    """
    with access.read():
        fresh = _navigate(to or state.lemma, root)
        index = _index_of(fresh.suggestions, selecting)
        if index is not None:
            fresh = _evolve(fresh, selected_index=index)
        return fresh
