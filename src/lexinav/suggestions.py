"""Ordering and filtering of the children offered for a focused lemma."""

from .lexicon import VALID_CHARACTER_OF_NAME, VALID_FIRST_CHARACTER_OF_NAME, Lemma


def children_sorted_by_type(lemma: Lemma) -> list[Lemma]:
    """Own children by name, then each type's children by key.

    Types are visited in id order. Type keys are resolved through the
    lemma's own child mapping so inherited entries come back re-parented
    under the lemma. Keys that do not resolve, or that were already
    offered, are skipped.
    """
    return [child for _, group in children_grouped_by_type(lemma) for child in group]


def children_grouped_by_type(lemma: Lemma) -> list[tuple[Lemma, list[Lemma]]]:
    """The same traversal as children_sorted_by_type, grouped by source.

    The first group is headed by the lemma itself and holds its own
    children; each following group is headed by one of its types.
    """
    own = sorted(lemma.own_children.values(), key=lambda child: child.name)
    groups = [(lemma, own)]
    seen = set(own)

    children = lemma.children
    for _, type_lemma in sorted(lemma.own_type.items()):
        inherited = []
        for key in sorted(type_lemma.children):
            child = children.get(key)
            if child is None or child in seen:
                continue
            seen.add(child)
            inherited.append(child)
        groups.append((type_lemma, inherited))

    return groups


def suggestions_for(lemma: Lemma, text: str) -> list[Lemma]:
    """Children of lemma whose names start with text, ignoring case."""
    prefix = text.lower()
    return [
        child
        for child in children_sorted_by_type(lemma)
        if child.name.lower().startswith(prefix)
    ]


def is_valid_character(character: str, appending_to: str) -> bool:
    """Check a typed character against the name rules for its position."""
    if len(character) != 1:
        return False
    if appending_to:
        return character in VALID_CHARACTER_OF_NAME
    return character in VALID_FIRST_CHARACTER_OF_NAME
