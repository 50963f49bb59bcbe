"""Shared fixtures for lexinav tests."""

from datetime import datetime, timezone

import pytest

from lexinav.lexicon import Lexicon, LexiconAccess
from lexinav.navigation import navigate

SAMPLE_LEXICON = """\
root:
\tanimal:
\t\t+ root.trait
\t\tcat:
\t\t\tkitten:
\t\tDog:
\tfruit:
\t\tapple:
\t\tBanana:
\tplant:
\ttrait:
\t\tfur:
\t\tlegs:
\t\t\tpaw:
"""

SAMPLE_DATE = datetime(2024, 1, 1, tzinfo=timezone.utc)
EDITED_DATE = datetime(2024, 6, 1, tzinfo=timezone.utc)


@pytest.fixture
def lexicon():
    """The sample lexicon, parsed fresh for each test."""
    return Lexicon.from_text(SAMPLE_LEXICON, date=SAMPLE_DATE)


@pytest.fixture
def access(lexicon):
    """Serialized access to the sample lexicon."""
    return LexiconAccess(lexicon)


@pytest.fixture
def root_state(lexicon, access):
    """A session focused on the lexicon root."""
    return navigate(lexicon.root, access)


@pytest.fixture
def fruit_state(lexicon, access):
    """A session focused on root.fruit (children apple and Banana, no types)."""
    return navigate(lexicon["root.fruit"], access)


@pytest.fixture
def animal_state(lexicon, access):
    """A session focused on root.animal (own and inherited children)."""
    return navigate(lexicon["root.animal"], access)


@pytest.fixture
def lexicon_file(tmp_path):
    """The sample lexicon written to a file."""
    path = tmp_path / "lexicon.taskpaper"
    path.write_text(SAMPLE_LEXICON)
    return path


@pytest.fixture
def edited_lexicon():
    """Build a newer copy of the sample lexicon with one text edit applied."""

    def build(old: str, new: str) -> Lexicon:
        assert old in SAMPLE_LEXICON
        return Lexicon.from_text(SAMPLE_LEXICON.replace(old, new), date=EDITED_DATE)

    return build
