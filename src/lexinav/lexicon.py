"""Lexicon tree: lemmas, type inheritance, outline parsing and guarded access."""

from __future__ import annotations

import logging
import string
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

logger = logging.getLogger(__name__)

# Characters allowed at the start of a lemma name, and anywhere after it
VALID_FIRST_CHARACTER_OF_NAME = frozenset(string.ascii_letters)
VALID_CHARACTER_OF_NAME = frozenset(string.ascii_letters + string.digits + "_")

# Prefix of a type declaration line, e.g. "+ root.trait"
TYPE_PREFIX = "+ "


class LexiconError(ValueError):
    """Raised when a lexicon outline cannot be read or parsed."""

    def __init__(self, message: str, line: int | None = None) -> None:
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


def is_valid_name(name: str) -> bool:
    """Check a whole lemma name against the validity character sets."""
    if not name or name[0] not in VALID_FIRST_CHARACTER_OF_NAME:
        return False
    return all(c in VALID_CHARACTER_OF_NAME for c in name[1:])


class Lemma:
    """A named node of a lexicon.

    Lemmas declared in the outline own their children and list the ids of
    their types. Children inherited from a type are synthesized on access:
    they are parented under the inheriting lemma and take their source as
    their only type, so inheritance carries down the tree.
    """

    def __init__(
        self,
        name: str,
        parent: Lemma | None = None,
        type_ids: list[str] | None = None,
        source: Lemma | None = None,
    ) -> None:
        self.name = name
        self.parent = parent
        self._own_children: dict[str, Lemma] = {}
        self._type_ids: list[str] = list(type_ids or [])
        self._source = source
        self._lexicon: Lexicon | None = parent._lexicon if parent else None

    @property
    def id(self) -> str:
        if self.parent is None:
            return self.name
        return f"{self.parent.id}.{self.name}"

    @property
    def lexicon(self) -> Lexicon:
        if self._lexicon is None:
            raise RuntimeError(f"Lemma {self.id} is not attached to a lexicon")
        return self._lexicon

    @property
    def is_inherited(self) -> bool:
        return self._source is not None

    @property
    def own_children(self) -> dict[str, Lemma]:
        return dict(self._own_children)

    @property
    def own_type(self) -> dict[str, Lemma]:
        """Types of this lemma keyed by id. Unknown type ids are skipped."""
        if self._source is not None:
            return {self._source.id: self._source}

        types: dict[str, Lemma] = {}
        for type_id in self._type_ids:
            lemma = self._lexicon.declared(type_id) if self._lexicon else None
            if lemma is None:
                logger.debug("Type %s of %s does not resolve", type_id, self.id)
                continue
            types[lemma.id] = lemma
        return types

    @property
    def children(self) -> dict[str, Lemma]:
        """Own children followed by children inherited from types."""
        return self._children(frozenset())

    def _children(self, visiting: frozenset[str]) -> dict[str, Lemma]:
        visiting = visiting | {self.id}
        result = dict(self._own_children)
        for type_id, type_lemma in sorted(self.own_type.items()):
            if type_id in visiting:
                continue
            for key, child in type_lemma._children(visiting).items():
                if key not in result:
                    result[key] = Lemma(key, parent=self, source=child)
        return result

    @property
    def lineage(self) -> list[Lemma]:
        """Lemmas from the root down to this one."""
        lineage = []
        lemma: Lemma | None = self
        while lemma is not None:
            lineage.append(lemma)
            lemma = lemma.parent
        lineage.reverse()
        return lineage

    @property
    def description(self) -> str:
        return self.id

    def add_child(self, child: Lemma) -> None:
        self._own_children[child.name] = child

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Lemma):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return self.id

    def __repr__(self) -> str:
        return f"Lemma({self.id!r})"


class Lexicon:
    """An immutable snapshot of a lemma tree."""

    def __init__(
        self,
        root: Lemma,
        date: datetime | None = None,
        path: Path | None = None,
    ) -> None:
        self.root = root
        self.date = date or datetime.now(timezone.utc)
        self.path = path
        self._attach(root)

    def _attach(self, lemma: Lemma) -> None:
        lemma._lexicon = self
        for child in lemma._own_children.values():
            self._attach(child)

    def declared(self, lemma_id: str) -> Lemma | None:
        """Look up a lemma written in the outline, ignoring inheritance."""
        names = lemma_id.split(".")
        if names[0] != self.root.name:
            return None
        lemma = self.root
        for name in names[1:]:
            child = lemma._own_children.get(name)
            if child is None:
                return None
            lemma = child
        return lemma

    def get(self, lemma_id: str) -> Lemma | None:
        """Look up a lemma by id, following inherited children too."""
        names = lemma_id.split(".")
        if names[0] != self.root.name:
            return None
        lemma = self.root
        for name in names[1:]:
            child = lemma.children.get(name)
            if child is None:
                return None
            lemma = child
        return lemma

    def __getitem__(self, lemma_id: str) -> Lemma:
        lemma = self.get(lemma_id)
        if lemma is None:
            raise KeyError(lemma_id)
        return lemma

    def __contains__(self, lemma_id: object) -> bool:
        return isinstance(lemma_id, str) and self.get(lemma_id) is not None

    @classmethod
    def from_text(
        cls,
        text: str,
        date: datetime | None = None,
        path: Path | None = None,
    ) -> Lexicon:
        """Parse a TaskPaper-style outline.

        Format:
        - One tab of indentation per level
        - 'name:' declares a lemma under the nearest shallower lemma
        - '+ some.id' adds a type (a declared lemma) to the enclosing lemma
        - Blank lines are ignored
        """
        root: Lemma | None = None
        # (depth, lemma) for the current chain of open lemmas
        stack: list[tuple[int, Lemma]] = []

        for number, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue

            body = line.lstrip("\t")
            depth = len(line) - len(body)
            stripped = body.rstrip()
            if body[:1].isspace():
                raise LexiconError("indent with tabs only", number)

            while stack and stack[-1][0] >= depth:
                stack.pop()

            # Type: '+ id' belongs to the lemma one level up
            if stripped.startswith(TYPE_PREFIX):
                if not stack or stack[-1][0] != depth - 1:
                    raise LexiconError("type declared outside of a lemma", number)
                type_id = stripped[len(TYPE_PREFIX):].strip()
                if not type_id or not all(is_valid_name(n) for n in type_id.split(".")):
                    raise LexiconError(f"invalid type id {type_id!r}", number)
                stack[-1][1]._type_ids.append(type_id)
                continue

            # Lemma: 'name:'
            if stripped.endswith(":"):
                name = stripped[:-1].strip()
                if not is_valid_name(name):
                    raise LexiconError(f"invalid lemma name {name!r}", number)

                if depth == 0:
                    if root is not None:
                        raise LexiconError("more than one root lemma", number)
                    root = Lemma(name)
                    stack.append((0, root))
                    continue

                if not stack or stack[-1][0] != depth - 1:
                    raise LexiconError("unexpected indentation", number)
                parent = stack[-1][1]
                if name in parent._own_children:
                    raise LexiconError(f"duplicate lemma {parent.id}.{name}", number)
                lemma = Lemma(name, parent=parent)
                parent.add_child(lemma)
                stack.append((depth, lemma))
                continue

            raise LexiconError(f"cannot parse {stripped!r}", number)

        if root is None:
            raise LexiconError("lexicon has no root lemma")

        return cls(root, date=date, path=path)

    @classmethod
    def load(cls, path: Path) -> Lexicon:
        """Load a lexicon outline file, dated by its modification time."""
        try:
            text = path.read_text(encoding="utf-8")
            mtime = path.stat().st_mtime
        except (OSError, UnicodeDecodeError) as e:
            raise LexiconError(f"cannot read {path}: {e}") from e

        date = datetime.fromtimestamp(mtime, tz=timezone.utc)
        lexicon = cls.from_text(text, date=date, path=path)
        logger.info("Loaded lexicon %s from %s", lexicon.root.id, path)
        return lexicon


class LexiconAccess:
    """Serialized access to the current lexicon snapshot.

    Every navigation transition that reads the tree does so inside
    read(). Replacing the snapshot with swap() takes the same lock.
    The lock is not re-entrant: code holding it must not call back
    into read() or swap().
    """

    def __init__(self, lexicon: Lexicon) -> None:
        self._lexicon = lexicon
        self._lock = threading.Lock()

    @property
    def lexicon(self) -> Lexicon:
        with self._lock:
            return self._lexicon

    @contextmanager
    def read(self) -> Generator[Lexicon, None, None]:
        """Hold the lock for one observation of the current snapshot."""
        with self._lock:
            yield self._lexicon

    def swap(self, lexicon: Lexicon) -> Lexicon:
        """Install a new snapshot and return the one it replaced."""
        with self._lock:
            previous = self._lexicon
            self._lexicon = lexicon
        logger.debug("Lexicon snapshot swapped (%s)", lexicon.date.isoformat())
        return previous
