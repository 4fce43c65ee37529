"""Ordered multi-value stores backing headers and query strings.

Entries are kept as an ordered list of key/value pairs. Duplicate keys are
kept as separate entries and never merged, so repeated headers such as
`Set-Cookie` survive untouched.
"""

from collections.abc import Iterable, Iterator

from pydantic import BaseModel, Field, RootModel


class Pair(BaseModel):
    """A single key/value entry."""

    key: str
    value: str


class QueryString(RootModel[list[Pair]]):
    """Ordered query parameters. Keys are matched exactly."""

    root: list[Pair] = Field(default_factory=list)

    @classmethod
    def of(cls, pairs: Iterable[tuple[str, str]] = ()):
        """Build a store from `(key, value)` tuples, keeping their order."""
        return cls([Pair(key=k, value=v) for k, v in pairs])

    def _matches(self, stored: str, key: str) -> bool:
        return stored == key

    def insert(self, key: str, value: str) -> None:
        """Append an entry at the end."""
        self.root.append(Pair(key=key, value=value))

    def extend(self, pairs: Iterable[Pair]) -> None:
        for pair in pairs:
            self.insert(pair.key, pair.value)

    def first(self, key: str) -> str | None:
        return next(self.values_for(key), None)

    def first_mut(self, key: str) -> Pair | None:
        """Return the first matching entry; assign `.value` to edit it in place."""
        return next(self.values_for_mut(key), None)

    def values_for(self, key: str) -> Iterator[str]:
        return (pair.value for pair in self.root if self._matches(pair.key, key))

    def values_for_mut(self, key: str) -> Iterator[Pair]:
        return (pair for pair in self.root if self._matches(pair.key, key))

    def delete_first(self, key: str) -> str | None:
        for index, pair in enumerate(self.root):
            if self._matches(pair.key, key):
                return self.root.pop(index).value
        return None

    def delete_all(self, key: str) -> list[Pair]:
        """Remove every matching entry and return them in their original order."""
        removed = [pair for pair in self.root if self._matches(pair.key, key)]
        self.root = [pair for pair in self.root if not self._matches(pair.key, key)]
        return removed

    def set(self, key: str, value: str) -> None:
        """Overwrite every entry for `key` in place, or append one if none exists."""
        found = False
        for pair in self.values_for_mut(key):
            pair.value = value
            found = True
        if not found:
            self.insert(key, value)

    def pairs(self) -> list[tuple[str, str]]:
        return [(pair.key, pair.value) for pair in self.root]

    def __iter__(self) -> Iterator[Pair]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __bool__(self) -> bool:
        return bool(self.root)


class Headers(QueryString):
    """Ordered header lines. Keys are matched case-insensitively."""

    def _matches(self, stored: str, key: str) -> bool:
        return stored.lower() == key.lower()
