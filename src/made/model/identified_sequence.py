from __future__ import annotations

import copy
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any, Generic, TypeVar

T = TypeVar("T")


def _is_tagged(entry: object) -> bool:
    return isinstance(entry, Mapping) and "id" in entry and "value" in entry


class IdentifiedSequence(Generic[T]):
    """An ordered sequence of values, each tagged with a unique id.

    The position of a value defines its index; the id is stable metadata
    that survives insertions and removals elsewhere in the sequence.

    A sequence can be created from already-tagged entries
    (``[{"id": 3, "value": "Si"}, ...]``) or from plain values, in
    which case ids ``0..n-1`` are assigned in order.

    Raises:
        ValueError: If tagged entries carry duplicate ids, or plain
            and tagged entries are mixed.
    """

    def __init__(self, entries: Iterable[Any] = ()) -> None:
        entries = list(entries)
        tagged = [_is_tagged(e) for e in entries]
        if entries and all(tagged):
            self._ids = [e["id"] for e in entries]
            self._values: list[T] = [copy.deepcopy(e["value"]) for e in entries]
        elif any(tagged):
            raise ValueError("cannot mix tagged and plain entries")
        else:
            self._ids = list(range(len(entries)))
            self._values = [copy.deepcopy(e) for e in entries]
        if len(set(self._ids)) != len(self._ids):
            raise ValueError(f"ids must be unique, got {self._ids}")

    @classmethod
    def from_pairs(cls, ids: Iterable[Any], values: Iterable[T]) -> IdentifiedSequence[T]:
        """Build a sequence from parallel id and value iterables."""
        ids = list(ids)
        values = list(values)
        if len(ids) != len(values):
            raise ValueError(
                f"got {len(ids)} ids for {len(values)} values"
            )
        return cls({"id": i, "value": v} for i, v in zip(ids, values))

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[T]:
        return iter(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IdentifiedSequence):
            return NotImplemented
        return self._ids == other._ids and self._values == other._values

    def __repr__(self) -> str:
        return f"IdentifiedSequence({self.to_list()!r})"

    @property
    def ids(self) -> list[Any]:
        return list(self._ids)

    @property
    def values(self) -> list[T]:
        return list(self._values)

    def items(self) -> Iterator[tuple[Any, T]]:
        """Iterate over ``(id, value)`` pairs in order."""
        return zip(self._ids, self._values)

    def get_by_index(self, index: int) -> T:
        return self._values[index]

    def get_by_id(self, id: Any) -> T:
        """Return the value tagged with *id*.

        Raises:
            KeyError: If no entry carries *id*.
        """
        try:
            return self._values[self._ids.index(id)]
        except ValueError:
            raise KeyError(id) from None

    def id_at(self, index: int) -> Any:
        return self._ids[index]

    def index_of(self, predicate: Callable[[T], bool]) -> int:
        """Return the index of the first value matching *predicate*, or -1."""
        for i, value in enumerate(self._values):
            if predicate(value):
                return i
        return -1

    def next_id(self) -> int:
        numeric = [i for i in self._ids if isinstance(i, int)]
        return max(numeric) + 1 if numeric else 0

    def add(self, value: T, id: Any = None) -> Any:
        """Append *value* and return its id.

        A fresh id is minted unless *id* is given.

        Raises:
            ValueError: If *id* is already in use.
        """
        if id is None:
            id = self.next_id()
        elif id in self._ids:
            raise ValueError(f"id {id!r} is already in use")
        self._ids.append(id)
        self._values.append(value)
        return id

    def remove(
        self,
        value: T | Callable[[T], bool] | None = None,
        id: Any = None,
    ) -> int:
        """Remove the first matching entry.

        When *id* is given the entry with that id is removed; otherwise
        the first entry equal to *value* (or satisfying it, when *value*
        is callable) is removed.  Nothing happens when no entry matches.

        Returns:
            The index of the removed entry, or ``-1`` if none matched.
        """
        if id is not None:
            index = self._ids.index(id) if id in self._ids else -1
        elif callable(value):
            index = self.index_of(value)
        elif value is not None:
            index = self.index_of(lambda v: v == value)
        else:
            index = -1
        if index > -1:
            self.remove_at(index)
        return index

    def remove_at(self, index: int) -> None:
        del self._ids[index]
        del self._values[index]

    def map_in_place(self, fn: Callable[[T], T]) -> None:
        """Replace every value with ``fn(value)``, keeping ids."""
        self._values = [fn(v) for v in self._values]

    def copy(self) -> IdentifiedSequence[T]:
        return IdentifiedSequence.from_pairs(self._ids, self._values)

    def to_list(self) -> list[dict]:
        """Serialise to ``[{"id": ..., "value": ...}, ...]``."""
        return [{"id": i, "value": v} for i, v in zip(self._ids, self._values)]
