"""Insertion-ordered set with positional access."""

from collections.abc import Callable, Hashable, Iterator
from typing import Generic, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


class IndexedSet(Generic[K, T]):
    """Set of items that keeps insertion order and supports indexing.

    Items live in a list; a dict maps each item's key to its current
    position. Membership, lookup and append are O(1). Removal shifts
    every later item down by one and re-indexes them, so the relative
    order of the remaining items never changes.
    """

    def __init__(self, key: Callable[[T], K]):
        self._key = key
        self._items: list[T] = []
        self._positions: dict[K, int] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __contains__(self, item: object) -> bool:
        try:
            return self._key(item) in self._positions  # type: ignore[arg-type]
        except (AttributeError, TypeError):
            return False

    def __getitem__(self, position: int) -> T:
        """Return the item at 0-based ``position``."""
        return self._items[position]

    def add(self, item: T) -> bool:
        """Append ``item`` unless an item with the same key exists.

        Returns:
            True if the item was added.
        """
        key = self._key(item)
        if key in self._positions:
            return False
        self._positions[key] = len(self._items)
        self._items.append(item)
        return True

    def position(self, item: T) -> int | None:
        """Return the 0-based position of ``item``'s key, if present."""
        return self._positions.get(self._key(item))

    def pop(self, position: int) -> T:
        """Remove and return the item at 0-based ``position``."""
        item = self._items.pop(position)
        del self._positions[self._key(item)]
        for index in range(position, len(self._items)):
            self._positions[self._key(self._items[index])] = index
        return item

    def discard(self, item: T) -> T | None:
        """Remove the item sharing ``item``'s key and return it."""
        position = self.position(item)
        if position is None:
            return None
        return self.pop(position)

    def snapshot(self) -> tuple[T, ...]:
        """Return the items as an immutable tuple."""
        return tuple(self._items)
