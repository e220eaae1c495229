# src/portfolio_ledger_engine/sorted_list.py
from typing import Callable, Generic, Hashable, Iterable, Iterator, Optional, TypeVar

from .exceptions import InvalidArgumentError

T = TypeVar("T")

CompareFunction = Callable[[T, T], int]
UniqueKeyFunction = Callable[[T], Hashable]


class SortedList(Generic[T]):
    """
    A list kept in comparator order, with optional rejection of duplicate keys.

    Items comparing equal keep their insertion order: a new item is inserted after
    every existing item it compares equal to. When a unique-key function is given,
    adding an item whose key is already present is a no-op.
    """

    @classmethod
    def from_iterable(
        cls,
        items: Iterable[T],
        compare: CompareFunction,
        unique_key: Optional[UniqueKeyFunction] = None,
    ) -> "SortedList[T]":
        sorted_list = cls(compare, unique_key)
        for item in items:
            sorted_list.add(item)
        return sorted_list

    def __init__(self, compare: CompareFunction, unique_key: Optional[UniqueKeyFunction] = None):
        if not callable(compare):
            raise InvalidArgumentError("A comparison function must be provided to SortedList.")
        if unique_key is not None and not callable(unique_key):
            raise InvalidArgumentError("The unique key extractor of a SortedList must be callable.")

        self._compare = compare
        self._unique_key = unique_key
        self._items: list[T] = []
        self._keys: set = set()

    def add(self, item: T) -> bool:
        """
        Inserts the item at its sorted position (after any equal items).

        Returns False, leaving the list untouched, if the item's unique key is
        already present.
        """
        if self._unique_key is not None:
            key = self._unique_key(item)
            if key in self._keys:
                return False
            self._keys.add(key)

        low, high = 0, len(self._items) - 1
        insert_index = len(self._items)
        while low <= high:
            mid = (low + high) // 2
            if self._compare(item, self._items[mid]) < 0:
                insert_index = mid
                high = mid - 1
            else:
                low = mid + 1

        self._items.insert(insert_index, item)
        return True

    def get(self, index: int) -> Optional[T]:
        if index < 0 or index >= len(self._items):
            return None
        return self._items[index]

    def index_of(self, item: T) -> int:
        """Index of the first item comparing equal to `item`, or -1."""
        low, high = 0, len(self._items) - 1
        result_index = -1
        while low <= high:
            mid = (low + high) // 2
            comparison = self._compare(item, self._items[mid])
            if comparison == 0:
                # keep searching left for the first match
                result_index = mid
                high = mid - 1
            elif comparison < 0:
                high = mid - 1
            else:
                low = mid + 1
        return result_index

    def find(self, item: T) -> Optional[T]:
        index = self.index_of(item)
        return self._items[index] if index >= 0 else None

    def remove(self, item: T) -> bool:
        index = self.index_of(item)
        if index < 0:
            return False
        self.remove_at(index)
        return True

    def remove_at(self, index: int) -> Optional[T]:
        if index < 0 or index >= len(self._items):
            return None
        removed = self._items.pop(index)
        if self._unique_key is not None:
            self._keys.discard(self._unique_key(removed))
        return removed

    def clear(self) -> None:
        self._items.clear()
        self._keys.clear()

    def to_list(self) -> list[T]:
        """Returns a snapshot copy of the ordered items."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.to_list())

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"SortedList(size={len(self._items)})"
