"""
OrderedMap - public ordered key-value map over a Red-Black Tree.
"""

import logging
from collections.abc import AsyncIterator, Iterable, Iterator
from typing import Any

from rbmap.interfaces.ordered_iterable import OrderedIterable
from rbmap.models.compare import CompareFunc
from rbmap.models.exceptions import KeyAlreadyExistsError, KeyNotFoundError
from rbmap.models.pair import Pair
from rbmap.models.sortedcontainers import RedBlackTree

logger = logging.getLogger(__name__)


class OrderedMap(OrderedIterable):
    """
    Ordered map backed by a RedBlackTree.

    Supports:
    - O(log N) insert, remove, update, get operations
    - Ascending iteration (sync and async)
    - Batch insertion

    insert() and remove() signal AlreadyExists/NotFound by raising
    KeyAlreadyExistsError/KeyNotFoundError. Both are ordinary, recoverable
    outcomes: the map is always left consistent.

    Not thread-safe; see RedBlackTree.
    """

    def __init__(
        self, compare: CompareFunc | None = None, *, check_invariants: bool = False
    ) -> None:
        """
        Initialize an empty map.

        Args:
            compare: Three-way key comparator. Defaults to natural ordering.
            check_invariants: Validate the tree after every mutation (slow).
        """
        self._tree = RedBlackTree(compare=compare, check_invariants=check_invariants)

    @property
    def tree(self) -> RedBlackTree:
        return self._tree

    def size(self) -> int:
        return self._tree.size()

    def __len__(self) -> int:
        return self._tree.size()

    def insert(self, key: Any, value: Any) -> None:
        """
        Insert a key-value pair.

        Args:
            key: The key to insert.
            value: The value to store.

        Raises:
            KeyAlreadyExistsError: If key was already present. Its value has
                been overwritten with the new one before the error is raised.
        """
        if not self._tree.put(key, value):
            logger.debug(f"Overwrote existing key {key!r}")
            raise KeyAlreadyExistsError(key)

    def remove(self, key: Any) -> None:
        """
        Remove a key and its value.

        Args:
            key: The key to remove.

        Raises:
            KeyNotFoundError: If key is absent.
        """
        if not self._tree.delete(key):
            logger.debug(f"Remove of missing key {key!r}")
            raise KeyNotFoundError(key)

    def update(self, key: Any, value: Any) -> bool:
        """
        Overwrite the value of an existing key.

        Args:
            key: The key to update.
            value: The new value.

        Returns:
            True if key existed and was updated, False otherwise.
        """
        return self._tree.update(key, value)

    def get(self, key: Any, default: Any = None) -> Any:
        """
        Retrieve value by key.

        Args:
            key: The key to look up.
            default: Returned when key is absent.

        Returns:
            The value if found, default otherwise.
        """
        return self._tree.get(key, default)

    def has(self, key: Any) -> bool:
        return self._tree.has(key)

    def __contains__(self, key: Any) -> bool:
        return self._tree.has(key)

    def batch_insert(self, pairs: Iterable[tuple[Any, Any]]) -> list[bool]:
        """
        Insert or overwrite multiple key-value pairs.

        Args:
            pairs: Iterable of (key, value) tuples, applied in order.

        Returns:
            For each pair, True if it created a new entry, False if it
            overwrote an existing one.
        """
        results = []
        for key, value in pairs:
            results.append(self._tree.put(key, value))
        return results

    def iterate(self) -> Iterator[Pair]:
        """Return a lazy iterator of Pair(key, value) in ascending key order."""
        return self._tree.iterator()

    def __iter__(self) -> Iterator[Pair]:
        return self._tree.iterator()

    def iterator(self) -> Iterator[Pair]:
        return self._tree.iterator()

    def __aiter__(self) -> AsyncIterator[Pair]:
        return self._tree.async_iterator()

    def async_iterator(self) -> AsyncIterator[Pair]:
        return self._tree.async_iterator()

    def __repr__(self) -> str:
        return f"OrderedMap(size={self.size()})"
