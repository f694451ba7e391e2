"""
OrderedIterable protocol for data structures that iterate in key order.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterator

from rbmap.models.pair import Pair


class OrderedIterable(ABC):
    """
    Protocol for data structures that yield their entries in ascending key order.

    Implementations must support:
    - Full iteration via __iter__
    - Explicit iterator construction via iterator()
    - Async iteration via __aiter__
    - Explicit async iterator construction via async_iterator()

    Every call returns a fresh iterator, so iteration is restartable.
    """

    @abstractmethod
    def __iter__(self) -> Iterator[Pair]:
        """Return an iterator over all key-value pairs in sorted order."""
        pass

    @abstractmethod
    def iterator(self) -> Iterator[Pair]:
        """
        Return a new iterator over all key-value pairs.

        Returns:
            Iterator yielding Pair(key, value) in ascending key order.
        """
        pass

    @abstractmethod
    def __aiter__(self) -> AsyncIterator[Pair]:
        """Return an async iterator over all key-value pairs in sorted order."""
        pass

    @abstractmethod
    def async_iterator(self) -> AsyncIterator[Pair]:
        """
        Return a new async iterator over all key-value pairs.

        Returns:
            AsyncIterator yielding Pair(key, value) in ascending key order.
        """
        pass
