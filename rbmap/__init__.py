"""
Ordered key-value map backed by a Red-Black Tree.

This package provides an in-memory sorted map with:
- insert(key, value) - O(log N), reports keys that already existed
- remove(key) - O(log N), reports keys that were absent
- update(key, value) / get(key) - O(log N) point access
- iterate() - Ascending in-order traversal, sync or async

Keys are ordered by a caller-supplied three-way comparator.
"""

from rbmap.models import (
    InvariantViolationError,
    KeyAlreadyExistsError,
    KeyNotFoundError,
    OrderedMap,
    Ordering,
    Pair,
    RedBlackTree,
    key_compare,
    natural_compare,
    reverse_compare,
)

__all__ = [
    "OrderedMap",
    "RedBlackTree",
    "Pair",
    "Ordering",
    "key_compare",
    "natural_compare",
    "reverse_compare",
    "InvariantViolationError",
    "KeyAlreadyExistsError",
    "KeyNotFoundError",
]
