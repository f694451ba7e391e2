"""
Comparators for ordering opaque keys.

A comparator is any callable ``compare(a, b)`` returning a negative number
when ``a < b``, zero when they are equal and a positive number when
``a > b`` (the ``functools.cmp_to_key`` convention). It must define a total
order that stays the same for the lifetime of the container using it.
"""

from collections.abc import Callable
from enum import IntEnum
from numbers import Real
from typing import Any

CompareFunc = Callable[[Any, Any], int]


class Ordering(IntEnum):
    """Three-way comparison outcome."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


def natural_compare(a: Any, b: Any) -> Ordering:
    """Order keys by their own ``<`` operator."""
    if a < b:
        return Ordering.LESS
    if b < a:
        return Ordering.GREATER
    return Ordering.EQUAL


def reverse_compare(a: Any, b: Any) -> Ordering:
    """Order keys descending by their own ``<`` operator."""
    return natural_compare(b, a)


def key_compare(key: Callable[[Any], Any]) -> CompareFunc:
    """
    Build a comparator that orders keys by ``key(k)``.

    Args:
        key: Function mapping a stored key to the value it sorts by.

    Returns:
        A comparator suitable for RedBlackTree/OrderedMap.
    """

    def compare(a: Any, b: Any) -> Ordering:
        return natural_compare(key(a), key(b))

    return compare


def to_ordering(result: Any) -> Ordering:
    """
    Normalize a comparator result to an Ordering.

    Raises:
        TypeError: If the result is a bool or not a real number. A bool
            almost always means a ``<`` predicate was passed where a
            three-way comparator was expected.
    """
    if isinstance(result, bool) or not isinstance(result, Real):
        raise TypeError(
            f"comparator must return a negative, zero or positive number, "
            f"got {result!r}"
        )
    if result < 0:
        return Ordering.LESS
    if result > 0:
        return Ordering.GREATER
    return Ordering.EQUAL
