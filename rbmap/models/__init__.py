"""
Data models for the ordered map.
"""

from rbmap.models.pair import Pair
from rbmap.models.node import Color, Node
from rbmap.models.compare import (
    CompareFunc,
    Ordering,
    key_compare,
    natural_compare,
    reverse_compare,
)
from rbmap.models.exceptions import (
    InvariantViolationError,
    KeyAlreadyExistsError,
    KeyNotFoundError,
)
from rbmap.models.sortedcontainers import RedBlackTree
from rbmap.models.ordered_map import OrderedMap

__all__ = [
    "Pair",
    "Color",
    "Node",
    "CompareFunc",
    "Ordering",
    "key_compare",
    "natural_compare",
    "reverse_compare",
    "InvariantViolationError",
    "KeyAlreadyExistsError",
    "KeyNotFoundError",
    "RedBlackTree",
    "OrderedMap",
]
