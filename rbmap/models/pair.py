"""
Pair - key-value entry produced by ordered traversal.
"""

from typing import Any, NamedTuple


class Pair(NamedTuple):
    """A key and its associated value, as yielded by in-order traversal."""

    key: Any
    value: Any
