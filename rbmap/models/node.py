"""
Node and Color for the Red-Black Tree.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class Color(IntEnum):
    """Node color for Red-Black Tree."""

    RED = 0
    BLACK = 1


@dataclass(eq=False)
class Node:
    """
    Node in the Red-Black Tree.

    A node with no children is a sentinel leaf: it stores no entry and is
    always black. Every live node has exactly two children, either of which
    may be a sentinel.

    Navigation helpers (is_left, sibling, uncle, ...) assume the node has a
    parent; callers check is_root() first.
    """

    key: Any = None
    value: Any = None
    color: Color = Color.RED
    left: "Node | None" = field(default=None, repr=False)
    right: "Node | None" = field(default=None, repr=False)
    parent: "Node | None" = field(default=None, repr=False)

    @classmethod
    def sentinel(cls) -> "Node":
        return cls(color=Color.BLACK)

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def is_root(self) -> bool:
        return self.parent is None

    def is_red(self) -> bool:
        return self.color == Color.RED

    def is_black(self) -> bool:
        return self.color == Color.BLACK

    def is_left(self) -> bool:
        return self is self.parent.left

    def is_right(self) -> bool:
        return self is self.parent.right

    def grandparent(self) -> "Node | None":
        return self.parent.parent

    def sibling(self) -> "Node":
        if self.is_left():
            return self.parent.right
        return self.parent.left

    def uncle(self) -> "Node":
        return self.parent.sibling()
