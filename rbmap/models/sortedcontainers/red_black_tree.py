"""
Red-Black Tree implementation for sorted key-value storage.

All operations are O(log N). Keys are opaque and ordered by an injected
three-way comparator.
"""

import logging
from collections.abc import AsyncIterator, Iterator
from typing import Any

from rbmap.interfaces.sorted_container import SortedContainer
from rbmap.models.compare import CompareFunc, Ordering, natural_compare, to_ordering
from rbmap.models.exceptions import InvariantViolationError
from rbmap.models.node import Color, Node
from rbmap.models.pair import Pair

logger = logging.getLogger(__name__)


class RedBlackTree(SortedContainer):
    """
    Red-Black Tree implementation of SortedContainer.

    Properties maintained:
    1. Every node is either red or black
    2. Root is always black
    3. Every sentinel leaf is black
    4. Red nodes cannot have red children
    5. Every path from a node to its descendant leaves has the same
       number of black nodes

    All leaf positions share one black sentinel node, so every live node has
    two children and the fixup code needs no None checks.

    Not thread-safe: callers that mutate from several threads must hold an
    external lock. Iterators are fail-fast and raise RuntimeError if the tree
    gains or loses a key while they are in progress.
    """

    def __init__(
        self, compare: CompareFunc | None = None, check_invariants: bool = False
    ) -> None:
        """
        Initialize an empty tree.

        Args:
            compare: Three-way comparator for keys. Defaults to natural_compare.
            check_invariants: Validate the whole tree after every mutation.
                              O(N) per operation, intended for tests.
        """
        if compare is None:
            compare = natural_compare
        if not callable(compare):
            raise TypeError(f"compare must be callable, got {compare!r}")

        self._cmp = compare
        self._check_invariants = check_invariants
        self._nil = Node.sentinel()
        self._root: Node = self._nil
        self._size: int = 0
        # Bumped whenever a key is added or removed; value overwrites keep it.
        self._version: int = 0

    def put(self, key: Any, value: Any) -> bool:
        """Insert or update a key-value pair. O(log N)"""
        parent = None
        current = self._root
        went_left = False

        while not current.is_leaf():
            order = self._compare(key, current.key)
            if order == Ordering.EQUAL:
                current.value = value
                return False
            parent = current
            went_left = order == Ordering.LESS
            current = current.left if went_left else current.right

        new_node = Node(
            key=key,
            value=value,
            color=Color.RED,
            left=self._nil,
            right=self._nil,
            parent=parent,
        )
        if parent is None:
            self._root = new_node
        elif went_left:
            parent.left = new_node
        else:
            parent.right = new_node

        self._size += 1
        self._version += 1
        self._fix_insert(new_node)
        self._debug_validate("put")
        return True

    def get(self, key: Any, default: Any = None) -> Any:
        """Retrieve value by key. O(log N)"""
        node = self._find_node(key)
        return default if node.is_leaf() else node.value

    def update(self, key: Any, value: Any) -> bool:
        """Overwrite the value of an existing key. O(log N)"""
        node = self._find_node(key)
        if node.is_leaf():
            return False
        node.value = value
        return True

    def delete(self, key: Any) -> bool:
        """Remove a key-value pair. O(log N)"""
        node = self._find_node(key)
        if node.is_leaf():
            return False

        self._delete_node(node)
        self._size -= 1
        self._version += 1
        self._debug_validate("delete")
        return True

    def has(self, key: Any) -> bool:
        return not self._find_node(key).is_leaf()

    def size(self) -> int:
        return self._size

    def height(self) -> int:
        """Number of live nodes on the longest root-to-leaf path."""
        if self._root.is_leaf():
            return 0

        tallest = 0
        stack = [(self._root, 1)]
        while stack:
            node, depth = stack.pop()
            tallest = max(tallest, depth)
            for child in (node.left, node.right):
                if not child.is_leaf():
                    stack.append((child, depth + 1))
        return tallest

    def black_height(self) -> int:
        """Black nodes on the path from the root down to a leaf, sentinel excluded."""
        count = 0
        node = self._root
        while not node.is_leaf():
            if node.is_black():
                count += 1
            node = node.left
        return count

    def validate(self) -> int:
        """
        Check every Red-Black property and the BST ordering.

        Returns:
            The black height of the tree.

        Raises:
            InvariantViolationError: Naming the first property found broken.
        """
        if self._nil.color != Color.BLACK or not self._nil.is_leaf():
            raise InvariantViolationError("black-leaves", "shared sentinel is not a black leaf")
        if self._root.parent is not None and not self._root.is_leaf():
            raise InvariantViolationError("parent-links", "root has a parent")
        if self._root.is_red():
            raise InvariantViolationError("black-root", f"root {self._root.key!r} is red")

        count, black_height = self._validate_subtree(self._root)
        if count != self._size:
            raise InvariantViolationError(
                "size", f"size counter is {self._size} but tree holds {count} entries"
            )

        previous: Pair | None = None
        for pair in self.iterator():
            if previous is not None and self._compare(previous.key, pair.key) != Ordering.LESS:
                raise InvariantViolationError(
                    "order", f"{previous.key!r} is not less than {pair.key!r}"
                )
            previous = pair

        return black_height

    def __iter__(self) -> Iterator[Pair]:
        return self.iterator()

    def iterator(self) -> Iterator[Pair]:
        return _InOrderIterator(self)

    def __aiter__(self) -> AsyncIterator[Pair]:
        return self.async_iterator()

    def async_iterator(self) -> AsyncIterator[Pair]:
        return _AsyncInOrderIterator(self)

    def _compare(self, a: Any, b: Any) -> Ordering:
        return to_ordering(self._cmp(a, b))

    def _find_node(self, key: Any) -> Node:
        """Find the node holding key, or the sentinel where it would go."""
        current = self._root
        while not current.is_leaf():
            order = self._compare(key, current.key)
            if order == Ordering.LESS:
                current = current.left
            elif order == Ordering.GREATER:
                current = current.right
            else:
                return current
        return current

    def _debug_validate(self, operation: str) -> None:
        if not self._check_invariants:
            return
        try:
            self.validate()
        except InvariantViolationError as e:
            logger.critical(f"Tree corrupted after {operation}: {e}")
            raise

    def _validate_subtree(self, node: Node) -> tuple[int, int]:
        """Return (live node count, black height) of the subtree at node."""
        if node.is_leaf():
            if node is not self._nil:
                raise InvariantViolationError("black-leaves", "leaf is not the tree's sentinel")
            return 0, 0

        if node.color not in (Color.RED, Color.BLACK):
            raise InvariantViolationError("color", f"node {node.key!r} has color {node.color!r}")

        for child in (node.left, node.right):
            if child is None:
                raise InvariantViolationError(
                    "two-children", f"node {node.key!r} is missing a child"
                )
            if child.is_leaf():
                continue
            if child.parent is not node:
                raise InvariantViolationError(
                    "parent-links", f"child {child.key!r} does not point back to {node.key!r}"
                )
            if node.is_red() and child.is_red():
                raise InvariantViolationError(
                    "red-red", f"red node {node.key!r} has red child {child.key!r}"
                )

        left_count, left_black = self._validate_subtree(node.left)
        right_count, right_black = self._validate_subtree(node.right)
        if left_black != right_black:
            raise InvariantViolationError(
                "black-height",
                f"node {node.key!r} has black heights {left_black} (left) "
                f"and {right_black} (right)",
            )

        own = 1 if node.is_black() else 0
        return left_count + right_count + 1, left_black + own

    def _fix_insert(self, node: Node) -> None:
        """Fix Red-Black Tree properties after insert."""
        while True:
            if node.is_root():
                # Case 1: node is the root
                node.color = Color.BLACK
                return

            parent = node.parent
            if parent.is_black():
                # Case 2: nothing to repair
                return

            # Parent is red, so it is not the root and the grandparent exists
            grandparent = parent.parent
            uncle = node.uncle()

            if uncle.is_red():
                # Case 3: push the blackness down from the grandparent
                parent.color = Color.BLACK
                uncle.color = Color.BLACK
                grandparent.color = Color.RED
                node = grandparent
                continue

            node_is_left = node.is_left()
            parent_is_left = parent.is_left()

            if node_is_left and parent_is_left:
                # Case 4: left-left
                parent.color, grandparent.color = Color.BLACK, Color.RED
                self._rotate_right(grandparent)
            elif not node_is_left and not parent_is_left:
                # Case 4: right-right
                parent.color, grandparent.color = Color.BLACK, Color.RED
                self._rotate_left(grandparent)
            elif not node_is_left and parent_is_left:
                # Case 5: left-right
                node.color, grandparent.color = Color.BLACK, Color.RED
                self._rotate_left(parent)
                self._rotate_right(grandparent)
            else:
                # Case 5: right-left
                node.color, grandparent.color = Color.BLACK, Color.RED
                self._rotate_right(parent)
                self._rotate_left(grandparent)
            return

    def _rotate_left(self, node: Node) -> None:
        """
        Left rotation around node. Requires a live right child.

              |                        |
              x                        y
             / \\     rotate_left      / \\
            a   y   ------------>    x   c
               / \\                  / \\
              b   c                a   b
        """
        pivot = node.right
        assert not pivot.is_leaf(), f"rotate_left on {node.key!r} with sentinel right child"
        parent = node.parent

        if parent is None:
            self._root = pivot
        elif node is parent.left:
            parent.left = pivot
        else:
            parent.right = pivot
        pivot.parent = parent

        node.right = pivot.left
        if not node.right.is_leaf():
            node.right.parent = node

        pivot.left = node
        node.parent = pivot

    def _rotate_right(self, node: Node) -> None:
        """
        Right rotation around node. Requires a live left child.

                |                      |
                y                      x
               / \\    rotate_right    / \\
              x   c  ------------>   a   y
             / \\                        / \\
            a   b                      b   c
        """
        pivot = node.left
        assert not pivot.is_leaf(), f"rotate_right on {node.key!r} with sentinel left child"
        parent = node.parent

        if parent is None:
            self._root = pivot
        elif node is parent.left:
            parent.left = pivot
        else:
            parent.right = pivot
        pivot.parent = parent

        node.left = pivot.right
        if not node.left.is_leaf():
            node.left.parent = node

        pivot.right = node
        node.parent = pivot

    def _delete_node(self, node: Node) -> None:
        """Delete a live node from the tree."""
        if not node.left.is_leaf() and not node.right.is_leaf():
            # Node has two children - move the predecessor's entry up
            predecessor = node.left
            while not predecessor.right.is_leaf():
                predecessor = predecessor.right

            node.key = predecessor.key
            node.value = predecessor.value
            node = predecessor

        # Node has at most one live child
        child = node.right if node.left.is_leaf() else node.left
        self._replace_node(node, child)

        if node.is_black():
            self._fix_delete(child)

        # The sentinel only carries a parent while a fixup walks upward
        self._nil.parent = None
        node.left = node.right = node.parent = None

    def _replace_node(self, node: Node, child: Node) -> None:
        """Replace node with child in tree."""
        parent = node.parent
        if parent is None:
            self._root = child
        elif node is parent.left:
            parent.left = child
        else:
            parent.right = child

        # Set even on the sentinel so the fixup can find its way up
        child.parent = parent

    def _fix_delete(self, node: Node) -> None:
        """Fix Red-Black Tree properties after removing a black node."""
        while node is not self._root and node.is_black():
            parent = node.parent

            if node is parent.left:
                sibling = parent.right

                if sibling.is_red():
                    # Case 1: red sibling, rotate to get a black one
                    sibling.color = Color.BLACK
                    parent.color = Color.RED
                    self._rotate_left(parent)
                    continue

                if sibling.left.is_black() and sibling.right.is_black():
                    # Case 2: black sibling with black children, move deficit up
                    sibling.color = Color.RED
                    node = parent
                    continue

                if sibling.right.is_black():
                    # Case 3: near child red, far child black
                    sibling.color, sibling.left.color = Color.RED, Color.BLACK
                    self._rotate_right(sibling)
                    sibling = parent.right

                # Case 4: far child red
                sibling.color, parent.color = parent.color, Color.BLACK
                sibling.right.color = Color.BLACK
                self._rotate_left(parent)
                node = self._root
            else:
                sibling = parent.left

                if sibling.is_red():
                    sibling.color = Color.BLACK
                    parent.color = Color.RED
                    self._rotate_right(parent)
                    continue

                if sibling.left.is_black() and sibling.right.is_black():
                    sibling.color = Color.RED
                    node = parent
                    continue

                if sibling.left.is_black():
                    sibling.color, sibling.right.color = Color.RED, Color.BLACK
                    self._rotate_left(sibling)
                    sibling = parent.left

                sibling.color, parent.color = parent.color, Color.BLACK
                sibling.left.color = Color.BLACK
                self._rotate_right(parent)
                node = self._root

        node.color = Color.BLACK


class _InOrderWalk:
    """Explicit-stack in-order walk shared by the sync and async iterators."""

    def __init__(self, tree: RedBlackTree) -> None:
        self._tree = tree
        self._expected_version = tree._version
        self._stack: list[Node] = []

        self._push_left_path(tree._root)

    def _advance(self) -> Pair | None:
        """Return the next pair, or None once the walk is exhausted."""
        if self._tree._version != self._expected_version:
            self._stack.clear()
            raise RuntimeError("RedBlackTree mutated during iteration")

        if not self._stack:
            return None

        node = self._stack.pop()
        result = Pair(node.key, node.value)

        # Push right subtree's left path
        self._push_left_path(node.right)

        return result

    def _push_left_path(self, node: Node) -> None:
        while not node.is_leaf():
            self._stack.append(node)
            node = node.left


class _InOrderIterator(_InOrderWalk, Iterator[Pair]):
    """Iterator over a Red-Black Tree in ascending key order."""

    def __iter__(self) -> Iterator[Pair]:
        return self

    def __next__(self) -> Pair:
        result = self._advance()
        if result is None:
            raise StopIteration
        return result


class _AsyncInOrderIterator(_InOrderWalk, AsyncIterator[Pair]):
    """Async iterator over a Red-Black Tree (in-memory, no I/O)."""

    def __aiter__(self) -> "_AsyncInOrderIterator":
        return self

    async def __anext__(self) -> Pair:
        result = self._advance()
        if result is None:
            raise StopAsyncIteration
        return result
