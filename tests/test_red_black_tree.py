"""
Tests for the RedBlackTree engine: operations, balancing and validation.
"""

import itertools
import logging
import math
import random

import pytest

from rbmap.models.compare import key_compare, reverse_compare
from rbmap.models.exceptions import InvariantViolationError
from rbmap.models.node import Color
from rbmap.models.sortedcontainers import RedBlackTree


def height_bound(n: int) -> float:
    return 2 * math.log2(n + 1)


def keys_of(tree: RedBlackTree) -> list:
    return [k for k, _ in tree]


class TestRedBlackTree:
    """Tests for basic RedBlackTree operations."""

    def test_put_and_get(self, tree):
        """Test basic put and get operations."""
        assert tree.put("key1", "value1")
        assert tree.put("key2", "value2")

        assert tree.get("key1") == "value1"
        assert tree.get("key2") == "value2"
        assert tree.get("key3") is None
        assert tree.get("key3", "missing") == "missing"

    def test_put_existing_key_overwrites(self, tree):
        """Test that put reports an existing key and overwrites its value."""
        assert tree.put("key1", "value1")
        assert not tree.put("key1", "value2")

        assert tree.get("key1") == "value2"
        assert tree.size() == 1

    def test_has(self, tree):
        tree.put("key1", "value1")

        assert tree.has("key1")
        assert not tree.has("key2")
        assert "key1" in tree
        assert len(tree) == 1

    def test_update(self, tree):
        """Test update never inserts."""
        assert not tree.update("key1", "value1")
        assert tree.size() == 0

        tree.put("key1", "value1")
        assert tree.update("key1", "value2")
        assert tree.get("key1") == "value2"
        assert tree.size() == 1

    def test_delete(self, tree):
        """Test delete operation."""
        tree.put("key1", "value1")
        tree.put("key2", "value2")

        assert tree.delete("key1")
        assert not tree.has("key1")
        assert tree.has("key2")
        assert not tree.delete("key3")
        assert tree.size() == 1

    def test_delete_last_key_empties_tree(self, tree):
        tree.put(1, "a")
        assert tree.delete(1)

        assert tree.size() == 0
        assert tree.height() == 0
        assert list(tree) == []
        assert tree.validate() == 0

    def test_empty_tree(self, tree):
        assert tree.size() == 0
        assert tree.height() == 0
        assert tree.black_height() == 0
        assert tree.get(1) is None
        assert not tree.delete(1)
        assert tree.validate() == 0

    def test_none_values_are_stored(self, tree):
        """Test that a stored None is distinguishable via has()."""
        tree.put("k", None)
        assert tree.has("k")
        assert tree.get("k", "default") is None


class TestComparator:
    """Tests for comparator injection."""

    def test_reverse_order(self):
        tree = RedBlackTree(compare=reverse_compare, check_invariants=True)
        for i in range(20):
            tree.put(i, i)

        assert keys_of(tree) == list(range(19, -1, -1))

    def test_cmp_style_function(self):
        """Test a classic subtraction comparator."""
        tree = RedBlackTree(compare=lambda a, b: a - b, check_invariants=True)
        for key in [5, 3, 8, 1, 4]:
            tree.put(key, str(key))

        assert keys_of(tree) == [1, 3, 4, 5, 8]

    def test_key_compare_treats_equivalent_keys_as_equal(self):
        """Test that an equal comparison overwrites and keeps the stored key."""
        tree = RedBlackTree(compare=key_compare(str.lower), check_invariants=True)
        assert tree.put("Apple", 1)
        assert not tree.put("apple", 2)

        assert tree.size() == 1
        assert list(tree) == [("Apple", 2)]

    def test_tuple_keys(self):
        tree = RedBlackTree(check_invariants=True)
        for key in [(2, "b"), (1, "z"), (2, "a")]:
            tree.put(key, None)

        assert keys_of(tree) == [(1, "z"), (2, "a"), (2, "b")]

    def test_non_callable_compare(self):
        with pytest.raises(TypeError):
            RedBlackTree(compare="not a function")

    def test_predicate_comparator_rejected_without_mutation(self):
        """Test that a bool-returning comparator fails before changing the tree."""
        tree = RedBlackTree(compare=lambda a, b: a < b)
        tree.put(1, "a")  # no comparison on an empty tree

        with pytest.raises(TypeError):
            tree.put(2, "b")

        assert tree.size() == 1
        assert tree.validate() == 1

    def test_raising_comparator_leaves_tree_intact(self):
        """Test that a comparator error mid-descent does not corrupt the tree."""
        tree = RedBlackTree(check_invariants=True)
        for i in range(10):
            tree.put(i, i)

        with pytest.raises(TypeError):
            tree.put("not comparable with ints", 0)
        with pytest.raises(TypeError):
            tree.delete(None)

        assert tree.size() == 10
        assert keys_of(tree) == list(range(10))
        tree.validate()


class TestInsertFixup:
    """Tests for each insertion repair shape."""

    @pytest.mark.parametrize(
        "order",
        [
            [10, 20, 30],  # right-right
            [30, 20, 10],  # left-left
            [10, 30, 20],  # right-left
            [30, 10, 20],  # left-right
        ],
    )
    def test_rotation_cases(self, tree, order):
        """Test that every three-node chain is rotated into a balanced shape."""
        for key in order:
            tree.put(key, key)

        root = tree._root
        assert root.key == 20
        assert root.is_black()
        assert root.left.key == 10 and root.left.is_red()
        assert root.right.key == 30 and root.right.is_red()
        assert root.left.parent is root and root.right.parent is root
        assert tree.height() == 2

    def test_red_uncle_recolors(self, tree):
        """Test that a red uncle is resolved by recoloring only."""
        for key in [20, 10, 30, 5]:
            tree.put(key, key)

        root = tree._root
        assert root.key == 20 and root.is_black()
        assert root.left.is_black() and root.right.is_black()
        assert root.left.left.key == 5 and root.left.left.is_red()
        assert tree.black_height() == 2

    def test_first_insert_is_black_root(self, tree):
        tree.put(1, "a")
        assert tree._root.is_black()
        assert tree._root.parent is None


class TestDeleteFixup:
    """Tests for deletion and its repair cases."""

    def test_two_children_uses_predecessor(self, tree):
        """Test that the predecessor's entry moves into the deleted slot."""
        for key in [20, 10, 30]:
            tree.put(key, str(key))
        root = tree._root

        tree.delete(20)

        assert tree._root is root
        assert root.key == 10 and root.value == "10"
        assert root.left.is_leaf()
        assert root.right.key == 30

    def test_delete_red_leaf(self, tree):
        for key in [20, 10, 30, 5]:
            tree.put(key, key)

        tree.delete(5)
        assert keys_of(tree) == [10, 20, 30]

    def test_delete_black_leaf_with_red_sibling(self, tree):
        """Test the red-sibling case by deleting from the short side."""
        for key in range(1, 7):
            tree.put(key, key)
        # 2 (B) with 1 (B) on the left and red 4 on the right
        assert tree._root.key == 2
        assert tree._root.right.key == 4 and tree._root.right.is_red()

        tree.delete(1)

        assert keys_of(tree) == [2, 3, 4, 5, 6]
        assert tree._root.key == 4

    def test_deficit_propagates_to_root(self, tree):
        """Test that an all-black tree loses one level of black height."""
        for key in [4, 2, 6, 1, 3, 5, 7]:
            tree.put(key, key)
        for key in range(1, 8):
            tree._find_node(key).color = Color.BLACK
        tree.validate()  # perfect all-black tree of height 3
        assert tree.black_height() == 3

        tree.delete(1)

        assert tree.black_height() == 2
        assert keys_of(tree) == [2, 3, 4, 5, 6, 7]

    def test_sentinel_parent_is_cleared(self, tree):
        for key in range(10):
            tree.put(key, key)
        for key in range(0, 10, 3):
            tree.delete(key)

        assert tree._nil.parent is None
        assert tree._nil.is_black()

    def test_detached_node_is_unlinked(self, tree):
        for key in [1, 2, 3]:
            tree.put(key, key)
        node = tree._find_node(3)

        tree.delete(3)

        assert node.parent is None
        assert node.left is None and node.right is None

    @pytest.mark.parametrize("n", [1, 2, 3, 4, 5, 6])
    def test_all_insert_and_delete_orders(self, n):
        """Test every insertion order against several deletion orders."""
        for perm in itertools.permutations(range(n)):
            for deletion_order in (perm, perm[::-1], sorted(perm)):
                tree = RedBlackTree(check_invariants=True)
                for key in perm:
                    tree.put(key, key)

                remaining = set(perm)
                for key in deletion_order:
                    assert tree.delete(key)
                    remaining.discard(key)
                    assert keys_of(tree) == sorted(remaining)

                assert tree.size() == 0
                assert tree._root is tree._nil


class TestBalancing:
    """Tests for invariant preservation and the height bound."""

    def test_ascending_inserts(self):
        tree = RedBlackTree()
        for i in range(1, 1001):
            tree.put(i, i)

        tree.validate()
        assert tree.height() <= height_bound(1000)
        assert keys_of(tree) == list(range(1, 1001))

    def test_descending_inserts_stay_balanced(self, tree):
        """Test height and order after each insertion of 10..1."""
        inserted = []
        for key in range(10, 0, -1):
            tree.put(key, key)
            inserted.append(key)

            assert tree.height() <= height_bound(tree.size())
            assert keys_of(tree) == sorted(inserted)

    def test_delete_even_keys(self, tree):
        """Test removing every even key from 100 sequential keys."""
        for i in range(100):
            tree.put(i, i * 10)
        for i in range(0, 100, 2):
            assert tree.delete(i)

        tree.validate()
        assert tree.size() == 50
        assert list(tree) == [(i, i * 10) for i in range(1, 100, 2)]

    def test_validate_returns_black_height(self, populated_tree):
        assert populated_tree.validate() == populated_tree.black_height()
        assert populated_tree.height() <= height_bound(populated_tree.size())

    def test_random_operations_against_dict(self):
        """Test a random workload against a dict model."""
        rng = random.Random(1234)
        tree = RedBlackTree(check_invariants=True)
        model = {}

        for _ in range(3000):
            key = rng.randrange(200)
            action = rng.random()
            if action < 0.5:
                assert tree.put(key, action) == (key not in model)
                model[key] = action
            elif action < 0.8:
                assert tree.delete(key) == (key in model)
                model.pop(key, None)
            else:
                assert tree.update(key, action) == (key in model)
                if key in model:
                    model[key] = action

            assert tree.size() == len(model)

        assert list(tree) == sorted(model.items())
        assert tree.height() <= height_bound(tree.size())

    def test_large_insert_delete_cycle(self, populated_tree, large_sample_entries):
        """Test draining a large tree in random order."""
        keys = [k for k, _ in large_sample_entries]
        random.Random(99).shuffle(keys)

        for i, key in enumerate(keys):
            assert populated_tree.delete(key)
            if i % 100 == 0:
                populated_tree.validate()
                assert populated_tree.height() <= height_bound(populated_tree.size())

        assert populated_tree.size() == 0
        assert populated_tree.validate() == 0


class TestRotation:
    """Tests for rotation primitives."""

    def test_rotation_preserves_order(self, tree):
        for key in range(1, 8):
            tree.put(key, key)
        before = list(tree)

        tree._rotate_left(tree._root)
        assert list(tree) == before
        tree._rotate_right(tree._root)
        assert list(tree) == before
        assert tree._root.parent is None

    def test_rotate_left_requires_right_child(self, tree):
        tree.put(1, "a")
        with pytest.raises(AssertionError):
            tree._rotate_left(tree._root)

    def test_rotate_right_requires_left_child(self, tree):
        tree.put(1, "a")
        with pytest.raises(AssertionError):
            tree._rotate_right(tree._root)


class TestValidate:
    """Tests that validate() reports corrupted trees."""

    def build(self, keys):
        tree = RedBlackTree()
        for key in keys:
            tree.put(key, key)
        return tree

    def test_red_root(self):
        tree = self.build([1, 2, 3])
        tree._root.color = Color.RED

        with pytest.raises(InvariantViolationError) as exc_info:
            tree.validate()
        assert exc_info.value.invariant == "black-root"

    def test_red_red(self):
        tree = self.build([20, 10, 30, 5])
        tree._root.left.color = Color.RED

        with pytest.raises(InvariantViolationError) as exc_info:
            tree.validate()
        assert exc_info.value.invariant == "red-red"

    def test_black_height(self):
        tree = self.build([1, 2, 3])
        tree._root.left.color = Color.BLACK

        with pytest.raises(InvariantViolationError) as exc_info:
            tree.validate()
        assert exc_info.value.invariant == "black-height"

    def test_size_counter(self):
        tree = self.build([1, 2, 3])
        tree._size = 5

        with pytest.raises(InvariantViolationError) as exc_info:
            tree.validate()
        assert exc_info.value.invariant == "size"

    def test_order(self):
        tree = self.build([1, 2, 3])
        tree._root.left.key = 100

        with pytest.raises(InvariantViolationError) as exc_info:
            tree.validate()
        assert exc_info.value.invariant == "order"

    def test_parent_links(self):
        tree = self.build([1, 2, 3])
        tree._root.right.parent = tree._root.left

        with pytest.raises(InvariantViolationError) as exc_info:
            tree.validate()
        assert exc_info.value.invariant == "parent-links"

    def test_check_invariants_logs_and_raises(self, caplog):
        """Test that debug validation reports corruption after a mutation."""
        tree = RedBlackTree(check_invariants=True)
        for key in [1, 2, 3]:
            tree.put(key, key)
        tree._size = 99

        with caplog.at_level(logging.CRITICAL):
            with pytest.raises(InvariantViolationError):
                tree.put(4, 4)

        assert "Tree corrupted after put" in caplog.text
