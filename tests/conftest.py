"""
Shared pytest fixtures for the ordered map tests.
"""

import random

import pytest

from rbmap.models.ordered_map import OrderedMap
from rbmap.models.sortedcontainers import RedBlackTree


@pytest.fixture
def tree():
    """Provide an empty RedBlackTree that validates itself after every mutation."""
    return RedBlackTree(check_invariants=True)


@pytest.fixture
def ordered_map():
    """Provide an empty OrderedMap that validates itself after every mutation."""
    return OrderedMap(check_invariants=True)


@pytest.fixture
def sample_entries():
    """Provide sample key-value entries for testing."""
    return [
        ("key1", "value1"),
        ("key2", "value2"),
        ("key3", "value3"),
    ]


@pytest.fixture
def large_sample_entries():
    """Provide a larger, shuffled sample for stress testing."""
    entries = [(i, f"value{i}") for i in range(1000)]
    random.Random(7).shuffle(entries)
    return entries


@pytest.fixture
def populated_tree(large_sample_entries):
    """Provide a RedBlackTree holding large_sample_entries."""
    tree = RedBlackTree()
    for key, value in large_sample_entries:
        tree.put(key, value)
    return tree
