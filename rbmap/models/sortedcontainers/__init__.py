"""
Sorted container implementations for the ordered map.
"""

from rbmap.models.sortedcontainers.red_black_tree import RedBlackTree

__all__ = ["RedBlackTree"]
