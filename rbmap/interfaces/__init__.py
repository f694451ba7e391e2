"""
Abstract base classes and protocols for the ordered containers.
"""

from rbmap.interfaces.ordered_iterable import OrderedIterable
from rbmap.interfaces.sorted_container import SortedContainer

__all__ = ["OrderedIterable", "SortedContainer"]
