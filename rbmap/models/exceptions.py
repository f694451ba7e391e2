"""
Custom exceptions for the ordered containers.
"""

from typing import Any


class KeyAlreadyExistsError(KeyError):
    """
    Raised by OrderedMap.insert when the key is already present.

    The stored value has already been replaced by the new one when this is
    raised; the error only reports that no new entry was created.
    """

    def __init__(self, key: Any):
        """
        Initialize the error.

        Args:
            key: The key that was already present.
        """
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"key already exists: {self.key!r}"


class KeyNotFoundError(KeyError):
    """Raised by OrderedMap.remove when the key is absent."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"key not found: {self.key!r}"


class InvariantViolationError(AssertionError):
    """
    Raised when a Red-Black Tree fails structural validation.

    This always indicates a bug in the balancing code, never bad input.
    """

    def __init__(self, invariant: str, detail: str):
        """
        Initialize violation error.

        Args:
            invariant: Short name of the broken property (e.g. "red-red").
            detail: Where and how the property was broken.
        """
        self.invariant = invariant
        self.detail = detail
        super().__init__(f"Red-Black invariant '{invariant}' violated: {detail}")
