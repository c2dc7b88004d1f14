"""Exception types raised by ferrocore."""

from typing import Any


class FerrocoreError(Exception):
    """Base class for all ferrocore errors."""
    pass


class UnwrapError(FerrocoreError, ValueError):
    """Raised when unwrap() is called on an empty Option."""
    pass


class NonNumericElementError(FerrocoreError, TypeError):
    """Raised when sum() or product() meets an element that is not a number."""

    def __init__(self, operation: str, element: Any, position: int):
        self.operation = operation
        self.element = element
        self.position = position
        super().__init__(
            f"{operation}() requires all elements to be numbers. "
            f"Got {type(element).__name__} ({element!r}) at position {position}"
        )
