"""
Option: an explicit present/absent value.

Terminal operations of ``Iter`` that may have no result return an Option
rather than ``None``, so a legitimate ``None`` element is never mistaken
for "not found".

Usage:
    Some(10).map(lambda x: x * 2).unwrap()   # 20
    NOTHING.unwrap_or(0)                     # 0
"""

import functools
import logging
from typing import Any, Callable, Generic, Iterator, Optional, TypeVar

from ferrocore.errors import UnwrapError

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


class Option(Generic[T]):
    """Either Some(value) or NOTHING."""

    __slots__ = ("_present", "_value")

    def __init__(self, present: bool, value: Optional[T] = None):
        self._present = present
        self._value = value if present else None

    # --------- construction ----------
    @classmethod
    def some(cls, value: T) -> "Option[T]":
        return cls(True, value)

    @classmethod
    def nothing(cls) -> "Option[Any]":
        return NOTHING

    @classmethod
    def from_optional(cls, value: Optional[T]) -> "Option[T]":
        """Some(value) unless value is None"""
        return NOTHING if value is None else cls(True, value)

    @staticmethod
    def from_throwable(fn: Callable[..., T]) -> Callable[..., "Option[T]"]:
        """Wrap fn so that a raised exception becomes NOTHING instead"""
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return Some(fn(*args, **kwargs))
            except Exception as e:
                logger.debug(f"{getattr(fn, '__name__', fn)!s} raised {e!r}, returning NOTHING")
                return NOTHING
        return wrapper

    # --------- queries ----------
    def is_some(self) -> bool:
        return self._present

    def is_none(self) -> bool:
        return not self._present

    # --------- extraction ----------
    def unwrap(self) -> T:
        """Return the value, or raise UnwrapError when empty"""
        if self._present:
            return self._value
        raise UnwrapError("Tried to unwrap NOTHING")

    def unwrap_or(self, default: T) -> T:
        return self._value if self._present else default

    def unwrap_or_else(self, fn: Callable[[], T]) -> T:
        return self._value if self._present else fn()

    # --------- combinators ----------
    def map(self, fn: Callable[[T], U]) -> "Option[U]":
        return Some(fn(self._value)) if self._present else NOTHING

    def flat_map(self, fn: Callable[[T], "Option[U]"]) -> "Option[U]":
        return fn(self._value) if self._present else NOTHING

    def filter(self, pred: Callable[[T], bool]) -> "Option[T]":
        return self if self._present and pred(self._value) else NOTHING

    def or_else(self, other: "Option[T]") -> "Option[T]":
        return self if self._present else other

    def if_some(self, fn: Callable[[T], Any]) -> None:
        if self._present:
            fn(self._value)

    def match(self, on_some: Callable[[T], U], on_nothing: Callable[[], U]) -> U:
        return on_some(self._value) if self._present else on_nothing()

    # --------- dunder ----------
    def __iter__(self) -> Iterator[T]:
        if self._present:
            yield self._value

    def __bool__(self):
        # Some(0) and NOTHING must not both read as falsy
        raise TypeError("Option has no truth value; use is_some() or is_none()")

    def __eq__(self, other):
        if not isinstance(other, Option):
            return NotImplemented
        return self._present == other._present and self._value == other._value

    def __hash__(self):
        return hash((self._present, self._value))

    def __repr__(self):
        if self._present:
            return f"Some({self._value!r})"
        return "NOTHING"


NOTHING: Option[Any] = Option(False)


def Some(value: T) -> Option[T]:
    """Wrap a present value"""
    return Option(True, value)
