"""
Lazy, single-pass sequence pipeline.

An ``Iter`` wraps any iterable and exposes chainable transformation stages
(map, filter, take, ...) plus terminal operations (collect, fold, find, ...).
Nothing is pulled from the source until a terminal operation or an explicit
``next()`` asks for it.

Every stage is a small state machine that owns its upstream ``Iter`` and
implements ``_pull()``. ``next()`` wraps ``_pull()`` and latches exhaustion,
so once a stage reports NOTHING it keeps reporting NOTHING.
"""

import logging
import numbers
import operator
from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Tuple, TypeVar, Union

from ferrocore.errors import NonNumericElementError
from ferrocore.option import NOTHING, Option, Some

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")
K = TypeVar("K")


class Iter(Generic[T]):
    """
    A chainable, lazy, pull-once sequence.

    Transformation methods return a new stage wrapping this one; after calling
    one, pull only from the returned stage. A spent Iter yields nothing.
    """

    def __init__(self, source: Iterable[T] = ()):
        self._source = iter(source)
        self._done = False
        self._pulled = False
        self._produced = 0

    @classmethod
    def from_iterable(cls, source: Iterable[T]) -> "Iter[T]":
        """Wrap any finite or infinite iterable"""
        return cls(source)

    @classmethod
    def empty(cls) -> "Iter[Any]":
        return cls(())

    # --------- pull contract ----------
    def _pull(self) -> Option[T]:
        for item in self._source:
            return Some(item)
        return NOTHING

    def next(self) -> Option[T]:
        """Produce the next element as Some(value), or NOTHING once exhausted"""
        if self._done:
            return NOTHING
        # set before _pull() so a raising stage still counts as pulled
        self._pulled = True
        item = self._pull()
        if item.is_none():
            self._done = True
        else:
            self._produced += 1
        return item

    def has_pulled(self) -> bool:
        """True once this stage or any stage feeding it has been asked for an element"""
        pending = [self]
        while pending:
            stage = pending.pop()
            if stage._pulled:
                return True
            pending.extend(stage._upstreams())
        return False

    def _upstreams(self) -> List["Iter"]:
        return []

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        item = self.next()
        if item.is_none():
            raise StopIteration
        return item.unwrap()

    def __repr__(self):
        state = "exhausted" if self._done else f"produced={self._produced}"
        return f"<{type(self).__name__} {state}>"

    # --------- chainable stages (lazy) ----------
    def map(self, fn: Callable[[T], U]) -> "Iter[U]":
        return _Map(self, fn)

    def filter(self, pred: Callable[[T], bool]) -> "Iter[T]":
        return _Filter(self, pred)

    def filter_map(self, fn: Callable[[T], Option[U]]) -> "Iter[U]":
        """Map and filter in one pass: fn returns Some(value) to keep, NOTHING to drop"""
        return _FilterMap(self, fn)

    def flatten(self) -> "Iter[Any]":
        """Yield every element of every nested iterable, in order"""
        return _Flatten(self)

    def flat_map(self, fn: Callable[[T], Iterable[U]]) -> "Iter[U]":
        return self.map(fn).flatten()

    def take(self, n: int) -> "Iter[T]":
        return _Take(self, int(n))

    def skip(self, n: int) -> "Iter[T]":
        return _Skip(self, int(n))

    def enumerate(self) -> "Iter[Tuple[int, T]]":
        return _Enumerate(self)

    def chain(self, other: Iterable[T]) -> "Iter[T]":
        return _Chain(self, _as_iter(other))

    def zip(self, other: Iterable[U]) -> "Iter[Tuple[T, U]]":
        """Pair elements in lockstep; stops at the shorter side"""
        return _Zip(self, _as_iter(other))

    def inspect(self, fn: Callable[[T], Any]) -> "Iter[T]":
        """Call fn on each element as it passes through"""
        return _Inspect(self, fn)

    def chunk(self, size: int) -> "Iter[List[T]]":
        """Group elements into lists of ``size``; the last one may be shorter"""
        size = int(size)
        if size < 1:
            raise ValueError("Chunk size must be >= 1")
        return _Chunk(self, size)

    def page(self, page_number: int, page_size: int) -> "Iter[T]":
        """Get a specific page of results (1-indexed)"""
        if page_number < 1:
            raise ValueError("Page number must be >= 1")
        if page_size < 1:
            raise ValueError("Page size must be >= 1")
        offset = (page_number - 1) * page_size
        return self.skip(offset).take(page_size)

    # --------- terminal operations (consume) ----------
    def collect(self) -> List[T]:
        return list(self)

    def fold(self, init: U, fn: Callable[[U, T], U]) -> U:
        """Accumulate left to right starting from init"""
        acc = init
        for item in self:
            acc = fn(acc, item)
        return acc

    def reduce(self, fn: Callable[[T, T], T]) -> Option[T]:
        """Fold seeded with the first element; NOTHING when empty"""
        return self.next().map(lambda first: self.fold(first, fn))

    def find(self, pred: Callable[[T], bool]) -> Option[T]:
        for item in self:
            if pred(item):
                return Some(item)
        return NOTHING

    def all(self, pred: Callable[[T], bool]) -> bool:
        for item in self:
            if not pred(item):
                return False
        return True

    def any(self, pred: Callable[[T], bool]) -> bool:
        for item in self:
            if pred(item):
                return True
        return False

    def count(self) -> int:
        total = 0
        for _ in self:
            total += 1
        return total

    def first(self) -> Option[T]:
        return self.next()

    def last(self) -> Option[T]:
        last_item = NOTHING
        for item in self:
            last_item = Some(item)
        return last_item

    def nth(self, n: int) -> Option[T]:
        """0-indexed element; NOTHING when out of range"""
        if n < 0:
            return NOTHING
        return self.skip(n).next()

    def position(self, pred: Callable[[T], bool]) -> Option[int]:
        for index, item in enumerate(self):
            if pred(item):
                return Some(index)
        return NOTHING

    def max(self) -> Option[T]:
        """Largest element; the first of several equal maxima wins"""
        found = False
        best = None
        for item in self:
            if not found or item > best:
                best = item
                found = True
        return Some(best) if found else NOTHING

    def min(self) -> Option[T]:
        """Smallest element; the first of several equal minima wins"""
        found = False
        best = None
        for item in self:
            if not found or item < best:
                best = item
                found = True
        return Some(best) if found else NOTHING

    def sum(self) -> Union[int, float]:
        return self._numeric_fold("sum", 0, operator.add)

    def product(self) -> Union[int, float]:
        return self._numeric_fold("product", 1, operator.mul)

    def group_by(self, key_fn: Callable[[T], K]) -> Dict[K, List[T]]:
        """Group elements by the result of key_fn"""
        groups = {}
        for item in self:
            groups.setdefault(key_fn(item), []).append(item)
        return groups

    # --------- helpers ----------
    def _numeric_fold(self, operation: str, start, op):
        acc = start
        for position, item in enumerate(self):
            if isinstance(item, bool) or not isinstance(item, numbers.Real):
                logger.error(f"{operation}() hit non-numeric element {item!r} at position {position}")
                raise NonNumericElementError(operation, item, position)
            acc = op(acc, item)
        return acc


def _as_iter(source: Iterable[T]) -> Iter[T]:
    return source if isinstance(source, Iter) else Iter(source)


# ---------- pipeline stages ----------

class _Stage(Iter[T]):
    """A stage that exclusively owns its upstream Iter."""

    def __init__(self, upstream: Iter):
        super().__init__()
        self._upstream = upstream
        logger.debug(f"Created {type(self).__name__} over {upstream!r}")

    def _upstreams(self):
        return [self._upstream]


class _Map(_Stage):
    def __init__(self, upstream, fn):
        super().__init__(upstream)
        self._fn = fn

    def _pull(self):
        return self._upstream.next().map(self._fn)


class _Filter(_Stage):
    def __init__(self, upstream, pred):
        super().__init__(upstream)
        self._pred = pred

    def _pull(self):
        while True:
            item = self._upstream.next()
            if item.is_none() or self._pred(item.unwrap()):
                return item


class _FilterMap(_Stage):
    def __init__(self, upstream, fn):
        super().__init__(upstream)
        self._fn = fn
        self._position = 0

    def _pull(self):
        for item in self._upstream:
            mapped = self._fn(item)
            if not isinstance(mapped, Option):
                raise TypeError(
                    f"filter_map() function must return an Option. "
                    f"Got {type(mapped).__name__} at position {self._position}"
                )
            self._position += 1
            if mapped.is_some():
                return mapped
        return NOTHING


class _Flatten(_Stage):
    def __init__(self, upstream):
        super().__init__(upstream)
        self._inner = None
        self._position = 0

    def _pull(self):
        while True:
            if self._inner is not None:
                for item in self._inner:
                    return Some(item)
                self._inner = None
            outer = self._upstream.next()
            if outer.is_none():
                return NOTHING
            try:
                self._inner = iter(outer.unwrap())
            except TypeError:
                raise TypeError(
                    f"flatten() requires iterable elements. "
                    f"Got {type(outer.unwrap()).__name__} at position {self._position}"
                ) from None
            self._position += 1


class _Take(_Stage):
    def __init__(self, upstream, n):
        super().__init__(upstream)
        self._remaining = n

    def _pull(self):
        if self._remaining <= 0:
            return NOTHING
        self._remaining -= 1
        return self._upstream.next()


class _Skip(_Stage):
    def __init__(self, upstream, n):
        super().__init__(upstream)
        self._to_skip = n

    def _pull(self):
        while self._to_skip > 0:
            self._to_skip -= 1
            if self._upstream.next().is_none():
                return NOTHING
        return self._upstream.next()


class _Enumerate(_Stage):
    def __init__(self, upstream):
        super().__init__(upstream)
        self._index = 0

    def _pull(self):
        item = self._upstream.next()
        if item.is_none():
            return item
        pair = Some((self._index, item.unwrap()))
        self._index += 1
        return pair


class _Chain(_Stage):
    def __init__(self, upstream, other):
        super().__init__(upstream)
        self._other = other
        self._first_done = False

    def _upstreams(self):
        return [self._upstream, self._other]

    def _pull(self):
        if not self._first_done:
            item = self._upstream.next()
            if item.is_some():
                return item
            self._first_done = True
        return self._other.next()


class _Zip(_Stage):
    def __init__(self, upstream, other):
        super().__init__(upstream)
        self._other = other

    def _upstreams(self):
        return [self._upstream, self._other]

    def _pull(self):
        left = self._upstream.next()
        if left.is_none():
            return NOTHING
        right = self._other.next()
        if right.is_none():
            return NOTHING
        return Some((left.unwrap(), right.unwrap()))


class _Inspect(_Stage):
    def __init__(self, upstream, fn):
        super().__init__(upstream)
        self._fn = fn

    def _pull(self):
        item = self._upstream.next()
        item.if_some(self._fn)
        return item


class _Chunk(_Stage):
    def __init__(self, upstream, size):
        super().__init__(upstream)
        self._size = size

    def _pull(self):
        bucket = []
        while len(bucket) < self._size:
            item = self._upstream.next()
            if item.is_none():
                break
            bucket.append(item.unwrap())
        return Some(bucket) if bucket else NOTHING
