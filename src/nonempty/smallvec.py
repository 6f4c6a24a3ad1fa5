"""
nonempty - NonEmptySmallVec

A NonEmptyVec counterpart over an InlineVec: up to ``inline_size`` elements
are stored inline, more spill to a heap list. ``spilled()`` reports which.

The removal API mirrors NonEmptyVec (checked / guarded / unchecked).
Equality, ordering and hashing look at the element sequence only; whether a
vector has spilled is a storage detail.

Usage:
    from nonempty import NonEmptySmallVec

    sv = NonEmptySmallVec.from_buf((1, 2, 3))   # inline size 3, full
    sv.push(4)                                  # spills
    sv.spilled()                                # True
"""

from functools import total_ordering
from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar

from .bounds import RangeLike, covers_all, require, resolve_range
from .errors import CollectionAllocError, EmptyInputError, PreconditionViolatedError
from .inline import InlineVec
from .logger import log_rejection
from .nonzero import NonZero, as_nonzero
from .ownership import Drain, moved_error, structural
from .view import NonEmptySlice, ViewProjection, elements_of

T = TypeVar("T")
K = TypeVar("K")


def _require_positive_buffer(buf: Sequence[Any]) -> None:
    if len(buf) == 0:
        raise PreconditionViolatedError(
            "Length of array must be non-zero to create NonEmptySmallVec."
        )


@total_ordering
class NonEmptySmallVec(ViewProjection, Generic[T]):
    """
    A wrapper around InlineVec that ensures it is not empty.

    ``NonEmptySmallVec(first, *rest, inline_size=None)``; the inline size
    defaults to the configured ``inline_capacity``.
    """

    __slots__ = ("_inner", "_generation")

    def __init__(self, first: T, *rest: T, inline_size: Optional[int] = None):
        self._inner: Optional[InlineVec[T]] = InlineVec(inline_size, (first, *rest))
        self._generation = 0

    @classmethod
    def _wrap(cls, inner: InlineVec[T]) -> "NonEmptySmallVec[T]":
        vec = object.__new__(cls)
        vec._inner = inner
        vec._generation = 0
        return vec

    @property
    def _sv(self) -> InlineVec[T]:
        inner = self._inner
        if inner is None:
            raise moved_error(self)
        return inner

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def new(cls, item: T, inline_size: Optional[int] = None) -> "NonEmptySmallVec[T]":
        return cls(item, inline_size=inline_size)

    @classmethod
    def with_capacity(
        cls, item: T, capacity: int, inline_size: Optional[int] = None
    ) -> "NonEmptySmallVec[T]":
        """
        A vector holding ``item`` with room for ``capacity`` elements.

        A capacity above the inline size allocates on the heap straight away,
        as InlineVec does.
        """
        inner = InlineVec(inline_size)
        if capacity > inner.inline_size:
            inner.grow(capacity)
        inner.push(item)
        return cls._wrap(inner)

    @classmethod
    def try_from_inline_vec(cls, inner: InlineVec[T]) -> "NonEmptySmallVec[T]":
        """
        Adopt ``inner`` if it is not empty (no copy).

        Raises:
            EmptyInputError: ``inner`` is empty; ``error.original is inner``.
        """
        if len(inner) == 0:
            log_rejection("NonEmptySmallVec.try_from_inline_vec", type(inner).__name__)
            raise EmptyInputError(inner, "NonEmptySmallVec")
        return cls._wrap(inner)

    @classmethod
    def try_from_list(
        cls, items: List[T], inline_size: Optional[int] = None
    ) -> "NonEmptySmallVec[T]":
        """
        Build from a list. A list too long for the inline buffer becomes the
        heap storage itself.
        In that case the caller must not mutate ``items`` afterwards; use
        take_from() with an InlineVec for a vector that shares nothing.

        Raises:
            EmptyInputError: ``items`` is empty; ``error.original is items``.
        """
        if not items:
            log_rejection("NonEmptySmallVec.try_from_list", type(items).__name__)
            raise EmptyInputError(items, "NonEmptySmallVec")
        return cls._wrap(InlineVec.from_list(items, inline_size))

    @classmethod
    def take_from(cls, inner: InlineVec[T]) -> Optional["NonEmptySmallVec[T]"]:
        """
        Move the contents of ``inner`` into a new vector, leaving ``inner`` empty.

        Returns None, leaving ``inner`` untouched, if it was already empty.
        """
        if len(inner) == 0:
            return None
        moved = inner.copy()
        inner.clear()
        inner.shrink_to_fit()
        return cls._wrap(moved)

    @classmethod
    def from_inline_vec_unchecked(cls, inner: InlineVec[T]) -> "NonEmptySmallVec[T]":
        """Adopt ``inner`` without checking it. The caller guarantees it is not empty."""
        require(len(inner) > 0, "NonEmptySmallVec.from_inline_vec_unchecked", "InlineVec is empty")
        return cls._wrap(inner)

    @classmethod
    def from_buf(cls, buf: Sequence[T]) -> "NonEmptySmallVec[T]":
        """
        Use ``buf`` as a full inline buffer (inline size ``len(buf)``).

        Raises:
            PreconditionViolatedError: ``buf`` is empty (programmer error).
        """
        _require_positive_buffer(buf)
        return cls._wrap(InlineVec.from_buf(buf))

    @classmethod
    def from_buf_and_len(cls, buf: Sequence[T], length: int) -> "NonEmptySmallVec[T]":
        """Use the first ``length`` (NonZero) elements of ``buf`` as the inline contents."""
        _require_positive_buffer(buf)
        return cls._wrap(InlineVec.from_buf_and_len(buf, as_nonzero(length).get()))

    @classmethod
    def from_buf_unchecked(cls, buf: Sequence[T]) -> "NonEmptySmallVec[T]":
        """Like from_buf, without the size check. The caller guarantees ``buf`` is not empty."""
        require(len(buf) > 0, "NonEmptySmallVec.from_buf_unchecked", "buffer is empty")
        return cls._wrap(InlineVec.from_buf(buf))

    @classmethod
    def from_slice(
        cls, view: NonEmptySlice[T], inline_size: Optional[int] = None
    ) -> "NonEmptySmallVec[T]":
        """Copy a NonEmptySlice into a new vector."""
        return cls._wrap(InlineVec.from_list(view.get_slice(), inline_size))

    @classmethod
    def from_elem(
        cls, elem: T, n: int, inline_size: Optional[int] = None
    ) -> "NonEmptySmallVec[T]":
        """``elem`` repeated ``n`` (NonZero) times."""
        return cls._wrap(InlineVec.from_elem(elem, as_nonzero(n).get(), inline_size))

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def _move_out(self) -> InlineVec[T]:
        inner = self._sv
        self._generation += 1
        self._inner = None
        return inner

    def into_inline_vec(self) -> InlineVec[T]:
        """Move the InlineVec out. The vector cannot be used afterwards."""
        return self._move_out()

    def into_list(self) -> List[T]:
        """The elements as a list; a spilled vector hands over its heap list."""
        return self._move_out().into_list()

    def into_boxed_slice(self) -> NonEmptySlice[T]:
        """A boxed NonEmptySlice owning the elements."""
        items = self.into_list()
        return NonEmptySlice._make(items, len(items), boxed=True)

    def into_inner(self) -> Optional[Tuple[T, ...]]:
        """
        The inline buffer as a tuple when it is exactly full and not spilled.

        On success the vector is consumed. Otherwise returns None and the
        vector is unchanged.
        """
        buf = self._sv.into_inner()
        if buf is not None:
            self._move_out()
        return buf

    def to_list(self) -> List[T]:
        return self._sv[:]

    def get_inline_vec(self) -> InlineVec[T]:
        """
        A copy of the backing InlineVec, spill state and capacity included.

        The live store is never handed out, since emptying it would break the
        invariant. Use into_inline_vec() to take the store itself.
        """
        return self._sv.copy()

    def as_slice(self) -> NonEmptySlice[T]:
        inner = self._sv
        return NonEmptySlice._make(inner, len(inner), owner=self)

    def clone(self) -> "NonEmptySmallVec[T]":
        return NonEmptySmallVec._wrap(self._sv.copy())

    __copy__ = clone

    # ------------------------------------------------------------------
    # Length, capacity and storage
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._sv)

    @property
    def inline_size(self) -> int:
        return self._sv.inline_size

    def spilled(self) -> bool:
        """True once the elements live on the heap."""
        return self._sv.spilled()

    def capacity(self) -> NonZero:
        return NonZero.new_unchecked(self._sv.capacity())

    # Capacity changes can move the elements between the inline buffer and
    # the heap, so they count as structural and invalidate views.

    @structural
    def reserve(self, additional: int) -> None:
        self._sv.reserve(additional)

    @structural
    def reserve_exact(self, additional: int) -> None:
        self._sv.reserve_exact(additional)

    @structural
    def try_reserve(self, additional: int) -> Optional[CollectionAllocError]:
        """Returns the backing store's allocation error unchanged, or None."""
        return self._sv.try_reserve(additional)

    @structural
    def try_reserve_exact(self, additional: int) -> Optional[CollectionAllocError]:
        return self._sv.try_reserve_exact(additional)

    @structural
    def shrink_to_fit(self) -> None:
        self._sv.shrink_to_fit()

    @structural
    def grow(self, new_cap: int) -> None:
        """Re-allocate to exactly ``new_cap`` (NonZero, >= len) slots."""
        self._sv.grow(as_nonzero(new_cap).get())

    @structural
    def try_grow(self, new_cap: int) -> Optional[CollectionAllocError]:
        return self._sv.try_grow(as_nonzero(new_cap).get())

    # ------------------------------------------------------------------
    # Additive mutation
    # ------------------------------------------------------------------

    @structural
    def push(self, item: T) -> None:
        self._sv.push(item)

    @structural
    def insert(self, index: int, element: T) -> None:
        self._sv.insert(index, element)

    @structural
    def insert_many(self, index: int, iterable: Iterable[T]) -> None:
        self._sv.insert_many(index, iterable)

    @structural
    def insert_from_slice(self, index: int, other: Iterable[T]) -> None:
        self._sv.insert_from_slice(index, other)

    @structural
    def append_inline(self, other: InlineVec[T]) -> None:
        """Move every element of ``other`` to the end, leaving ``other`` empty."""
        self._sv.append(other)

    @structural
    def extend(self, iterable: Iterable[T]) -> None:
        self._sv.extend(iterable)

    @structural
    def extend_from_slice(self, other: Iterable[T]) -> None:
        self._sv.extend_from_slice(other)

    @structural
    def resize(self, new_len: int, value: T) -> None:
        self._sv.resize(as_nonzero(new_len).get(), value)

    @structural
    def resize_with(self, new_len: int, f: Callable[[], T]) -> None:
        self._sv.resize_with(as_nonzero(new_len).get(), f)

    @structural
    def truncate(self, length: int) -> None:
        self._sv.truncate(as_nonzero(length).get())

    @structural
    def dedup(self) -> None:
        """Dedup cannot leave the vector empty."""
        self._sv.dedup()

    @structural
    def dedup_by(self, same_bucket: Callable[[T, T], bool]) -> None:
        self._sv.dedup_by(same_bucket)

    @structural
    def dedup_by_key(self, key: Callable[[T], K]) -> None:
        self._sv.dedup_by_key(key)

    # ------------------------------------------------------------------
    # Removal: checked / guarded / unchecked
    # ------------------------------------------------------------------

    @structural
    def try_pop(self) -> Optional[T]:
        """Remove and return the last element, or None if it is the only one."""
        inner = self._sv
        if len(inner) == 1:
            return None
        return inner.pop()

    @structural
    def pop_unchecked(self) -> T:
        inner = self._sv
        require(len(inner) > 1, "NonEmptySmallVec.pop_unchecked", "popping the only element")
        return inner.pop()

    @structural
    def try_remove(self, index: int) -> Optional[T]:
        inner = self._sv
        if len(inner) == 1:
            return None
        return inner.remove(index)

    @structural
    def remove_unchecked(self, index: int) -> T:
        inner = self._sv
        require(len(inner) > 1, "NonEmptySmallVec.remove_unchecked", "removing the only element")
        return inner.remove(index)

    @structural
    def try_swap_remove(self, index: int) -> Optional[T]:
        inner = self._sv
        if len(inner) == 1:
            return None
        return inner.swap_remove(index)

    @structural
    def swap_remove(self, index: int) -> T:
        """Swap-remove at a NonZero ``index``; index 0 is excluded."""
        return self._sv.swap_remove(as_nonzero(index).get())

    @structural
    def swap_remove_unchecked(self, index: int) -> T:
        inner = self._sv
        require(len(inner) > 1, "NonEmptySmallVec.swap_remove_unchecked", "removing the only element")
        return inner.swap_remove(index)

    def drain(self, rng: RangeLike = None) -> Optional[Drain[T]]:
        """
        Lazily remove the elements in ``rng``; None if it spans the whole vector.
        An empty range drains nothing.
        """
        inner = self._sv
        start, stop = resolve_range(rng, len(inner))
        if covers_all(start, stop, len(inner)):
            return None
        return Drain(self, inner.remove, start, stop)

    def drain_unchecked(self, rng: RangeLike = None) -> Drain[T]:
        inner = self._sv
        start, stop = resolve_range(rng, len(inner))
        require(
            not covers_all(start, stop, len(inner)),
            "NonEmptySmallVec.drain_unchecked", "range covers the whole vector",
        )
        return Drain(self, inner.remove, start, stop)

    @structural
    def split_off(self, at: int) -> List[T]:
        """Split off the elements from NonZero index ``at`` into an ordinary list."""
        at = as_nonzero(at).get()
        inner = self._sv
        if at > len(inner):
            raise IndexError(f"`at` split index (is {at}) should be <= len (is {len(inner)})")
        tail = inner[at:]
        inner.truncate(at)
        return tail

    # ------------------------------------------------------------------
    # Comparison and display
    # ------------------------------------------------------------------

    def __eq__(self, other: Any) -> bool:
        other_items = elements_of(other)
        if other_items is None:
            return NotImplemented
        return tuple(self._sv) == other_items

    def __lt__(self, other: Any) -> bool:
        other_items = elements_of(other)
        if other_items is None:
            return NotImplemented
        return tuple(self._sv) < other_items

    def __hash__(self) -> int:
        return hash(tuple(self._sv))

    def __repr__(self) -> str:
        if self._inner is None:
            return "NonEmptySmallVec(<moved>)"
        return f"NonEmptySmallVec({self._inner[:]!r}, inline_size={self._inner.inline_size})"
