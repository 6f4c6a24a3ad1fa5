"""
nonempty - NonEmptySlice

A borrowed, non-owning view over the first ``length`` elements of a backing
sequence, where ``length`` is at least 1.

Views are runtime-checked handles. A view taken from a NonEmptyVec or
NonEmptySmallVec records the owner's generation; any structural mutation of
the owner (push, pop, drain, ...) bumps the generation and every outstanding
view becomes stale. Using a stale view raises StaleViewError. Element
assignment through the owner or the view is not structural and keeps views
valid.

Range indexing is limited to the two forms that can never be empty:

    view[:]           the view itself
    view.through(i)   the inclusive prefix [0..=i]

Any other slice raises TypeError. For a possibly-empty sub-range, slice the
ordinary list returned by ``get_slice()``.
"""

from functools import total_ordering
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Generic,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)

from .bounds import normalize_index, require
from .errors import EmptyInputError, MovedValueError, PreconditionViolatedError, StaleViewError
from .logger import log_ownership_error, log_rejection
from .nonzero import NonZero, as_nonzero

if TYPE_CHECKING:
    from .vec import NonEmptyVec

T = TypeVar("T")

_FULL = slice(None, None, None)


def elements_of(other: Any) -> Optional[Tuple[Any, ...]]:
    """Element tuple of a comparable sequence, or None for unrelated types."""
    if isinstance(other, NonEmptySlice):
        return tuple(other)
    if isinstance(other, (list, tuple)):
        return tuple(other)
    as_slice = getattr(other, "as_slice", None)
    if callable(as_slice) and hasattr(other, "_generation"):
        return tuple(as_slice())
    return None


@total_ordering
class NonEmptySlice(Generic[T]):
    """
    A continuous non-empty view.

    Never constructed directly; use ``try_from_slice``, ``from_array`` or the
    ``as_slice()`` projection of an owned collection.
    """

    __slots__ = ("_base", "_length", "_owner", "_generation", "_boxed")

    def __init__(self, *args, **kwargs):
        raise TypeError(
            "NonEmptySlice cannot be instantiated directly; "
            "use NonEmptySlice.try_from_slice() or an owner's as_slice()"
        )

    @classmethod
    def _make(
        cls,
        base: Sequence[T],
        length: int,
        owner: Any = None,
        boxed: bool = False,
    ) -> "NonEmptySlice[T]":
        view = object.__new__(cls)
        view._base = base
        view._length = length
        view._owner = owner
        view._generation = owner._generation if owner is not None else 0
        view._boxed = boxed
        return view

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def try_from_slice(cls, seq: Sequence[T]) -> "NonEmptySlice[T]":
        """
        View ``seq`` as a NonEmptySlice.

        Raises:
            EmptyInputError: ``seq`` is empty. The error's ``original`` is
                ``seq`` itself, unmodified.
        """
        if isinstance(seq, NonEmptySlice):
            return seq
        if len(seq) == 0:
            log_rejection("NonEmptySlice.try_from_slice", type(seq).__name__)
            raise EmptyInputError(seq, "NonEmptySlice")
        return cls._make(seq, len(seq))

    @classmethod
    def try_from_slice_opt(cls, seq: Sequence[T]) -> Optional["NonEmptySlice[T]"]:
        """Like try_from_slice, but returns None for an empty sequence."""
        if isinstance(seq, NonEmptySlice):
            return seq
        if len(seq) == 0:
            return None
        return cls._make(seq, len(seq))

    @classmethod
    def from_slice_unchecked(cls, seq: Sequence[T]) -> "NonEmptySlice[T]":
        """
        View ``seq`` without checking its length.

        The caller must guarantee ``seq`` is not empty. An empty view breaks
        first(), last() and every length-minus-one computation.
        """
        require(len(seq) > 0, "NonEmptySlice.from_slice_unchecked", "sequence is empty")
        return cls._make(seq, len(seq))

    @classmethod
    def from_array(cls, seq: Sequence[T]) -> "NonEmptySlice[T]":
        """
        View a fixed-size initializer whose length is known to be positive.

        An empty initializer is a programmer error, not a recoverable one.
        """
        if len(seq) == 0:
            raise PreconditionViolatedError(
                "Length of array must be non-zero to create NonEmptySlice."
            )
        return cls._make(seq, len(seq))

    # ------------------------------------------------------------------
    # Ownership checks
    # ------------------------------------------------------------------

    def _check(self) -> Sequence[T]:
        """Return the backing sequence, raising if this view is no longer valid."""
        base = self._base
        if base is None:
            log_ownership_error("use after move", "NonEmptySlice")
            raise MovedValueError("NonEmptySlice was moved into a NonEmptyVec")
        owner = self._owner
        if owner is not None:
            if owner._generation != self._generation:
                log_ownership_error(
                    "stale view", "NonEmptySlice",
                    owner=type(owner).__name__,
                )
                raise StaleViewError(
                    f"{type(owner).__name__} was modified after this view was taken"
                )
        elif len(base) < self._length:
            log_ownership_error("stale view", "NonEmptySlice", owner=type(base).__name__)
            raise StaleViewError("backing sequence shrank below the viewed length")
        return base

    def is_valid(self) -> bool:
        """True while the view may still be used."""
        if self._base is None:
            return False
        if self._owner is not None:
            return self._owner._generation == self._generation
        return len(self._base) >= self._length

    # ------------------------------------------------------------------
    # Length
    # ------------------------------------------------------------------

    def len(self) -> NonZero:
        """Number of elements, guaranteed not to be 0. Use get_len() for a plain int."""
        self._check()
        return NonZero.new_unchecked(self._length)

    def get_len(self) -> int:
        self._check()
        return self._length

    def __len__(self) -> int:
        self._check()
        return self._length

    def has_just_1_element(self) -> bool:
        """True if removing one element would leave the collection empty."""
        return self.get_len() == 1

    def __bool__(self) -> bool:
        return True

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    def first(self) -> T:
        """The first element. Infallible: a view always has one."""
        return self._check()[0]

    def last(self) -> T:
        """The last element. Infallible: a view always has one."""
        return self._check()[self._length - 1]

    def set_first(self, value: T) -> None:
        self._check()[0] = value

    def set_last(self, value: T) -> None:
        self._check()[self._length - 1] = value

    def __getitem__(self, index):
        base = self._check()
        if isinstance(index, slice):
            if index == _FULL:
                return self
            raise TypeError(
                "NonEmptySlice only supports [:] and through(i); "
                "use get_slice()[a:b] for ranges that may be empty"
            )
        return base[normalize_index(index, self._length)]

    def __setitem__(self, index: int, value: T) -> None:
        base = self._check()
        if isinstance(index, slice):
            raise TypeError("NonEmptySlice does not support slice assignment")
        base[normalize_index(index, self._length)] = value

    def through(self, index: int) -> "NonEmptySlice[T]":
        """
        Inclusive prefix ``[0..=index]``, which always holds at least one element.

        Raises:
            IndexError: ``index`` is past the last element.
        """
        self._check()
        if not isinstance(index, int) or index < 0 or index >= self._length:
            raise IndexError(
                f"range end index {index} out of range for slice of length {self._length}"
            )
        view = NonEmptySlice._make(self._base, index + 1, self._owner, boxed=False)
        view._generation = self._generation
        return view

    def get_slice(self) -> List[T]:
        """The viewed elements as an ordinary, possibly-empty-typed list (a copy)."""
        base = self._check()
        return [base[i] for i in range(self._length)]

    def __iter__(self) -> Iterator[T]:
        base = self._check()
        for i in range(self._length):
            yield base[i]

    def __reversed__(self) -> Iterator[T]:
        base = self._check()
        for i in range(self._length - 1, -1, -1):
            yield base[i]

    def __contains__(self, value: Any) -> bool:
        return any(item is value or item == value for item in self)

    def index(self, value: Any) -> int:
        for i, item in enumerate(self):
            if item is value or item == value:
                return i
        raise ValueError(f"{value!r} is not in NonEmptySlice")

    def count(self, value: Any) -> int:
        return sum(1 for item in self if item is value or item == value)

    def split_first(self) -> Tuple[T, List[T]]:
        """The first element and the (possibly empty) rest."""
        items = self.get_slice()
        return items[0], items[1:]

    def split_last(self) -> Tuple[T, List[T]]:
        """The last element and the (possibly empty) rest."""
        items = self.get_slice()
        return items[-1], items[:-1]

    # ------------------------------------------------------------------
    # Length-preserving mutation
    # ------------------------------------------------------------------

    def _write_back(self, items: List[T]) -> None:
        base = self._check()
        for i, item in enumerate(items):
            base[i] = item

    def swap(self, a: int, b: int) -> None:
        base = self._check()
        a = normalize_index(a, self._length)
        b = normalize_index(b, self._length)
        base[a], base[b] = base[b], base[a]

    def reverse(self) -> None:
        items = self.get_slice()
        items.reverse()
        self._write_back(items)

    def sort(self, *, key: Optional[Callable[[T], Any]] = None, reverse: bool = False) -> None:
        items = self.get_slice()
        items.sort(key=key, reverse=reverse)
        self._write_back(items)

    def fill(self, value: T) -> None:
        self._write_back([value] * self._length)

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    def to_vec(self) -> "NonEmptyVec[T]":
        """Copy the elements into a new NonEmptyVec."""
        from .vec import NonEmptyVec
        return NonEmptyVec._wrap(self.get_slice())

    def into_vec(self) -> "NonEmptyVec[T]":
        """
        Reclaim a boxed slice's storage as a NonEmptyVec without copying.

        Only boxed slices (from ``NonEmptyVec.into_boxed_slice()``) own their
        storage. The boxed slice is consumed.

        Raises:
            TypeError: this view borrows its storage.
        """
        base = self._check()
        if not self._boxed:
            raise TypeError("into_vec() needs a boxed slice; use to_vec() to copy a borrowed view")
        from .vec import NonEmptyVec
        self._base = None
        self._boxed = False
        return NonEmptyVec._wrap(base)

    def is_boxed(self) -> bool:
        """True if this slice owns its storage."""
        return self._boxed

    def repeat(self, n: int) -> "NonEmptyVec[T]":
        """The elements repeated ``n`` times, ``n`` being a NonZero count."""
        n = as_nonzero(n)
        from .vec import NonEmptyVec
        return NonEmptyVec._wrap(self.get_slice() * n.get())

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def __eq__(self, other: Any) -> bool:
        other_items = elements_of(other)
        if other_items is None:
            return NotImplemented
        return tuple(self) == other_items

    def __lt__(self, other: Any) -> bool:
        other_items = elements_of(other)
        if other_items is None:
            return NotImplemented
        return tuple(self) < other_items

    def __hash__(self) -> int:
        return hash(tuple(self))

    def __repr__(self) -> str:
        if not self.is_valid():
            return "NonEmptySlice(<invalid>)"
        return f"NonEmptySlice({self.get_slice()!r})"


class ViewProjection:
    """
    Read access for owned collections, projected through ``as_slice()``.

    Owners do not inherit from NonEmptySlice; they present themselves as one.
    Subclasses implement ``as_slice()`` and ``__len__``.
    """

    __slots__ = ()

    def as_slice(self) -> NonEmptySlice:
        raise NotImplementedError

    def len(self) -> NonZero:
        """Number of elements, guaranteed not to be 0."""
        return NonZero.new_unchecked(len(self))

    def get_len(self) -> int:
        return len(self)

    def has_just_1_element(self) -> bool:
        return len(self) == 1

    def __bool__(self) -> bool:
        return True

    def first(self):
        return self.as_slice().first()

    def last(self):
        return self.as_slice().last()

    def set_first(self, value) -> None:
        self.as_slice().set_first(value)

    def set_last(self, value) -> None:
        self.as_slice().set_last(value)

    def __getitem__(self, index):
        return self.as_slice()[index]

    def __setitem__(self, index, value) -> None:
        self.as_slice()[index] = value

    def through(self, index: int) -> NonEmptySlice:
        return self.as_slice().through(index)

    def get_slice(self) -> list:
        return self.as_slice().get_slice()

    def __iter__(self):
        return iter(self.as_slice())

    def __reversed__(self):
        return reversed(self.as_slice())

    def __contains__(self, value) -> bool:
        return value in self.as_slice()

    def index(self, value) -> int:
        return self.as_slice().index(value)

    def count(self, value) -> int:
        return self.as_slice().count(value)

    def split_first(self):
        return self.as_slice().split_first()

    def split_last(self):
        return self.as_slice().split_last()

    def swap(self, a: int, b: int) -> None:
        self.as_slice().swap(a, b)

    def reverse(self) -> None:
        self.as_slice().reverse()

    def sort(self, *, key=None, reverse: bool = False) -> None:
        self.as_slice().sort(key=key, reverse=reverse)

    def fill(self, value) -> None:
        self.as_slice().fill(value)

    def repeat(self, n: int):
        return self.as_slice().repeat(n)
