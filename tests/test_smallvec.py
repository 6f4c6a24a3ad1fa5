"""
Tests for nonempty.smallvec module

Tests cover:
- Construction from buffers, lists and InlineVecs
- Spill state and capacity
- The removal trio and drain
- Conversions (into_inner, into_list, into_inline_vec, into_boxed_slice)
- Value semantics independent of spill state
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from nonempty import (
    EmptyInputError,
    InlineVec,
    MovedValueError,
    NonEmptySlice,
    NonEmptySmallVec,
    NonEmptyVec,
    NonZero,
    PreconditionViolatedError,
    StaleViewError,
)


class TestNonEmptySmallVecCreation:
    """Test NonEmptySmallVec construction."""

    def test_positional(self):
        """Test building from positional elements with an inline size."""
        sv = NonEmptySmallVec(1, 2, inline_size=4)
        assert sv == [1, 2]
        assert sv.inline_size == 4
        assert not sv.spilled()

    def test_default_inline_size(self):
        """Test that the inline size defaults to the configured capacity."""
        assert NonEmptySmallVec.new(1).inline_size == 8

    def test_from_buf(self):
        """Test building from a full buffer."""
        sv = NonEmptySmallVec.from_buf((1, 2, 3))
        assert sv.inline_size == 3
        assert sv.get_len() == 3
        assert not sv.spilled()

    def test_from_buf_empty_is_programmer_error(self):
        """Test that from_buf refuses an empty buffer."""
        with pytest.raises(PreconditionViolatedError):
            NonEmptySmallVec.from_buf(())

    def test_from_buf_and_len(self):
        """Test building from the prefix of a buffer."""
        sv = NonEmptySmallVec.from_buf_and_len((1, 2, 3), NonZero(2))
        assert sv == [1, 2]
        assert sv.inline_size == 3
        with pytest.raises(ValueError):
            NonEmptySmallVec.from_buf_and_len((1, 2), 0)

    def test_from_buf_unchecked_with_debug_checks(self, debug_checks):
        """Test that debug checks catch an empty unchecked buffer."""
        with pytest.raises(PreconditionViolatedError):
            NonEmptySmallVec.from_buf_unchecked(())

    def test_try_from_inline_vec(self):
        """Test adopting an InlineVec without copying."""
        inner = InlineVec(2, [1])
        sv = NonEmptySmallVec.try_from_inline_vec(inner)
        assert sv.into_inline_vec() is inner

    def test_try_from_inline_vec_empty(self):
        """Test that an empty InlineVec comes back on the error."""
        inner = InlineVec(2)
        with pytest.raises(EmptyInputError) as exc_info:
            NonEmptySmallVec.try_from_inline_vec(inner)
        assert exc_info.value.original is inner

    def test_try_from_list(self):
        """Test adopting a list and rejecting an empty one."""
        sv = NonEmptySmallVec.try_from_list([1, 2, 3], inline_size=2)
        assert sv.spilled()
        data = []
        with pytest.raises(EmptyInputError) as exc_info:
            NonEmptySmallVec.try_from_list(data)
        assert exc_info.value.original is data

    def test_take_from(self):
        """Test that take_from empties the source store."""
        inner = InlineVec(2, [1, 2])
        sv = NonEmptySmallVec.take_from(inner)
        assert sv == [1, 2]
        assert len(inner) == 0
        assert NonEmptySmallVec.take_from(inner) is None

    def test_from_inline_vec_unchecked_with_debug_checks(self, debug_checks):
        """Test that debug checks catch an empty unchecked store."""
        with pytest.raises(PreconditionViolatedError):
            NonEmptySmallVec.from_inline_vec_unchecked(InlineVec(2))

    def test_from_slice(self):
        """Test copying from a non-empty view."""
        view = NonEmptySlice.try_from_slice([1, 2])
        sv = NonEmptySmallVec.from_slice(view, inline_size=4)
        assert sv == [1, 2]
        assert not sv.spilled()

    def test_from_elem(self):
        """Test building from a repeated element."""
        sv = NonEmptySmallVec.from_elem("x", 3, inline_size=2)
        assert sv == ["x", "x", "x"]
        assert sv.spilled()
        with pytest.raises(ValueError):
            NonEmptySmallVec.from_elem("x", 0)

    def test_with_capacity(self):
        """Test that a large requested capacity spills up front."""
        assert not NonEmptySmallVec.with_capacity(1, 4, inline_size=8).spilled()
        sv = NonEmptySmallVec.with_capacity(1, 16, inline_size=8)
        assert sv.spilled()
        assert sv.capacity() == 16


class TestNonEmptySmallVecStorage:
    """Test spill state and capacity operations."""

    def test_push_spills(self):
        """Test that pushing onto a full buffer spills."""
        sv = NonEmptySmallVec.from_buf((1, 2))
        sv.push(3)
        assert sv.spilled()
        assert sv == [1, 2, 3]

    def test_capacity_is_nonzero(self):
        """Test that capacity() returns a NonZero."""
        sv = NonEmptySmallVec(1, inline_size=0)
        assert isinstance(sv.capacity(), NonZero)
        assert sv.capacity() >= 1

    def test_grow_and_unspill(self):
        """Test growing onto the heap and back inline."""
        sv = NonEmptySmallVec(1, inline_size=2)
        sv.grow(NonZero(10))
        assert sv.spilled()
        sv.grow(2)
        assert not sv.spilled()
        with pytest.raises(ValueError):
            sv.grow(0)

    def test_try_grow(self):
        """Test the non-raising grow."""
        sv = NonEmptySmallVec(1, 2, inline_size=2)
        assert sv.try_grow(4) is None
        with pytest.raises(ValueError):
            sv.try_grow(1)

    def test_reserve_and_shrink(self):
        """Test reserving and shrinking capacity."""
        sv = NonEmptySmallVec(1, inline_size=2)
        sv.reserve(5)
        assert sv.spilled()
        assert sv.capacity() >= 6
        sv.shrink_to_fit()
        assert not sv.spilled()
        sv.reserve_exact(1)
        assert sv.try_reserve(1) is None
        assert sv.try_reserve_exact(1) is None

    def test_capacity_changes_invalidate_views(self):
        """Test that reserving, which may spill, invalidates views."""
        sv = NonEmptySmallVec(1, inline_size=2)
        view = sv.as_slice()
        sv.reserve(5)
        assert sv.spilled()
        with pytest.raises(StaleViewError):
            view.first()


class TestNonEmptySmallVecMutation:
    """Test additive and removing mutation."""

    def test_insert_variants(self):
        """Test single and bulk inserts."""
        sv = NonEmptySmallVec(1, 5, inline_size=8)
        sv.insert(1, 2)
        sv.insert_many(2, [3, 4])
        sv.insert_from_slice(5, [6])
        assert sv == [1, 2, 3, 4, 5, 6]

    def test_append_inline(self):
        """Test appending another InlineVec."""
        sv = NonEmptySmallVec(1, inline_size=4)
        other = InlineVec(4, [2, 3])
        sv.append_inline(other)
        assert sv == [1, 2, 3]
        assert len(other) == 0

    def test_extend(self):
        """Test extending from an iterator and a slice."""
        sv = NonEmptySmallVec(1, inline_size=2)
        sv.extend(iter([2, 3]))
        sv.extend_from_slice([4])
        assert sv == [1, 2, 3, 4]
        assert sv.spilled()

    def test_try_pop(self):
        """Test that try_pop keeps the last element."""
        sv = NonEmptySmallVec(10, 20, inline_size=4)
        assert sv.try_pop() == 20
        assert sv.try_pop() is None
        assert sv == [10]

    def test_try_remove_and_swap_remove(self):
        """Test that the checked removals keep the last element."""
        sv = NonEmptySmallVec(1, 2, 3, inline_size=4)
        assert sv.try_remove(0) == 1
        assert sv.try_swap_remove(0) == 2
        assert sv == [3]
        assert sv.try_remove(0) is None
        assert sv.try_swap_remove(0) is None

    def test_swap_remove_guarded(self):
        """Test swap_remove on a vector with more than one element."""
        sv = NonEmptySmallVec(1, 2, 3, inline_size=4)
        assert sv.swap_remove(1) == 2
        assert sv == [1, 3]
        with pytest.raises(ValueError):
            sv.swap_remove(0)

    def test_unchecked_with_debug_checks(self, debug_checks):
        """Test that debug checks catch unchecked removals of the last element."""
        sv = NonEmptySmallVec(1, inline_size=2)
        with pytest.raises(PreconditionViolatedError):
            sv.pop_unchecked()
        with pytest.raises(PreconditionViolatedError):
            sv.remove_unchecked(0)
        with pytest.raises(PreconditionViolatedError):
            sv.swap_remove_unchecked(0)
        assert sv == [1]

    def test_unchecked_forms(self):
        """Test the unchecked removals when preconditions hold."""
        sv = NonEmptySmallVec(1, 2, 3, 4, inline_size=8)
        assert sv.pop_unchecked() == 4
        assert sv.remove_unchecked(0) == 1
        assert sv.swap_remove_unchecked(0) == 2
        assert sv == [3]

    def test_truncate_resize(self):
        """Test truncating and resizing."""
        sv = NonEmptySmallVec(1, 2, 3, inline_size=2)
        sv.truncate(1)
        assert sv == [1]
        sv.resize(3, 0)
        assert sv == [1, 0, 0]
        sv.resize_with(2, lambda: 9)
        assert sv == [1, 0]
        with pytest.raises(ValueError):
            sv.truncate(0)

    def test_dedup(self):
        """Test the dedup family of methods."""
        sv = NonEmptySmallVec(1, 1, 2, 2, inline_size=8)
        sv.dedup()
        assert sv == [1, 2]
        sv.dedup_by(lambda a, b: True)
        assert sv == [1]
        sv.dedup_by_key(abs)
        assert sv == [1]

    def test_split_off(self):
        """Test splitting off a tail."""
        sv = NonEmptySmallVec(1, 2, 3, inline_size=4)
        assert sv.split_off(2) == [3]
        assert sv == [1, 2]

    def test_drain(self):
        """Test draining a range and refusing the full range."""
        sv = NonEmptySmallVec(1, 2, 3, 4, inline_size=4)
        assert sv.drain() is None
        assert list(sv.drain(slice(1, 3))) == [2, 3]
        assert sv == [1, 4]

    def test_drain_empty_range(self):
        """Test that draining an empty range removes nothing."""
        sv = NonEmptySmallVec(1, inline_size=2)
        assert list(sv.drain(slice(0, 0))) == []
        assert sv == [1]

    def test_drain_unchecked_with_debug_checks(self, debug_checks):
        """Test that debug checks catch an unchecked full drain."""
        sv = NonEmptySmallVec(1, 2, inline_size=2)
        with pytest.raises(PreconditionViolatedError):
            sv.drain_unchecked(slice(0, 2))

    def test_structural_mutation_invalidates_views(self):
        """Test that a push invalidates outstanding views."""
        sv = NonEmptySmallVec(1, 2, inline_size=2)
        view = sv.as_slice()
        assert view.last() == 2
        sv.push(3)
        with pytest.raises(StaleViewError):
            view.first()


class TestNonEmptySmallVecConversion:
    """Test conversions out of a NonEmptySmallVec."""

    def test_into_inner_full(self):
        """Test extracting a full inline buffer."""
        sv = NonEmptySmallVec.from_buf((1, 2))
        assert sv.into_inner() == (1, 2)
        with pytest.raises(MovedValueError):
            sv.first()

    def test_into_inner_not_full_keeps_vector(self):
        """Test that a failed into_inner leaves the vector usable."""
        sv = NonEmptySmallVec(1, inline_size=2)
        assert sv.into_inner() is None
        assert sv == [1]

    def test_into_inner_spilled(self):
        """Test that into_inner refuses a spilled vector."""
        sv = NonEmptySmallVec.from_buf((1,))
        sv.push(2)
        assert sv.into_inner() is None

    def test_into_list(self):
        """Test converting an inline vector to a list."""
        sv = NonEmptySmallVec(1, 2, inline_size=4)
        assert sv.into_list() == [1, 2]
        assert repr(sv) == "NonEmptySmallVec(<moved>)"

    def test_into_list_spilled_hands_over_heap(self):
        """Test that a spilled vector hands over its heap list."""
        data = [1, 2, 3]
        sv = NonEmptySmallVec.try_from_list(data, inline_size=1)
        assert sv.into_list() is data

    def test_into_boxed_slice(self):
        """Test converting to a boxed slice."""
        boxed = NonEmptySmallVec(1, 2, inline_size=4).into_boxed_slice()
        assert boxed.is_boxed()
        assert isinstance(boxed.into_vec(), NonEmptyVec)

    def test_clone(self):
        """Test that a clone is independent."""
        sv = NonEmptySmallVec(1, inline_size=1)
        clone = sv.clone()
        clone.push(2)
        assert sv == [1]
        assert clone.spilled()


    def test_get_inline_vec_is_a_copy(self):
        """Test that the backing store is exposed only as a copy."""
        sv = NonEmptySmallVec(1, 2, 3, inline_size=2)
        inner = sv.get_inline_vec()
        assert isinstance(inner, InlineVec)
        assert inner == [1, 2, 3]
        assert inner.spilled()
        assert inner.capacity() == sv.capacity()
        inner.clear()
        assert sv == [1, 2, 3]
        view = sv.as_slice()
        sv.get_inline_vec()
        assert view.is_valid()


class TestNonEmptySmallVecComparison:
    """Test value semantics."""

    def test_spill_state_not_part_of_equality(self):
        """Test that spill state does not affect equality."""
        inline = NonEmptySmallVec(1, 2, inline_size=4)
        spilled = NonEmptySmallVec(1, 2, inline_size=1)
        assert spilled.spilled() and not inline.spilled()
        assert inline == spilled
        assert hash(inline) == hash(spilled)

    def test_ordering(self):
        """Test lexicographic ordering."""
        assert NonEmptySmallVec(1, inline_size=2) < NonEmptySmallVec(2, inline_size=2)

    def test_equality_with_vec(self):
        """Test equality with NonEmptyVec in both directions."""
        assert NonEmptySmallVec(1, 2) == NonEmptyVec(1, 2)
        assert NonEmptyVec(1, 2) == NonEmptySmallVec(1, 2)

    def test_repr(self):
        """Test the repr of a small vector."""
        assert repr(NonEmptySmallVec(1, inline_size=2)) == "NonEmptySmallVec([1], inline_size=2)"
