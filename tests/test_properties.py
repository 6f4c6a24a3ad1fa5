"""
Property-based tests for the non-empty invariant using hypothesis.

Random sequences of safe operations are applied to a collection and to a
plain list model side by side. The collection must track the model exactly
and never drop below one element.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from hypothesis import HealthCheck, given, settings, strategies as st
from nonempty import EmptyInputError, NonEmptySlice, NonEmptySmallVec, NonEmptyVec

# The autouse config fixture resets once per test, not per example
PROPERTY_SETTINGS = settings(suppress_health_check=[HealthCheck.function_scoped_fixture])

OPERATIONS = [
    "push", "try_pop", "try_remove", "try_swap_remove",
    "drain", "truncate", "dedup", "split_off", "insert",
]


@st.composite
def operation_strategy(draw):
    """Generate an operation name with two integer arguments."""
    name = draw(st.sampled_from(OPERATIONS))
    a = draw(st.integers(min_value=0, max_value=20))
    b = draw(st.integers(min_value=0, max_value=20))
    return name, a, b


def apply_operation(collection, model, name, a, b):
    """Apply one operation to both the collection and the list model."""
    length = len(model)
    if name == "push":
        collection.push(a)
        model.append(a)
    elif name == "insert":
        index = a % (length + 1)
        collection.insert(index, b)
        model.insert(index, b)
    elif name == "try_pop":
        result = collection.try_pop()
        assert result == (None if length == 1 else model.pop())
    elif name == "try_remove":
        index = a % length
        result = collection.try_remove(index)
        assert result == (None if length == 1 else model.pop(index))
    elif name == "try_swap_remove":
        index = a % length
        result = collection.try_swap_remove(index)
        if length == 1:
            assert result is None
        else:
            last = model.pop()
            if index == len(model):
                assert result == last
            else:
                assert result == model[index]
                model[index] = last
    elif name == "drain":
        start = a % (length + 1)
        stop = start + b % (length - start + 1)
        drained = collection.drain(slice(start, stop))
        if start == 0 and stop == length:
            assert drained is None
        else:
            assert list(drained) == model[start:stop]
            del model[start:stop]
    elif name == "truncate":
        n = a % length + 1
        collection.truncate(n)
        del model[n:]
    elif name == "dedup":
        collection.dedup()
        kept = [model[0]]
        for item in model[1:]:
            if item != kept[-1]:
                kept.append(item)
        model[:] = kept
    elif name == "split_off":
        at = a % length + 1
        assert collection.split_off(at) == model[at:]
        del model[at:]


class TestNonEmptyInvariant:
    """Safe operations never empty a collection."""

    @PROPERTY_SETTINGS
    @given(
        st.lists(st.integers(), min_size=1, max_size=10),
        st.lists(operation_strategy(), max_size=40),
    )
    def test_vec_tracks_model(self, initial, operations):
        """Test that NonEmptyVec follows a list model under random operations."""
        model = list(initial)
        v = NonEmptyVec.try_from_list(list(initial))
        for name, a, b in operations:
            apply_operation(v, model, name, a, b)
            assert len(v) >= 1
            assert v.to_list() == model
            assert v.capacity() >= len(v)

    @PROPERTY_SETTINGS
    @given(
        st.lists(st.integers(), min_size=1, max_size=10),
        st.lists(operation_strategy(), max_size=40),
        st.integers(min_value=0, max_value=6),
    )
    def test_smallvec_tracks_model(self, initial, operations, inline_size):
        """Test that NonEmptySmallVec follows a list model under random operations."""
        model = list(initial)
        sv = NonEmptySmallVec.try_from_list(list(initial), inline_size=inline_size)
        for name, a, b in operations:
            apply_operation(sv, model, name, a, b)
            assert len(sv) >= 1
            assert sv.to_list() == model
            assert sv.spilled() or len(sv) <= inline_size


class TestConversionProperties:
    """Conversions keep identity and content."""

    @PROPERTY_SETTINGS
    @given(st.lists(st.integers(), min_size=1))
    def test_list_round_trip_is_identity(self, items):
        """Test that a list adopted and released is the same list."""
        assert NonEmptyVec.try_from_list(items).into_list() is items

    @PROPERTY_SETTINGS
    @given(st.lists(st.integers(), max_size=0))
    def test_empty_list_rejected_unchanged(self, items):
        """Test that an empty list comes back on the error untouched."""
        with pytest.raises(EmptyInputError) as exc_info:
            NonEmptyVec.try_from_list(items)
        assert exc_info.value.original is items

    @PROPERTY_SETTINGS
    @given(st.lists(st.integers(), min_size=1, max_size=10), st.integers(min_value=1, max_value=5))
    def test_repeat(self, items, n):
        """Test repeating a view n times."""
        repeated = NonEmptySlice.try_from_slice(items).repeat(n)
        assert repeated.get_len() == n * len(items)
        assert repeated.to_list() == items * n

    @PROPERTY_SETTINGS
    @given(st.lists(st.integers(), min_size=1, max_size=10), st.data())
    def test_through_prefix(self, items, data):
        """Test that through() gives an inclusive prefix."""
        index = data.draw(st.integers(min_value=0, max_value=len(items) - 1))
        view = NonEmptySlice.try_from_slice(items)
        assert view.through(index).get_slice() == items[:index + 1]
