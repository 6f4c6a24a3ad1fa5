"""
nonempty - Python Package

Sequence types that always hold at least one element, so first(), last()
and len() never need an emptiness check.

Usage:
    from nonempty import NonEmptyVec, NonEmptySlice

    v = NonEmptyVec(10, 20, 30)
    v.try_pop()                              # 30
    v.first()                                # 10

    view = NonEmptySlice.try_from_slice([1, 2, 3])
    view.through(1).get_slice()              # [1, 2]
"""

__version__ = "0.1.0"
__author__ = "nonempty developers"

# Public API
from .config import NonEmptyConfig, get_config, set_config, reset_config
from .errors import (
    NonEmptyError,
    EmptyInputError,
    PreconditionViolatedError,
    StaleViewError,
    MovedValueError,
    CollectionAllocError,
    CapacityOverflowError,
)
from .inline import InlineVec
from .logger import configure_logging
from .nonzero import NonZero
from .ownership import Drain
from .smallvec import NonEmptySmallVec
from .vec import NonEmptyVec
from .view import NonEmptySlice

__all__ = [
    "NonEmptySlice",
    "NonEmptyVec",
    "NonEmptySmallVec",
    "InlineVec",
    "NonZero",
    "Drain",
    "NonEmptyConfig",
    "get_config",
    "set_config",
    "reset_config",
    "configure_logging",
    "NonEmptyError",
    "EmptyInputError",
    "PreconditionViolatedError",
    "StaleViewError",
    "MovedValueError",
    "CollectionAllocError",
    "CapacityOverflowError",
]
