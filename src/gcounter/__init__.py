"""Grow-only counter CRDT."""

from .base import CRDT, PartialOrdering
from .errors import InvalidArgumentError
from .g_counter import GCounter, merge_all
from .numeric import (
    BoundedIntegerNumeric,
    FloatNumeric,
    IntegerNumeric,
    Numeric,
    OverflowPolicy,
)
from .snapshot import GCounterSnapshot

__all__ = [
    'CRDT',
    'PartialOrdering',
    'InvalidArgumentError',
    'GCounter',
    'merge_all',
    'Numeric',
    'IntegerNumeric',
    'FloatNumeric',
    'BoundedIntegerNumeric',
    'OverflowPolicy',
    'GCounterSnapshot',
]
