"""
Numeric capabilities that a G-Counter is parameterised over.

A counter never assumes its count type is a Python ``int``. Everything it
needs from the count type (zero, addition, ordering, maximum) comes from
an explicit ``Numeric`` object handed to the counter.
"""

import math
import numbers
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Iterable, TypeVar

import numpy as np

from .errors import InvalidArgumentError

E = TypeVar('E')


class Numeric(ABC, Generic[E]):
    """
    Abstract numeric capability.

    Implementations must keep addition associative and ``max`` consistent
    with ``lteq``. The order may be partial.
    """

    @abstractmethod
    def zero(self) -> E:
        """Additive identity."""

    @abstractmethod
    def add(self, x: E, y: E) -> E:
        """Sum of two values."""

    @abstractmethod
    def lteq(self, x: E, y: E) -> bool:
        """Return True if ``x <= y`` under this numeric's order."""

    def max(self, x: E, y: E) -> E:
        return y if self.lteq(x, y) else x

    def equiv(self, x: E, y: E) -> bool:
        return self.lteq(x, y) and self.lteq(y, x)

    def is_non_negative(self, x: E) -> bool:
        return self.lteq(self.zero(), x)

    def sum(self, values: Iterable[E]) -> E:
        """
        Fold ``values`` with ``add`` starting from ``zero``.

        Args:
            values: Values to add up

        Returns:
            The total, or zero for an empty iterable
        """
        total = self.zero()
        for value in values:
            total = self.add(total, value)
        return total

    def coerce(self, x: Any) -> E:
        """
        Check that ``x`` is a value of this numeric's type and convert it.

        Raises:
            InvalidArgumentError: If ``x`` does not belong to the type
        """
        return x

    def to_builtin(self, x: E) -> Any:
        """Plain Python number for ``x``, used when building snapshots."""
        return x


@dataclass(frozen=True)
class IntegerNumeric(Numeric[int]):
    """Unbounded Python integers. Addition never overflows."""

    def zero(self) -> int:
        return 0

    def add(self, x: int, y: int) -> int:
        return x + y

    def lteq(self, x: int, y: int) -> bool:
        return x <= y

    def max(self, x: int, y: int) -> int:
        return max(x, y)

    def coerce(self, x: Any) -> int:
        if isinstance(x, bool) or not isinstance(x, numbers.Integral):
            raise InvalidArgumentError(f"Expected an integer count, got {x!r}")
        return int(x)


@dataclass(frozen=True)
class FloatNumeric(Numeric[float]):
    """Python floats. NaN is rejected because it has no place in the order."""

    def zero(self) -> float:
        return 0.0

    def add(self, x: float, y: float) -> float:
        return x + y

    def lteq(self, x: float, y: float) -> bool:
        return x <= y

    def max(self, x: float, y: float) -> float:
        return max(x, y)

    def coerce(self, x: Any) -> float:
        if isinstance(x, bool) or not isinstance(x, numbers.Real):
            raise InvalidArgumentError(f"Expected a real count, got {x!r}")
        value = float(x)
        if math.isnan(value):
            raise InvalidArgumentError("NaN is not a valid count")
        return value


class OverflowPolicy(Enum):
    """What a bounded integer does when a sum leaves its range."""

    SATURATE = 'saturate'
    WRAP = 'wrap'


@dataclass(frozen=True)
class BoundedIntegerNumeric(Numeric[np.integer]):
    """
    Fixed-width integers backed by a numpy integer dtype.

    Sums are computed exactly with Python ints and then brought back into
    the dtype's range according to ``overflow``. ``SATURATE`` clamps to
    the dtype bounds; ``WRAP`` reduces the sum modulo ``max_value + 1``,
    so counts stay within ``[0, max_value]`` even for signed dtypes.

    Args:
        dtype: Name of a numpy integer dtype, e.g. ``'int64'`` or ``'uint8'``
        overflow: Policy applied when a sum leaves the dtype's range
    """

    dtype: str = 'int64'
    overflow: OverflowPolicy = OverflowPolicy.SATURATE
    _info: np.iinfo = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        try:
            info = np.iinfo(np.dtype(self.dtype))
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(
                f"{self.dtype!r} is not a numpy integer dtype"
            ) from exc
        object.__setattr__(self, '_info', info)

    @property
    def min_value(self) -> int:
        return int(self._info.min)

    @property
    def max_value(self) -> int:
        return int(self._info.max)

    def _box(self, value: int) -> np.integer:
        return np.dtype(self.dtype).type(value)

    def zero(self) -> np.integer:
        return self._box(0)

    def add(self, x: np.integer, y: np.integer) -> np.integer:
        total = int(x) + int(y)
        if self.min_value <= total <= self.max_value:
            return self._box(total)
        if self.overflow is OverflowPolicy.SATURATE:
            return self._box(min(max(total, self.min_value), self.max_value))
        return self._box(total % (self.max_value + 1))

    def lteq(self, x: np.integer, y: np.integer) -> bool:
        return int(x) <= int(y)

    def coerce(self, x: Any) -> np.integer:
        if isinstance(x, bool) or not isinstance(x, numbers.Integral):
            raise InvalidArgumentError(f"Expected an integer count, got {x!r}")
        value = int(x)
        if not self.min_value <= value <= self.max_value:
            raise InvalidArgumentError(
                f"{value} does not fit in {self.dtype} "
                f"[{self.min_value}, {self.max_value}]"
            )
        return self._box(value)

    def to_builtin(self, x: np.integer) -> int:
        return int(x)


INTEGER = IntegerNumeric()
