"""
Unit tests for numeric capabilities.
"""

import pytest
import sys
import os

import numpy as np

# Add repository root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.gcounter.errors import InvalidArgumentError
from src.gcounter.g_counter import GCounter
from src.gcounter.numeric import (
    BoundedIntegerNumeric,
    FloatNumeric,
    IntegerNumeric,
    OverflowPolicy,
)


class TestIntegerNumeric:

    def test_basic_operations(self):
        num = IntegerNumeric()
        assert num.zero() == 0
        assert num.add(2, 3) == 5
        assert num.lteq(2, 3)
        assert not num.lteq(3, 2)
        assert num.max(2, 3) == 3
        assert num.sum([]) == 0
        assert num.sum([1, 2, 3]) == 6

    def test_unbounded(self):
        num = IntegerNumeric()
        big = 2 ** 80
        assert num.add(big, big) == 2 ** 81

    @pytest.mark.parametrize("bad", [True, 1.0, "1", None])
    def test_coerce_rejects_non_integers(self, bad):
        with pytest.raises(InvalidArgumentError):
            IntegerNumeric().coerce(bad)

    def test_coerce_accepts_numpy_integers(self):
        assert IntegerNumeric().coerce(np.int32(7)) == 7

    def test_equal_instances(self):
        assert IntegerNumeric() == IntegerNumeric()
        assert IntegerNumeric() != FloatNumeric()


class TestFloatNumeric:

    def test_counter_over_floats(self):
        c = GCounter.empty(FloatNumeric()).increment('a', 0.5).increment('b', 1)
        assert c.value() == pytest.approx(1.5)
        assert isinstance(c.get('b'), float)

    def test_nan_rejected(self):
        with pytest.raises(InvalidArgumentError):
            GCounter.empty(FloatNumeric()).increment('a', float('nan'))

    def test_negative_rejected(self):
        with pytest.raises(InvalidArgumentError):
            GCounter.empty(FloatNumeric()).increment('a', -0.1)


class TestBoundedIntegerNumeric:

    def test_bounds_from_dtype(self):
        num = BoundedIntegerNumeric('int8')
        assert num.min_value == -128
        assert num.max_value == 127

    def test_saturate(self):
        num = BoundedIntegerNumeric('uint8', OverflowPolicy.SATURATE)
        assert num.add(np.uint8(250), np.uint8(10)) == 255

    def test_wrap(self):
        num = BoundedIntegerNumeric('uint8', OverflowPolicy.WRAP)
        assert num.add(np.uint8(250), np.uint8(10)) == 4

    def test_wrap_signed_stays_non_negative(self):
        num = BoundedIntegerNumeric('int8', OverflowPolicy.WRAP)
        assert num.add(np.int8(127), np.int8(1)) == 0
        assert num.add(np.int8(127), np.int8(5)) == 4

    def test_wrap_to_zero_is_not_stored(self):
        num = BoundedIntegerNumeric('uint8', OverflowPolicy.WRAP)
        c = GCounter.empty(num).increment('a', 250).increment('a', 6)

        assert c.get('a') == 0
        assert len(c) == 0
        assert c == GCounter.empty(num)
        assert hash(c) == hash(GCounter.empty(num))

    def test_wrapped_signed_counter_round_trips_snapshot(self):
        num = BoundedIntegerNumeric('int8', OverflowPolicy.WRAP)
        c = GCounter.empty(num).increment('a', 127).increment('a', 3).increment('b', 1)

        assert c.get('a') == 2
        assert GCounter.from_dict(c.to_dict(), numeric=num) == c

    def test_results_keep_dtype(self):
        num = BoundedIntegerNumeric('int32')
        assert num.add(num.coerce(1), num.coerce(2)).dtype == np.dtype('int32')
        assert num.zero().dtype == np.dtype('int32')

    def test_saturating_counter(self):
        num = BoundedIntegerNumeric('uint8', OverflowPolicy.SATURATE)
        c = GCounter.empty(num).increment('a', 200).increment('a', 100)
        assert c.get('a') == 255

    def test_coerce_out_of_range(self):
        with pytest.raises(InvalidArgumentError):
            BoundedIntegerNumeric('uint8').coerce(256)

    @pytest.mark.parametrize("dtype", ['float32', 'not-a-dtype'])
    def test_non_integer_dtype_rejected(self, dtype):
        with pytest.raises(InvalidArgumentError):
            BoundedIntegerNumeric(dtype)

    def test_equality_by_configuration(self):
        assert BoundedIntegerNumeric('int16') == BoundedIntegerNumeric('int16')
        assert BoundedIntegerNumeric('int16') != BoundedIntegerNumeric('int32')
        assert (BoundedIntegerNumeric('int16', OverflowPolicy.WRAP)
                != BoundedIntegerNumeric('int16', OverflowPolicy.SATURATE))
