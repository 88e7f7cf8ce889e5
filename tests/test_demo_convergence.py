"""
Tests for the gossip convergence demo.
"""

import pytest
import sys
import os

# Add repository root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from demo_convergence import build_numeric, run_simulation
from src.gcounter.g_counter import merge_all
from src.gcounter.numeric import BoundedIntegerNumeric, IntegerNumeric, OverflowPolicy


class TestConvergenceDemo:

    @pytest.mark.parametrize("seed", [0, 1, 42])
    def test_replicas_converge(self, seed):
        states, broadcast = run_simulation(n_replicas=4, rounds=6, seed=seed)
        expected = merge_all(broadcast)

        assert all(state == expected for state in states.values())
        assert len({state.value() for state in states.values()}) == 1

    def test_converges_with_heavy_duplication_and_delay(self):
        states, broadcast = run_simulation(
            n_replicas=3, rounds=4, duplicate_rate=0.9, delay_rate=0.9, seed=7
        )
        expected = merge_all(broadcast)
        assert all(state == expected for state in states.values())

    def test_same_seed_is_reproducible(self):
        first, _ = run_simulation(seed=3)
        second, _ = run_simulation(seed=3)
        assert first == second

    def test_bounded_numeric(self):
        numeric = build_numeric('bounded', 'uint8', 'saturate')
        states, _ = run_simulation(n_replicas=2, rounds=50, max_delta=20, seed=5, numeric=numeric)

        for state in states.values():
            assert state.numeric == BoundedIntegerNumeric('uint8', OverflowPolicy.SATURATE)
            assert all(int(count) <= 255 for count in state.counts.values())

    def test_build_numeric_default(self):
        assert build_numeric() == IntegerNumeric()

    def test_build_numeric_unknown(self):
        with pytest.raises(ValueError):
            build_numeric('complex')
