"""
Grow-only Counter (G-Counter) CRDT implementation.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Hashable, Iterable, Mapping, Optional, Tuple

from pydantic import ValidationError

from .base import CRDT, PartialOrdering
from .errors import InvalidArgumentError
from .numeric import INTEGER, Numeric
from .snapshot import GCounterSnapshot

logger = logging.getLogger(__name__)


class GCounter(CRDT):
    """
    Grow-only Counter CRDT.

    A G-Counter can only be incremented, never decremented. It keeps one
    count per replica identifier; the value of the counter is the sum of
    those counts. Merging takes the maximum count for each replica.

    Instances are immutable. ``increment`` and ``merge`` return new
    counters and never touch their inputs. A replica that is not stored
    has count zero, and zero counts are never stored, so ``{r: 0}`` and
    ``{}`` describe the same state.

    Example:
        >>> first = GCounter().increment(1, 1)
        >>> second = GCounter().increment(2, 2)
        >>> first.merge(second) == second.merge(first)
        True
        >>> first.merge(second).value()
        3
    """

    def __init__(self, counts: Optional[Mapping[Hashable, Any]] = None,
                 numeric: Optional[Numeric] = None):
        """
        Initialize the G-Counter.

        Args:
            counts: Optional initial counts (replica id -> count). Each count
                must be a non-negative value of ``numeric``'s type.
            numeric: Numeric capability for the counts (default: unbounded
                Python integers)

        Raises:
            InvalidArgumentError: If a count is negative or of the wrong type
        """
        self._numeric = numeric if numeric is not None else INTEGER
        stored: Dict[Hashable, Any] = {}
        for replica_id, count in (counts or {}).items():
            count = self._numeric.coerce(count)
            if not self._numeric.is_non_negative(count):
                raise InvalidArgumentError(
                    f"Count for replica {replica_id!r} is negative: {count!r}"
                )
            if not self._numeric.equiv(count, self._numeric.zero()):
                stored[replica_id] = count
        self._counts = MappingProxyType(stored)

    @classmethod
    def empty(cls, numeric: Optional[Numeric] = None) -> 'GCounter':
        """The empty counter: identity element of ``merge``."""
        return cls(numeric=numeric)

    @classmethod
    def _from_trusted(cls, counts: Dict[Hashable, Any], numeric: Numeric) -> 'GCounter':
        # counts is already validated and owned by the new instance
        counter = cls.__new__(cls)
        counter._numeric = numeric
        counter._counts = MappingProxyType(counts)
        return counter

    @property
    def counts(self) -> Mapping[Hashable, Any]:
        """Read-only view of the stored (non-zero) counts."""
        return self._counts

    @property
    def numeric(self) -> Numeric:
        return self._numeric

    def replicas(self) -> FrozenSet[Hashable]:
        return frozenset(self._counts)

    def increment(self, replica_id: Hashable, delta: Any) -> 'GCounter':
        """
        Increment the count of ``replica_id`` by ``delta``.

        Args:
            replica_id: Replica whose count grows
            delta: Non-negative amount to add

        Returns:
            A new GCounter, or this counter unchanged when ``delta`` is zero

        Raises:
            InvalidArgumentError: If ``delta`` is negative
        """
        delta = self._numeric.coerce(delta)
        if not self._numeric.is_non_negative(delta):
            logger.debug("Rejected increment of %r by %r", replica_id, delta)
            raise InvalidArgumentError(
                f"G-Counter can only be incremented with non-negative values, got {delta!r}"
            )
        if self._numeric.equiv(delta, self._numeric.zero()):
            return self

        counts = dict(self._counts)
        counts.pop(replica_id, None)
        self._store(counts, replica_id, self._numeric.add(self.get(replica_id), delta))
        return self._from_trusted(counts, self._numeric)

    def _store(self, counts: Dict[Hashable, Any], replica_id: Hashable, count: Any) -> None:
        # a wrapping numeric can bring a sum back to zero; zero is never stored
        if not self._numeric.equiv(count, self._numeric.zero()):
            counts[replica_id] = count

    def __add__(self, pair: Tuple[Hashable, Any]) -> 'GCounter':
        replica_id, delta = pair
        return self.increment(replica_id, delta)

    def get(self, replica_id: Hashable) -> Any:
        """Count stored for ``replica_id``, or zero if absent."""
        return self._counts.get(replica_id, self._numeric.zero())

    def value(self) -> Any:
        """
        Get the current total value of the counter.

        Returns:
            Sum of all replica counts
        """
        return self._numeric.sum(self._counts.values())

    def _check_compatible(self, other: 'GCounter') -> None:
        if not isinstance(other, GCounter):
            raise InvalidArgumentError(f"Cannot combine GCounter with {type(other).__name__}")
        if other._numeric != self._numeric:
            raise InvalidArgumentError(
                f"Cannot combine counters over {self._numeric!r} and {other._numeric!r}"
            )

    def merge(self, other: 'GCounter') -> 'GCounter':
        """
        Merge this G-Counter with another G-Counter.

        Takes the maximum count for each replica in the union of both key
        sets. A replica missing from one side contributes zero there.

        Args:
            other: Another GCounter over the same numeric

        Returns:
            A new GCounter with merged counts

        Raises:
            InvalidArgumentError: If the counters use different numerics
        """
        self._check_compatible(other)
        num = self._numeric

        merged: Dict[Hashable, Any] = {}
        for replica_id in self._counts.keys() | other._counts.keys():
            self._store(merged, replica_id, num.max(self.get(replica_id), other.get(replica_id)))

        logger.debug("Merged %d and %d replicas into %d",
                     len(self._counts), len(other._counts), len(merged))
        return self._from_trusted(merged, num)

    def compare(self, other: 'GCounter') -> PartialOrdering:
        """
        Compare with ``other`` replica by replica.

        This counter is less than or equal to ``other`` when every replica's
        count here is at most its count in ``other``. Counters where each
        side leads on a different replica are not comparable.

        Args:
            other: Another GCounter over the same numeric

        Returns:
            PartialOrdering.LESS_OR_EQUAL or PartialOrdering.NOT_COMPARABLE
        """
        self._check_compatible(other)
        for replica_id in self._counts.keys() | other._counts.keys():
            if not self._numeric.lteq(self.get(replica_id), other.get(replica_id)):
                return PartialOrdering.NOT_COMPARABLE
        return PartialOrdering.LESS_OR_EQUAL

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the G-Counter to a dictionary.

        Zero counts are never stored, so they never appear here either.

        Returns:
            Dictionary representation of the G-Counter
        """
        return {
            'type': 'GCounter',
            'counts': {
                replica_id: self._numeric.to_builtin(count)
                for replica_id, count in self._counts.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], numeric: Optional[Numeric] = None) -> 'GCounter':
        """
        Create a GCounter from a dictionary representation.

        Args:
            data: Dictionary containing serialized GCounter state
            numeric: Numeric capability for the counts (default: unbounded
                Python integers)

        Returns:
            A new GCounter instance

        Raises:
            InvalidArgumentError: If the dictionary is not a valid snapshot
        """
        try:
            snapshot = GCounterSnapshot.model_validate(data)
        except ValidationError as exc:
            raise InvalidArgumentError(f"Invalid GCounter snapshot: {exc}") from exc
        return cls(snapshot.counts, numeric=numeric)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GCounter):
            return NotImplemented
        return dict(self._counts) == dict(other._counts)

    def __hash__(self) -> int:
        return hash(frozenset(self._counts.items()))

    def __len__(self) -> int:
        return len(self._counts)

    def __repr__(self) -> str:
        return f"GCounter(value={self.value()!r}, counts={dict(self._counts)!r})"


def merge_all(counters: Iterable[GCounter], numeric: Optional[Numeric] = None) -> GCounter:
    """
    Merge any number of counters, starting from the empty counter.

    Args:
        counters: Counters to merge, all over the same numeric
        numeric: Numeric of the empty counter returned when ``counters``
            is empty (default: unbounded Python integers)

    Returns:
        The least upper bound of all counters
    """
    result = None
    for counter in counters:
        result = counter if result is None else result.merge(counter)
    return result if result is not None else GCounter.empty(numeric)
