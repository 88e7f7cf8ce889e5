"""
Abstract base class for state-based Conflict-free Replicated Data Types.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional, TypeVar

T = TypeVar('T', bound='CRDT')


class PartialOrdering(Enum):
    """Result of comparing two CRDT states under their partial order."""

    LESS_OR_EQUAL = 'less_or_equal'
    NOT_COMPARABLE = 'not_comparable'


class CRDT(ABC):
    """
    Abstract base class for state-based CRDTs.

    The states of a CRDT form a join-semilattice: ``merge`` is the join
    and ``compare`` is the matching partial order. Replicas may exchange
    and merge states in any order, any number of times, and still agree.
    States are values; every operation returns a new instance.
    """

    @abstractmethod
    def merge(self: T, other: T) -> T:
        """
        Merge this state with another state of the same type.

        The merge operation must be:
        - Commutative: merge(a, b) == merge(b, a)
        - Associative: merge(merge(a, b), c) == merge(a, merge(b, c))
        - Idempotent: merge(a, a) == a

        Args:
            other: Another state of the same type

        Returns:
            The least upper bound of both states
        """

    @abstractmethod
    def compare(self: T, other: T) -> PartialOrdering:
        """
        Compare this state with another under the semilattice order.

        Args:
            other: Another state of the same type

        Returns:
            ``LESS_OR_EQUAL`` if this state is dominated by ``other``,
            ``NOT_COMPARABLE`` otherwise
        """

    @abstractmethod
    def value(self) -> Any:
        """Externally visible value of this state."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the state to a dictionary for storage or transmission.

        Returns:
            Dictionary representation of the state
        """

    @classmethod
    @abstractmethod
    def from_dict(cls: type[T], data: Dict[str, Any]) -> T:
        """
        Create a state from a dictionary representation.

        Args:
            data: Dictionary produced by ``to_dict``

        Returns:
            A new instance reconstructed from the dictionary
        """

    def __le__(self: T, other: T) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self.compare(other) is PartialOrdering.LESS_OR_EQUAL

    def __ge__(self: T, other: T) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return other.compare(self) is PartialOrdering.LESS_OR_EQUAL

    def try_compare(self: T, other: T) -> Optional[int]:
        """
        Three-way comparison that admits incomparable states.

        Returns:
            -1 if strictly less, 0 if equal, 1 if strictly greater,
            None if the states are not comparable
        """
        below = self.compare(other) is PartialOrdering.LESS_OR_EQUAL
        above = other.compare(self) is PartialOrdering.LESS_OR_EQUAL
        if below and above:
            return 0
        if below:
            return -1
        if above:
            return 1
        return None
