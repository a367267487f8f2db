"""Bounded working set of properties chosen for side-by-side comparison."""

import logging
from typing import Iterable, Iterator, Optional

from ..config import config
from ..models.property import Property

logger = logging.getLogger(__name__)


class ComparisonSet:
    """Ordered, duplicate-free collection of at most ``capacity`` properties.

    Capacity and uniqueness are enforced in ``add`` only; rejected adds are
    silently ignored. Every mutator returns whether the set changed.

    Example:
        chosen = ComparisonSet()
        chosen.add(villa)
        chosen.add(villa)        # False, already there
        chosen.remove_last()
    """

    def __init__(
        self,
        initial: Iterable[Property] = (),
        capacity: Optional[int] = None,
    ):
        """Initialize the set.

        Args:
            initial: Seed properties (e.g. from navigation state). Seeding goes
                     through ``add``, so extras and duplicates are dropped.
            capacity: Maximum size (default ``config.comparison_capacity``)
        """
        self.capacity = config.comparison_capacity if capacity is None else capacity
        self._items: list[Property] = []
        for prop in initial:
            self.add(prop)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Property]:
        return iter(list(self._items))

    def __contains__(self, property_id: object) -> bool:
        return any(p.id == property_id for p in self._items)

    @property
    def items(self) -> list[Property]:
        return list(self._items)

    @property
    def ids(self) -> list[str]:
        return [p.id for p in self._items]

    @property
    def is_full(self) -> bool:
        return len(self._items) >= self.capacity

    @property
    def is_empty(self) -> bool:
        return not self._items

    def add(self, prop: Property) -> bool:
        """Append unless full or already present."""
        if self.is_full:
            logger.debug(f"Comparison full ({self.capacity}); ignoring {prop.id}")
            return False
        if prop.id in self:
            logger.debug(f"{prop.id} already in comparison")
            return False
        self._items.append(prop)
        return True

    def remove_last(self) -> bool:
        """Drop the most recently added property."""
        if not self._items:
            return False
        self._items.pop()
        return True

    def remove_by_id(self, property_id: str) -> bool:
        """Drop the property with this id, if present."""
        for i, prop in enumerate(self._items):
            if prop.id == property_id:
                del self._items[i]
                return True
        return False
