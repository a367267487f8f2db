"""In-memory property catalog.

Serves a fixed list of properties with the same contract as the HTTP
client. Used for offline runs and as the base for test doubles.
"""

import logging
from typing import Any, Callable, Iterable, Optional, Sequence

from ..models.property import HighlightResult, Inquiry, Property
from .base import CatalogError, PropertyCatalog, RankingError

logger = logging.getLogger(__name__)

Ranker = Callable[[list[Property]], HighlightResult]


class InMemoryCatalog(PropertyCatalog):
    """Catalog backed by a list held in memory.

    Search is a case-insensitive substring match over the name and
    location fields. Ranking is delegated to ``ranker``; without one the
    catalog behaves like a ranking service that is down.
    """

    name = "memory"

    def __init__(
        self,
        properties: Iterable[Property | dict[str, Any]] = (),
        ranker: Optional[Ranker] = None,
    ):
        self._properties = [
            p if isinstance(p, Property) else Property.model_validate(p)
            for p in properties
        ]
        self.ranker = ranker
        self.inquiries: list[Inquiry] = []

    @property
    def properties(self) -> list[Property]:
        return list(self._properties)

    def replace(self, properties: Iterable[Property]) -> None:
        """Swap the catalog contents (the next fetch sees the new list)."""
        self._properties = list(properties)

    @staticmethod
    def _matches(prop: Property, needle: str) -> bool:
        haystack = [prop.name, prop.area_name, prop.locality, prop.city, prop.landmark]
        return any(needle in field.lower() for field in haystack if field)

    async def fetch_properties(self, search: Optional[str] = None) -> list[Property]:
        if not search or not search.strip():
            return self.properties
        needle = search.strip().lower()
        return [p for p in self._properties if self._matches(p, needle)]

    async def fetch_property_by_id(self, property_id: str) -> Optional[Property]:
        for prop in self._properties:
            if prop.id == property_id:
                return prop
        return None

    async def rank_properties(self, property_ids: Sequence[str]) -> HighlightResult:
        if self.ranker is None:
            raise RankingError(self.name, "No ranking service configured")
        by_id = {p.id: p for p in self._properties}
        missing = [pid for pid in property_ids if pid not in by_id]
        if missing:
            raise RankingError(self.name, f"Unknown property ids: {', '.join(missing)}")
        return self.ranker([by_id[pid] for pid in property_ids])

    async def submit_inquiry(self, inquiry: Inquiry) -> None:
        if await self.fetch_property_by_id(inquiry.property_id) is None:
            raise CatalogError(self.name, "Property not found")
        self.inquiries.append(inquiry)
        logger.info(f"Recorded inquiry for property {inquiry.property_id}")
