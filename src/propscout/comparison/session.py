"""Compare page controller: comparison set, search box and highlights."""

import asyncio
import logging
from typing import Iterable, Optional

from ..catalog.base import PropertyCatalog
from ..config import Settings, config
from ..models.property import HighlightResult, Property
from .comparison_set import ComparisonSet
from .highlights import HighlightEngine
from .search import SearchService

logger = logging.getLogger(__name__)


class CompareSession:
    """State behind the compare page.

    The comparison set can be seeded from navigation state (properties
    picked on another page). Every change to the set schedules a highlight
    refresh in the background, so mutations never wait on the ranking
    service. Refreshes carry a generation number and only the newest one
    may publish its result; an older response that resolves late is
    dropped.

    Example:
        session = CompareSession(catalog, initial=picked)
        await session.start()
        session.add_property(other)
        await session.settle()
        print(session.highlights)
    """

    def __init__(
        self,
        catalog: PropertyCatalog,
        initial: Iterable[Property] = (),
        settings: Optional[Settings] = None,
    ):
        settings = settings or config
        self.comparison = ComparisonSet(initial, capacity=settings.comparison_capacity)
        self.search = SearchService(
            catalog,
            delay=settings.search_debounce_seconds,
            limit=settings.search_result_limit,
        )
        self.engine = HighlightEngine(catalog)
        self.highlights: Optional[HighlightResult] = None
        self.show_search_modal = False
        self._generation = 0
        self._tasks: set[asyncio.Task] = set()

    # =========================================================================
    # Comparison set
    # =========================================================================

    @property
    def properties(self) -> list[Property]:
        return self.comparison.items

    @property
    def can_add(self) -> bool:
        return not self.comparison.is_full

    @property
    def can_remove(self) -> bool:
        return not self.comparison.is_empty

    @property
    def capacity_label(self) -> str:
        return f"({len(self.comparison)}/{self.comparison.capacity} added)"

    def add_property(self, prop: Property) -> bool:
        """Add a search result; on success the search modal closes and resets.

        Set mutators must be called from inside the running event loop.
        """
        loop = asyncio.get_running_loop()
        if not self.comparison.add(prop):
            return False
        self.show_search_modal = False
        self.search.clear()
        self._schedule_refresh(loop)
        return True

    def remove_last(self) -> bool:
        loop = asyncio.get_running_loop()
        if not self.comparison.remove_last():
            return False
        self._schedule_refresh(loop)
        return True

    def remove_by_id(self, property_id: str) -> bool:
        loop = asyncio.get_running_loop()
        if not self.comparison.remove_by_id(property_id):
            return False
        self._schedule_refresh(loop)
        return True

    # =========================================================================
    # Search modal
    # =========================================================================

    def open_search(self) -> bool:
        """Open the search modal while there is room for another property."""
        if self.comparison.is_full:
            return False
        self.show_search_modal = True
        return True

    def close_search(self) -> None:
        self.show_search_modal = False
        self.search.clear()

    def on_search_input(self, query: str) -> None:
        self.search.on_query_change(query)

    # =========================================================================
    # Highlights
    # =========================================================================

    async def start(self) -> Optional[HighlightResult]:
        """Compute highlights for the seeded set (page mount)."""
        return await self.refresh_highlights()

    def _next_generation(self) -> tuple[int, list[Property]]:
        self._generation += 1
        snapshot = self.comparison.items
        if not snapshot:
            self.highlights = None
        return self._generation, snapshot

    def _schedule_refresh(self, loop: asyncio.AbstractEventLoop) -> None:
        generation, snapshot = self._next_generation()
        if not snapshot:
            return
        task = loop.create_task(self._publish(generation, snapshot))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def refresh_highlights(self) -> Optional[HighlightResult]:
        """Recompute highlights for the current set."""
        generation, snapshot = self._next_generation()
        if not snapshot:
            return None
        return await self._publish(generation, snapshot)

    async def _publish(
        self, generation: int, snapshot: list[Property]
    ) -> Optional[HighlightResult]:
        result = await self.engine.compute(snapshot)
        if generation != self._generation:
            logger.debug(f"Dropping stale highlights (generation {generation})")
            return self.highlights

        self.highlights = result
        return result

    async def settle(self) -> None:
        """Wait for every scheduled highlight refresh to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        self.search.close()
        await self.settle()
