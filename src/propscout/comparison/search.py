"""Debounced catalog search used to pick properties for comparison."""

import logging
from typing import Optional

from ..catalog.base import CatalogError, PropertyCatalog
from ..config import config
from ..discovery.debounce import Debouncer
from ..models.property import Property

logger = logging.getLogger(__name__)


class SearchService:
    """Type-ahead search against the catalog.

    Keystrokes go through ``on_query_change``; the lookup runs once the
    input has been quiet for the debounce window, with the latest query
    only. Blank queries clear the results without a request, and failures
    degrade to an empty result.
    """

    def __init__(
        self,
        catalog: PropertyCatalog,
        delay: Optional[float] = None,
        limit: Optional[int] = None,
    ):
        """Initialize the service.

        Args:
            catalog: Catalog providing free-text search
            delay: Debounce window in seconds (default ``config.search_debounce_seconds``)
            limit: Maximum results kept (default ``config.search_result_limit``)
        """
        self.catalog = catalog
        self.limit = config.search_result_limit if limit is None else limit
        self.query = ""
        self.results: list[Property] = []
        self.is_searching = False
        self._generation = 0
        self._debouncer = Debouncer(
            config.search_debounce_seconds if delay is None else delay,
            name="search",
        )

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def on_query_change(self, query: str) -> None:
        """Keystroke handler: remember the text and (re)arm the lookup."""
        self.query = query
        self._generation += 1
        self._debouncer.schedule(self.search, query)

    async def search(self, query: str) -> list[Property]:
        """Run one lookup now and store its results.

        Results are only stored if the box has not changed or been cleared
        while the lookup was in flight.
        """
        generation = self._generation
        if not query or not query.strip():
            self.results = []
            self.is_searching = False
            return self.results

        self.is_searching = True
        try:
            found = await self.catalog.fetch_properties(query.strip())
            results = list(found)[: self.limit]
        except CatalogError as e:
            logger.error(f"Error searching properties: {e}")
            results = []
        except Exception as e:
            logger.error(f"Unexpected error searching properties: {e}")
            results = []

        if generation != self._generation:
            logger.debug(f"Dropping stale search results for {query!r}")
            return self.results

        self.results = results
        self.is_searching = False
        return self.results

    def clear(self) -> None:
        """Reset the box: drop any pending lookup, the query and the results."""
        self._debouncer.cancel()
        self._generation += 1
        self.query = ""
        self.results = []
        self.is_searching = False

    async def wait(self) -> None:
        """Wait for the pending lookup (if any) to run and finish."""
        await self._debouncer.wait()

    def close(self) -> None:
        self._debouncer.close()
