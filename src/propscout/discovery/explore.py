"""Explore page controller: catalog, viewport filter and selection wired together."""

import logging
from typing import Optional

from ..catalog.base import CatalogError, PropertyCatalog
from ..config import Settings, config
from ..models.property import BoundingBox, Property
from .selection import ListView, MapView, NullView, SelectionSynchronizer
from .viewport import SpatialFilter, ViewportTracker

logger = logging.getLogger(__name__)

STATUS_LOADING = "Loading..."
STATUS_IN_VIEW = "Showing properties in current view"
EMPTY_MESSAGE = (
    "No properties found in this area. "
    "Try zooming out or panning to see more properties."
)


class ExploreSession:
    """State behind the map + list explore page.

    The catalog is fetched on ``load()`` (mount) and again whenever the
    search query changes. Map bounds flow through a debounced
    ViewportTracker into a SpatialFilter; clicks on either view go through
    the SelectionSynchronizer.

    Example:
        session = ExploreSession(catalog, map_view, list_view)
        await session.load()
        session.on_bounds_change(BoundingBox.from_corners(19.0, 72.8, 19.2, 73.0))
        await session.viewport.wait()
        print(session.visible_count, session.status_message)
    """

    def __init__(
        self,
        catalog: PropertyCatalog,
        map_view: Optional[MapView] = None,
        list_view: Optional[ListView] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or config
        self.catalog = catalog
        self.initial_view = (
            settings.initial_center_lat,
            settings.initial_center_lng,
            settings.initial_zoom,
        )
        self.search = ""
        self.loaded = False
        self.spatial_filter = SpatialFilter()
        self.viewport = ViewportTracker(
            on_settled=self.spatial_filter.set_bounds,
            delay=settings.viewport_debounce_seconds,
        )
        self.selection = SelectionSynchronizer(
            map_view or NullView(),
            list_view or NullView(),
            zoom=settings.focus_zoom,
            list_scroll_delay=settings.list_scroll_delay_seconds,
        )

    # =========================================================================
    # Catalog
    # =========================================================================

    async def load(self, search: Optional[str] = None) -> list[Property]:
        """Fetch the catalog (optionally filtered) and refresh the visible list.

        A failed fetch leaves an empty catalog; the error is only logged.
        """
        self.search = (search or "").strip()
        try:
            properties = await self.catalog.fetch_properties(self.search or None)
        except CatalogError as e:
            logger.error(f"Error fetching properties: {e}")
            properties = []
        except Exception as e:
            logger.error(f"Unexpected error fetching properties: {e}")
            properties = []

        self.loaded = True
        self.spatial_filter.set_catalog(properties)
        logger.info(f"Loaded {len(properties)} properties (search={self.search!r})")
        return properties

    async def set_search(self, query: Optional[str]) -> list[Property]:
        """Refetch when the search query actually changed."""
        query = (query or "").strip()
        if self.loaded and query == self.search:
            return self.catalog_properties
        return await self.load(query)

    @property
    def catalog_properties(self) -> list[Property]:
        return self.spatial_filter.catalog

    @property
    def markers(self) -> list[Property]:
        """Every catalog property that can be pinned on the map."""
        return [p for p in self.spatial_filter.catalog if p.has_coordinates]

    # =========================================================================
    # Viewport
    # =========================================================================

    def on_bounds_change(self, bounds: BoundingBox) -> None:
        """Map moveend/zoomend handler."""
        self.viewport.on_bounds_change(bounds)

    @property
    def bounds_known(self) -> bool:
        return self.viewport.bounds_known

    @property
    def visible(self) -> list[Property]:
        return self.spatial_filter.visible

    @property
    def visible_count(self) -> int:
        return len(self.spatial_filter.visible)

    @property
    def status_message(self) -> str:
        return STATUS_IN_VIEW if self.bounds_known else STATUS_LOADING

    @property
    def empty_message(self) -> Optional[str]:
        """Hint shown in place of the list when nothing is visible."""
        return EMPTY_MESSAGE if self.visible_count == 0 else None

    # =========================================================================
    # Selection
    # =========================================================================

    def select_from_marker(self, prop: Property) -> None:
        self.selection.select_from_marker(prop)

    def select_from_list(self, prop: Property) -> None:
        self.selection.select_from_list(prop)

    def is_highlighted(self, property_id: str) -> bool:
        return self.selection.is_highlighted(property_id)

    def close(self) -> None:
        """Cancel pending viewport recomputes and delayed scrolls."""
        self.viewport.close()
        self.selection.close()
