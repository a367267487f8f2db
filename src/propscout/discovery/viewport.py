"""Viewport tracking and spatial filtering for the explore map.

The map reports a new bounding box after every pan or zoom. ViewportTracker
collapses bursts of those events into one settled box, and SpatialFilter
derives the visible list from the catalog and that box.
"""

import logging
from typing import Any, Callable, Iterable, Optional

from ..config import config
from ..models.property import BoundingBox, Property
from .debounce import Debouncer

logger = logging.getLogger(__name__)


def filter_visible(
    properties: Iterable[Property], bounds: BoundingBox
) -> list[Property]:
    """Properties with coordinates inside ``bounds``, in catalog order."""
    return [p for p in properties if bounds.contains_property(p)]


class SpatialFilter:
    """Derive the visible property list from the catalog and the viewport.

    While the viewport is unknown (the map has not reported bounds yet) the
    whole catalog is visible, unfiltered. Once bounds are known, only
    properties with coordinates inside the box are visible.

    Every change of catalog or bounds triggers one recomputation; nothing
    else is mutated.
    """

    def __init__(self, on_change: Optional[Callable[[list[Property]], Any]] = None):
        """Initialize with an empty catalog and unknown bounds.

        Args:
            on_change: Called with the new visible list after each recompute
        """
        self._catalog: list[Property] = []
        self._bounds: Optional[BoundingBox] = None
        self._visible: list[Property] = []
        self.on_change = on_change
        self.recompute_count = 0

    filter = staticmethod(filter_visible)

    @property
    def catalog(self) -> list[Property]:
        return list(self._catalog)

    @property
    def bounds(self) -> Optional[BoundingBox]:
        return self._bounds

    @property
    def visible(self) -> list[Property]:
        return list(self._visible)

    def set_catalog(self, properties: Iterable[Property]) -> list[Property]:
        """Replace the catalog and recompute."""
        self._catalog = list(properties)
        return self._recompute()

    def set_bounds(self, bounds: BoundingBox) -> list[Property]:
        """Apply a settled viewport and recompute."""
        self._bounds = bounds
        return self._recompute()

    def _recompute(self) -> list[Property]:
        if self._bounds is None:
            self._visible = list(self._catalog)
        else:
            self._visible = filter_visible(self._catalog, self._bounds)
        self.recompute_count += 1
        logger.debug(
            f"Visible: {len(self._visible)}/{len(self._catalog)} "
            f"(bounds {'known' if self._bounds else 'unknown'})"
        )
        if self.on_change is not None:
            self.on_change(self.visible)
        return self.visible


class ViewportTracker:
    """Debounce map move/zoom events into a settled bounding box.

    Example:
        spatial = SpatialFilter()
        tracker = ViewportTracker(on_settled=spatial.set_bounds)
        tracker.on_bounds_change(BoundingBox.from_corners(18.9, 72.7, 19.2, 73.0))
        await tracker.wait()
    """

    def __init__(
        self,
        on_settled: Callable[[BoundingBox], Any],
        delay: Optional[float] = None,
    ):
        """Initialize the tracker.

        Args:
            on_settled: Receives the bounds of the last event in each burst
            delay: Debounce window in seconds (default ``config.viewport_debounce_seconds``)
        """
        self.on_settled = on_settled
        self._bounds: Optional[BoundingBox] = None
        self._debouncer = Debouncer(
            config.viewport_debounce_seconds if delay is None else delay,
            name="viewport",
        )

    @property
    def bounds(self) -> Optional[BoundingBox]:
        """Last settled bounds, or None before the first one settles."""
        return self._bounds

    @property
    def bounds_known(self) -> bool:
        return self._bounds is not None

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def on_bounds_change(self, bounds: BoundingBox) -> None:
        """Record a move/zoom completion; only the last in a burst settles."""
        self._debouncer.schedule(self._settle, bounds)

    def _settle(self, bounds: BoundingBox) -> None:
        self._bounds = bounds
        self.on_settled(bounds)

    async def wait(self) -> None:
        """Wait for a pending burst to settle."""
        await self._debouncer.wait()

    def close(self) -> None:
        self._debouncer.close()
