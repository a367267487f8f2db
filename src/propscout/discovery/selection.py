"""Selection shared between the explore map and the property list.

Clicking a marker or a list card selects the same property in both views:
the map recenters on it and the list scrolls its card into view.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from ..config import config
from ..models.property import Property

logger = logging.getLogger(__name__)


class MapView(Protocol):
    """Map side of the explore page."""

    def recenter(self, lat: float, lng: float, zoom: int, animate: bool = True) -> None:
        ...


class ListView(Protocol):
    """List side of the explore page."""

    def scroll_into_view(
        self, property_id: str, block: str = "center", smooth: bool = True
    ) -> None:
        ...


class NullView:
    """Map and list view that ignores every command (headless use)."""

    def recenter(self, lat: float, lng: float, zoom: int, animate: bool = True) -> None:
        pass

    def scroll_into_view(
        self, property_id: str, block: str = "center", smooth: bool = True
    ) -> None:
        pass


@dataclass(frozen=True)
class SelectionState:
    """Selected property and highlighted id, always replaced together."""

    selected_property: Optional[Property] = None
    highlighted_id: Optional[str] = None


class SelectionSynchronizer:
    """Sole writer of the shared selection; both views only read ``state``.

    Marker clicks scroll the list immediately. List clicks wait
    ``list_scroll_delay`` seconds first so the map transition starts before
    the list moves.
    """

    def __init__(
        self,
        map_view: MapView,
        list_view: ListView,
        zoom: Optional[int] = None,
        list_scroll_delay: Optional[float] = None,
    ):
        self.map_view = map_view
        self.list_view = list_view
        self.zoom = config.focus_zoom if zoom is None else zoom
        self.list_scroll_delay = (
            config.list_scroll_delay_seconds if list_scroll_delay is None else list_scroll_delay
        )
        self._state = SelectionState()
        self._scroll_handles: set[asyncio.TimerHandle] = set()

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def selected_property(self) -> Optional[Property]:
        return self._state.selected_property

    @property
    def highlighted_id(self) -> Optional[str]:
        return self._state.highlighted_id

    def is_highlighted(self, property_id: str) -> bool:
        return self._state.highlighted_id == property_id

    def select_from_marker(self, prop: Property) -> None:
        """Marker click: select, recenter, scroll the list right away."""
        self._select(prop)
        self._scroll(prop.id)

    def select_from_list(self, prop: Property) -> None:
        """List-card click: select, recenter, scroll the list after a delay."""
        self._select(prop)
        if self.list_scroll_delay <= 0:
            self._scroll(prop.id)
            return

        loop = asyncio.get_running_loop()
        handle: Optional[asyncio.TimerHandle] = None

        def _delayed_scroll() -> None:
            self._scroll_handles.discard(handle)
            self._scroll(prop.id)

        handle = loop.call_later(self.list_scroll_delay, _delayed_scroll)
        self._scroll_handles.add(handle)

    def clear(self) -> None:
        """Drop the selection."""
        self._state = SelectionState()

    def close(self) -> None:
        """Cancel scrolls that have not happened yet."""
        for handle in self._scroll_handles:
            handle.cancel()
        self._scroll_handles.clear()

    def _select(self, prop: Property) -> None:
        if self._state.highlighted_id != prop.id or self._state.selected_property != prop:
            self._state = SelectionState(selected_property=prop, highlighted_id=prop.id)
            logger.debug(f"Selected property {prop.id}")

        if prop.coordinates is not None:
            self.map_view.recenter(
                prop.coordinates.lat, prop.coordinates.lng, self.zoom, animate=True
            )

    def _scroll(self, property_id: str) -> None:
        self.list_view.scroll_into_view(property_id, block="center", smooth=True)
