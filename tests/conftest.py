"""Pytest fixtures and test utilities."""

import asyncio
from typing import Optional, Sequence

import pytest

from propscout.catalog import CatalogError, InMemoryCatalog
from propscout.config import Settings
from propscout.models.property import BoundingBox, HighlightResult, Property


class FakeCatalog(InMemoryCatalog):
    """In-memory catalog that records calls and can be told to misbehave."""

    name = "fake"

    def __init__(self, properties=(), ranker=None, fail_fetch: bool = False):
        super().__init__(properties, ranker=ranker)
        self.fail_fetch = fail_fetch
        self.fetch_calls: list[Optional[str]] = []
        self.rank_calls: list[list[str]] = []
        self.rank_delays: list[float] = []
        self.fetch_delays: list[float] = []

    async def fetch_properties(self, search: Optional[str] = None) -> list[Property]:
        self.fetch_calls.append(search)
        if self.fetch_delays:
            await asyncio.sleep(self.fetch_delays.pop(0))
        if self.fail_fetch:
            raise CatalogError(self.name, "catalog unavailable")
        return await super().fetch_properties(search)

    async def rank_properties(self, property_ids: Sequence[str]) -> HighlightResult:
        self.rank_calls.append(list(property_ids))
        if self.rank_delays:
            await asyncio.sleep(self.rank_delays.pop(0))
        return await super().rank_properties(property_ids)


class RecordingView:
    """Map + list view that records every command it receives."""

    def __init__(self):
        self.recenters: list[tuple[float, float, int, bool]] = []
        self.scrolls: list[tuple[str, str, bool]] = []

    def recenter(self, lat: float, lng: float, zoom: int, animate: bool = True) -> None:
        self.recenters.append((lat, lng, zoom, animate))

    def scroll_into_view(
        self, property_id: str, block: str = "center", smooth: bool = True
    ) -> None:
        self.scrolls.append((property_id, block, smooth))


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with short timers so session tests run quickly."""
    return Settings(
        viewport_debounce_seconds=0.02,
        search_debounce_seconds=0.02,
        list_scroll_delay_seconds=0.02,
    )


@pytest.fixture
def bandra() -> Property:
    """Mapped property using the projectName/_id/roi spelling."""
    return Property.model_validate({
        "_id": "p1",
        "projectName": "Sea Breeze Residency",
        "coordinates": {"lat": 19.05, "lng": 72.83},
        "price": 15000000,
        "bedrooms": 2,
        "bathrooms": 2,
        "carpetArea": 850,
        "roi": 8,
        "rentalYield": 3.5,
        "investmentScore": 70,
        "areaName": "Bandra West",
        "city": "Mumbai",
    })


@pytest.fixture
def powai() -> Property:
    """Mapped property using the title/id/projectedReturn spelling."""
    return Property.model_validate({
        "id": "p2",
        "title": "Powai Lakeview",
        "coordinates": {"lat": 19.12, "lng": 72.91},
        "price": 21000000,
        "bedrooms": 3,
        "projectedReturn": 12,
        "yield": 4.2,
        "score": 65,
        "areaName": "Powai",
        "city": "Mumbai",
    })


@pytest.fixture
def thane() -> Property:
    """Mapped property north of the default test viewport."""
    return Property.model_validate({
        "id": "p3",
        "projectName": "Thane Greens",
        "coordinates": {"lat": 19.22, "lng": 72.98},
        "price": 9000000,
        "bedrooms": 2,
        "roi": 10,
        "rentalYield": 5.1,
        "score": 80,
        "areaName": "Thane West",
        "city": "Thane",
    })


@pytest.fixture
def unmapped() -> Property:
    """Property without coordinates (never on the map)."""
    return Property.model_validate({
        "id": "p4",
        "title": "Navi Heights",
        "price": 7500000,
        "roi": 15,
        "areaName": "Kharghar",
    })


@pytest.fixture
def sample_properties(
    bandra: Property, powai: Property, thane: Property, unmapped: Property
) -> list[Property]:
    return [bandra, powai, thane, unmapped]


@pytest.fixture
def south_box() -> BoundingBox:
    """Viewport containing Bandra and Powai but not Thane."""
    return BoundingBox.from_corners(19.0, 72.8, 19.15, 72.95)


@pytest.fixture
def catalog(sample_properties: list[Property]) -> FakeCatalog:
    return FakeCatalog(sample_properties)


@pytest.fixture
def view() -> RecordingView:
    return RecordingView()
