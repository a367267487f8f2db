"""Tests for the explore, compare and details controllers."""

import asyncio

import pytest

from propscout.comparison import CompareSession
from propscout.config import Settings
from propscout.discovery import ExploreSession, PropertyDetails
from propscout.discovery.explore import EMPTY_MESSAGE, STATUS_IN_VIEW, STATUS_LOADING
from propscout.models.property import (
    BoundingBox,
    HighlightResult,
    MetricHighlight,
    Property,
    RecommendationHighlight,
)

from .conftest import FakeCatalog


def ids_ranker(props) -> HighlightResult:
    joined = "+".join(p.id for p in props)
    return HighlightResult(
        best_roi=MetricHighlight(name=joined, value="1%"),
        best_yield=MetricHighlight(name=joined, value="1%"),
        recommendation=RecommendationHighlight(name=joined),
    )


class TestExploreSession:
    """Catalog + viewport + selection wiring."""

    @pytest.mark.asyncio
    async def test_before_bounds_whole_catalog_is_listed(
        self, catalog: FakeCatalog, fast_settings, sample_properties
    ):
        session = ExploreSession(catalog, settings=fast_settings)
        await session.load()

        assert catalog.fetch_calls == [None]
        assert session.visible == sample_properties
        assert session.status_message == STATUS_LOADING
        assert session.empty_message is None

    @pytest.mark.asyncio
    async def test_bounds_filter_the_list(
        self, catalog: FakeCatalog, fast_settings, south_box: BoundingBox
    ):
        session = ExploreSession(catalog, settings=fast_settings)
        await session.load()
        session.on_bounds_change(south_box)
        await session.viewport.wait()

        assert [p.id for p in session.visible] == ["p1", "p2"]
        assert session.visible_count == 2
        assert session.status_message == STATUS_IN_VIEW
        assert all(p.has_coordinates for p in session.visible)

    def test_initial_view_from_settings(self, catalog: FakeCatalog):
        settings = Settings(initial_center_lat=18.52, initial_center_lng=73.85, initial_zoom=11)
        session = ExploreSession(catalog, settings=settings)
        assert session.initial_view == (18.52, 73.85, 11)

    @pytest.mark.asyncio
    async def test_markers_skip_unmapped(self, catalog: FakeCatalog, fast_settings):
        session = ExploreSession(catalog, settings=fast_settings)
        await session.load()
        assert [p.id for p in session.markers] == ["p1", "p2", "p3"]

    @pytest.mark.asyncio
    async def test_fetch_failure_degrades_to_empty(self, sample_properties, fast_settings):
        catalog = FakeCatalog(sample_properties, fail_fetch=True)
        session = ExploreSession(catalog, settings=fast_settings)

        assert await session.load() == []
        assert session.visible == []
        assert session.empty_message == EMPTY_MESSAGE

    @pytest.mark.asyncio
    async def test_search_change_refetches(
        self, catalog: FakeCatalog, fast_settings, south_box: BoundingBox
    ):
        session = ExploreSession(catalog, settings=fast_settings)
        await session.load()
        session.on_bounds_change(south_box)
        await session.viewport.wait()

        await session.set_search("thane")
        assert catalog.fetch_calls == [None, "thane"]
        # Thane is outside the known viewport
        assert session.visible == []

        await session.set_search(" thane ")
        assert catalog.fetch_calls == [None, "thane"]

        await session.set_search("")
        assert catalog.fetch_calls == [None, "thane", None]
        assert session.visible_count == 2

    @pytest.mark.asyncio
    async def test_marker_and_list_clicks_share_selection(
        self, catalog: FakeCatalog, fast_settings, view, bandra: Property, powai: Property
    ):
        session = ExploreSession(catalog, map_view=view, list_view=view, settings=fast_settings)
        await session.load()

        session.select_from_marker(bandra)
        assert session.is_highlighted("p1")
        assert view.scrolls == [("p1", "center", True)]

        session.select_from_list(powai)
        assert session.is_highlighted("p2")
        assert not session.is_highlighted("p1")
        assert view.recenters[-1] == (19.12, 72.91, fast_settings.focus_zoom, True)

        await asyncio.sleep(0.05)
        assert view.scrolls[-1] == ("p2", "center", True)
        session.close()


class TestCompareSession:
    """Comparison set mutations drive highlight refreshes."""

    @pytest.mark.asyncio
    async def test_seed_and_start(self, catalog: FakeCatalog, fast_settings, sample_properties):
        session = CompareSession(catalog, initial=sample_properties, settings=fast_settings)
        assert [p.id for p in session.properties] == ["p1", "p2", "p3"]
        assert session.capacity_label == "(3/3 added)"

        highlights = await session.start()
        assert highlights.best_roi.name == "Powai Lakeview"
        assert session.highlights == highlights

    @pytest.mark.asyncio
    async def test_empty_start_has_no_highlights(self, catalog: FakeCatalog, fast_settings):
        session = CompareSession(catalog, settings=fast_settings)
        assert await session.start() is None
        assert catalog.rank_calls == []

    @pytest.mark.asyncio
    async def test_add_closes_and_resets_search(
        self, catalog: FakeCatalog, fast_settings, bandra: Property
    ):
        session = CompareSession(catalog, settings=fast_settings)
        assert session.open_search()
        session.on_search_input("sea")
        await session.search.wait()
        assert [p.id for p in session.search.results] == ["p1"]

        assert session.add_property(bandra)
        assert not session.show_search_modal
        assert session.search.query == ""
        assert session.search.results == []

        await session.settle()
        assert session.highlights.best_roi.name == "Sea Breeze Residency"

    @pytest.mark.asyncio
    async def test_add_during_search_keeps_results_cleared(
        self, catalog: FakeCatalog, fast_settings, bandra: Property
    ):
        catalog.fetch_delays = [0.1]
        session = CompareSession(catalog, settings=fast_settings)
        session.open_search()
        session.on_search_input("powai")
        await asyncio.sleep(0.05)

        assert session.add_property(bandra)
        await session.search.wait()
        await session.settle()

        assert session.search.query == ""
        assert session.search.results == []
        assert not session.show_search_modal

    def test_mutation_outside_loop_leaves_set_untouched(
        self, catalog: FakeCatalog, fast_settings, bandra: Property, powai: Property
    ):
        session = CompareSession(catalog, initial=[bandra], settings=fast_settings)

        with pytest.raises(RuntimeError):
            session.add_property(powai)
        with pytest.raises(RuntimeError):
            session.remove_last()
        with pytest.raises(RuntimeError):
            session.remove_by_id("p1")

        assert [p.id for p in session.properties] == ["p1"]

    @pytest.mark.asyncio
    async def test_rejected_add_keeps_modal_open(
        self, catalog: FakeCatalog, fast_settings, bandra: Property
    ):
        session = CompareSession(catalog, initial=[bandra], settings=fast_settings)
        session.open_search()
        assert not session.add_property(bandra)
        assert session.show_search_modal

    @pytest.mark.asyncio
    async def test_cannot_open_search_when_full(
        self, catalog: FakeCatalog, fast_settings, sample_properties
    ):
        session = CompareSession(catalog, initial=sample_properties, settings=fast_settings)
        assert not session.can_add
        assert not session.open_search()
        assert not session.show_search_modal

    @pytest.mark.asyncio
    async def test_emptying_discards_highlights(
        self, catalog: FakeCatalog, fast_settings, bandra: Property, powai: Property
    ):
        session = CompareSession(catalog, initial=[bandra, powai], settings=fast_settings)
        await session.start()
        assert session.highlights is not None

        assert session.remove_by_id("p1")
        assert session.remove_last()
        assert not session.remove_last()
        await session.settle()

        assert session.highlights is None
        assert not session.can_remove

    @pytest.mark.asyncio
    async def test_stale_ranking_response_is_dropped(
        self, sample_properties, fast_settings, bandra: Property, powai: Property
    ):
        catalog = FakeCatalog(sample_properties, ranker=ids_ranker)
        catalog.rank_delays = [0.1, 0.0]
        session = CompareSession(catalog, settings=fast_settings)

        session.add_property(bandra)  # slow response
        session.add_property(powai)   # fast response
        await session.settle()

        assert catalog.rank_calls == [["p1"], ["p1", "p2"]]
        assert session.highlights.recommendation.name == "p1+p2"

    @pytest.mark.asyncio
    async def test_ranking_failure_does_not_block_mutation(
        self, catalog: FakeCatalog, fast_settings, bandra: Property, thane: Property
    ):
        session = CompareSession(catalog, settings=fast_settings)  # ranker missing
        assert session.add_property(bandra)
        assert session.add_property(thane)
        await session.settle()

        assert session.highlights.best_roi.name == "Thane Greens"
        assert session.remove_last()
        await session.settle()
        assert session.highlights.best_roi.name == "Sea Breeze Residency"


class TestPropertyDetails:
    """Detail page load and inquiry submission."""

    @pytest.mark.asyncio
    async def test_load(self, catalog: FakeCatalog):
        details = PropertyDetails(catalog, "p2")
        prop = await details.load()
        assert prop.name == "Powai Lakeview"
        assert details.error is None

    @pytest.mark.asyncio
    async def test_unknown_property(self, catalog: FakeCatalog):
        details = PropertyDetails(catalog, "missing")
        assert await details.load() is None
        assert details.error is not None

    @pytest.mark.asyncio
    async def test_inquiry_recorded(self, catalog: FakeCatalog):
        details = PropertyDetails(catalog, "p1")
        assert await details.submit_inquiry("Asha", "asha@example.com", "Is it available?")
        assert catalog.inquiries[0].property_id == "p1"
        assert details.inquiry_error is None

    @pytest.mark.asyncio
    async def test_invalid_inquiry(self, catalog: FakeCatalog):
        details = PropertyDetails(catalog, "p1")
        assert not await details.submit_inquiry("Asha", "not-an-email", "Hi")
        assert details.inquiry_error is not None
        assert catalog.inquiries == []

    @pytest.mark.asyncio
    async def test_inquiry_for_unknown_property(self, catalog: FakeCatalog):
        details = PropertyDetails(catalog, "missing")
        assert not await details.submit_inquiry("Asha", "asha@example.com", "Hi")
        assert details.inquiry_error is not None
