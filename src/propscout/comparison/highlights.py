"""Investment highlights for a comparison set.

Picks the best-ROI property, the best-yield property and an overall
recommendation. The ranking service is asked first; if that call fails
for any reason the highlights are computed locally.
"""

import logging
from typing import Callable, Optional, Sequence

from pydantic import ValidationError

from ..catalog.base import CatalogError, PropertyCatalog
from ..models.property import (
    HighlightResult,
    MetricHighlight,
    Property,
    RecommendationHighlight,
)

logger = logging.getLogger(__name__)

Metric = Callable[[Property], float]


def roi_of(prop: Property) -> float:
    return prop.projected_return if prop.projected_return is not None else 0.0


def yield_of(prop: Property) -> float:
    return prop.rental_yield if prop.rental_yield is not None else 0.0


def score_of(prop: Property) -> float:
    return prop.score if prop.score is not None else 0.0


def best_by(properties: Sequence[Property], metric: Metric) -> Optional[Property]:
    """Left-to-right max; a later property only wins if strictly greater."""
    best: Optional[Property] = None
    for prop in properties:
        if best is None or metric(prop) > metric(best):
            best = prop
    return best


def format_percentage(value: Optional[float]) -> str:
    """Render a metric as ``"12%"`` / ``"8.5%"``, or ``"N/A"`` if missing."""
    if value is None:
        return "N/A"
    return f"{value:g}%"


def local_highlights(properties: Sequence[Property]) -> Optional[HighlightResult]:
    """Compute highlights without the ranking service.

    Returns:
        HighlightResult, or None for an empty set
    """
    snapshot = list(properties)
    best_roi = best_by(snapshot, roi_of)
    if best_roi is None:
        return None
    best_yield = best_by(snapshot, yield_of) or best_roi
    recommended = best_by(snapshot, score_of) or best_roi

    return HighlightResult(
        best_roi=MetricHighlight(
            name=best_roi.name, value=format_percentage(best_roi.projected_return)
        ),
        best_yield=MetricHighlight(
            name=best_yield.name, value=format_percentage(best_yield.rental_yield)
        ),
        recommendation=RecommendationHighlight(name=recommended.name),
    )


class HighlightEngine:
    """Rank a comparison set, remote first with a local fallback.

    Example:
        engine = HighlightEngine(catalog)
        highlights = await engine.compute(comparison.items)
        if highlights:
            print(highlights.best_roi.name, highlights.best_roi.value)
    """

    def __init__(self, catalog: PropertyCatalog):
        self.catalog = catalog

    async def compute(self, properties: Sequence[Property]) -> Optional[HighlightResult]:
        """Highlights for ``properties``; None (no call made) when empty."""
        snapshot = list(properties)
        if not snapshot:
            return None

        ids = [p.id for p in snapshot]
        try:
            result = await self.catalog.rank_properties(ids)
            if not isinstance(result, HighlightResult):
                result = HighlightResult.model_validate(result)
            return result
        except (CatalogError, ValidationError) as e:
            logger.warning(f"Ranking failed, using local highlights: {e}")
        except Exception as e:
            logger.error(f"Unexpected ranking error, using local highlights: {e}")

        return local_highlights(snapshot)
