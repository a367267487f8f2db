"""Data models for PropScout."""

from propscout.models.property import (
    BoundingBox,
    Coordinates,
    HighlightResult,
    Inquiry,
    MetricHighlight,
    Property,
    RecommendationHighlight,
)

__all__ = [
    "Property",
    "Coordinates",
    "BoundingBox",
    "HighlightResult",
    "MetricHighlight",
    "RecommendationHighlight",
    "Inquiry",
]
