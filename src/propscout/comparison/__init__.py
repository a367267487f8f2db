"""Side-by-side investment comparison.

This package holds the user's comparison set, the type-ahead search used
to fill it, and the highlight engine that names the best-ROI, best-yield
and recommended property.
"""

from .comparison_set import ComparisonSet
from .highlights import HighlightEngine, local_highlights
from .search import SearchService
from .session import CompareSession
from .table import build_comparison_rows, generate_csv

__all__ = [
    "ComparisonSet",
    "CompareSession",
    "HighlightEngine",
    "SearchService",
    "build_comparison_rows",
    "generate_csv",
    "local_highlights",
]
