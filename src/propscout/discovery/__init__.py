"""Map-driven property discovery.

This package keeps the explore map and the property list in sync: the
viewport filters the list, and a click on either view selects the same
property in both.
"""

from .debounce import Debouncer
from .details import PropertyDetails
from .explore import ExploreSession
from .selection import NullView, SelectionState, SelectionSynchronizer
from .viewport import SpatialFilter, ViewportTracker, filter_visible

__all__ = [
    "Debouncer",
    "ExploreSession",
    "PropertyDetails",
    "NullView",
    "SelectionState",
    "SelectionSynchronizer",
    "SpatialFilter",
    "ViewportTracker",
    "filter_visible",
]
