"""Abstract base class for the property catalog.

The catalog is the external collaborator that stores listings and runs
server-side search and ranking. The explore and compare sessions only talk
to it through this interface, so an HTTP backend, an in-memory fixture or
anything else can be plugged in interchangeably.

Example usage:
    class MyCatalog(PropertyCatalog):
        name = "my_catalog"

        async def fetch_properties(self, search=None):
            ...

        async def fetch_property_by_id(self, property_id):
            ...

        async def rank_properties(self, property_ids):
            ...

        async def submit_inquiry(self, inquiry):
            ...
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..models.property import HighlightResult, Inquiry, Property


class PropertyCatalog(ABC):
    """Abstract base class for property catalogs.

    Attributes:
        name: Identifier used in log lines and error messages
    """

    name: str = "catalog"

    @abstractmethod
    async def fetch_properties(self, search: Optional[str] = None) -> list[Property]:
        """List catalog properties, optionally filtered by free text.

        Args:
            search: Free-text query applied server-side. None lists everything.

        Returns:
            Normalized Property objects in catalog order

        Raises:
            CatalogError: If the catalog is unreachable or the request fails
        """

    @abstractmethod
    async def fetch_property_by_id(self, property_id: str) -> Optional[Property]:
        """Get a single property.

        Returns:
            The Property, or None if the catalog does not know the id

        Raises:
            CatalogError: If the request fails
        """

    @abstractmethod
    async def rank_properties(self, property_ids: Sequence[str]) -> HighlightResult:
        """Ask the ranking service for highlights over the given ids.

        Raises:
            RankingError: On transport failure or a malformed payload
        """

    @abstractmethod
    async def submit_inquiry(self, inquiry: Inquiry) -> None:
        """Send a buyer inquiry about a property.

        Raises:
            CatalogError: If the inquiry was rejected or could not be sent
        """


class CatalogError(Exception):
    """Base exception for catalog errors.

    Attributes:
        source: Name of the catalog that raised the error
        message: Error description
    """

    def __init__(self, source: str, message: str):
        self.source = source
        self.message = message
        super().__init__(f"[{source}] {message}")


class RankingError(CatalogError):
    """Raised when the remote ranking call fails or returns garbage."""
