"""Property catalog access.

The catalog is the external store of listings. This package defines the
contract the rest of PropScout relies on and ships two implementations.

Main Components:
    - PropertyCatalog: Abstract base class for all catalogs
    - CatalogClient: httpx client for the catalog REST API
    - InMemoryCatalog: Fixed in-memory catalog for offline use

Example usage:
    from propscout.catalog import CatalogClient

    async with CatalogClient() as catalog:
        listings = await catalog.fetch_properties(search="Powai")
"""

from .base import CatalogError, PropertyCatalog, RankingError
from .client import CatalogClient
from .memory import InMemoryCatalog

__all__ = [
    "PropertyCatalog",
    "CatalogError",
    "RankingError",
    "CatalogClient",
    "InMemoryCatalog",
]
