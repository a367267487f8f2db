"""HTTP client for the property catalog REST API.

Talks to the listing/analytics backend:

    GET  /api/properties?search=...                 catalog listing
    GET  /api/properties/{id}                       single property
    GET  /api/analytics/property-analysis?propertyIds=a,b,c
                                                    remote highlight ranking
    POST /api/inquiries                             buyer inquiry
"""

import logging
from typing import Any, Optional, Sequence
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..config import config
from ..models.property import HighlightResult, Inquiry, Property
from .base import CatalogError, PropertyCatalog, RankingError

logger = logging.getLogger(__name__)


class CatalogClient(PropertyCatalog):
    """Async client for the catalog API.

    Example:
        async with CatalogClient("http://localhost:5000") as catalog:
            listings = await catalog.fetch_properties(search="Andheri")
            highlights = await catalog.rank_properties([p.id for p in listings[:3]])
    """

    name = "catalog-api"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API root. Defaults to ``config.api_url``.
            timeout: Request timeout in seconds. Defaults to ``config.request_timeout``.
            client: Pre-built httpx client (tests inject one with a mock transport).
                    A client passed in here is not closed by ``close()``.
        """
        self.base_url = (base_url or config.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else config.request_timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def _get_json(
        self,
        path: str,
        params: Optional[dict[str, str]] = None,
        error_cls: type[CatalogError] = CatalogError,
    ) -> Any:
        client = await self._get_client()
        try:
            resp = await client.get(self._url(path), params=params)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            raise error_cls(
                self.name, f"GET {path} returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise error_cls(self.name, f"GET {path} failed: {e}") from e
        except ValueError as e:
            raise error_cls(self.name, f"GET {path} returned invalid JSON") from e

    async def fetch_properties(self, search: Optional[str] = None) -> list[Property]:
        params = {"search": search} if search else None
        payload = await self._get_json("/api/properties", params=params)

        if not isinstance(payload, list):
            raise CatalogError(self.name, "Property listing is not a JSON array")

        properties = []
        for item in payload:
            try:
                properties.append(Property.model_validate(item))
            except ValidationError as e:
                ident = item.get("id") or item.get("_id") if isinstance(item, dict) else None
                logger.warning(f"Skipping malformed property {ident}: {e.error_count()} errors")

        logger.debug(f"Fetched {len(properties)} properties (search={search!r})")
        return properties

    async def fetch_property_by_id(self, property_id: str) -> Optional[Property]:
        client = await self._get_client()
        path = f"/api/properties/{quote(property_id, safe='')}"
        try:
            resp = await client.get(self._url(path))
            if resp.status_code == 404:
                return None
            resp.raise_for_status()
            return Property.model_validate(resp.json())
        except httpx.HTTPError as e:
            raise CatalogError(self.name, f"GET {path} failed: {e}") from e
        except (ValueError, ValidationError) as e:
            raise CatalogError(self.name, f"GET {path} returned a malformed property") from e

    async def rank_properties(self, property_ids: Sequence[str]) -> HighlightResult:
        payload = await self._get_json(
            "/api/analytics/property-analysis",
            params={"propertyIds": ",".join(property_ids)},
            error_cls=RankingError,
        )
        try:
            return HighlightResult.model_validate(payload)
        except ValidationError as e:
            raise RankingError(self.name, f"Malformed ranking payload: {e.error_count()} errors") from e

    async def submit_inquiry(self, inquiry: Inquiry) -> None:
        client = await self._get_client()
        body = inquiry.model_dump(by_alias=True, exclude_none=True)
        try:
            resp = await client.post(self._url("/api/inquiries"), json=body)
        except httpx.HTTPError as e:
            raise CatalogError(self.name, f"Inquiry could not be sent: {e}") from e

        if resp.is_error:
            detail = f"status {resp.status_code}"
            try:
                detail = resp.json().get("message", detail)
            except (ValueError, AttributeError):
                pass
            raise CatalogError(self.name, f"Inquiry rejected: {detail}")

        logger.info(f"Inquiry submitted for property {inquiry.property_id}")
