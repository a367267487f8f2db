"""Property details page: load one property and send inquiries about it."""

import logging
from typing import Optional

from pydantic import ValidationError

from ..catalog.base import CatalogError, PropertyCatalog
from ..models.property import Inquiry, Property

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load property details. Please try again later."
INQUIRY_ERROR = "Failed to send inquiry. Please try again."


class PropertyDetails:
    """Detail view reached from a marker popup or a list card."""

    def __init__(self, catalog: PropertyCatalog, property_id: str):
        self.catalog = catalog
        self.property_id = property_id
        self.property: Optional[Property] = None
        self.error: Optional[str] = None
        self.inquiry_error: Optional[str] = None

    async def load(self) -> Optional[Property]:
        try:
            self.property = await self.catalog.fetch_property_by_id(self.property_id)
        except CatalogError as e:
            logger.error(f"Error fetching property {self.property_id}: {e}")
            self.property = None
            self.error = LOAD_ERROR
            return None

        self.error = None if self.property is not None else LOAD_ERROR
        return self.property

    async def submit_inquiry(
        self,
        name: str,
        email: str,
        message: str,
        phone: Optional[str] = None,
    ) -> bool:
        """Send an inquiry; returns False and sets ``inquiry_error`` on failure."""
        self.inquiry_error = None
        try:
            inquiry = Inquiry(
                property_id=self.property_id,
                name=name,
                email=email,
                message=message,
                phone=phone,
            )
            await self.catalog.submit_inquiry(inquiry)
        except (ValidationError, CatalogError) as e:
            logger.error(f"Error sending inquiry for {self.property_id}: {e}")
            self.inquiry_error = INQUIRY_ERROR
            return False
        return True
