"""Property, viewport and highlight data models."""

import logging
import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

logger = logging.getLogger(__name__)

DEFAULT_PROPERTY_NAME = "Property"

# Canonical field -> raw catalog keys, checked in order (first non-null wins).
# The canonical name is listed first so dumped models validate back cleanly.
FIELD_SYNONYMS: dict[str, tuple[str, ...]] = {
    "id": ("id", "_id"),
    "name": ("name", "projectName", "title"),
    "price": ("price",),
    "bedrooms": ("bedrooms",),
    "bathrooms": ("bathrooms",),
    "area": ("area", "carpetArea"),
    "area_unit": ("area_unit", "carpetAreaUnit"),
    "projected_return": ("projected_return", "projectedReturn", "roi"),
    "rental_yield": ("rental_yield", "rentalYield", "yield"),
    "score": ("score", "investmentScore"),
    "area_name": ("area_name", "areaName", "locationName"),
    "locality": ("locality",),
    "city": ("city",),
    "landmark": ("landmark",),
    "property_type": ("property_type", "propertyType", "typeOfProperty"),
    "possession_status": ("possession_status", "possessionStatus"),
    "price_per_sqft": ("price_per_sqft", "sqftPrice"),
    "amenities": ("amenities",),
}


def first_present(data: dict[str, Any], keys: tuple[str, ...]) -> Any:
    """Return the first value among ``keys`` that is present and not None."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def is_valid_coordinate(lat: Any, lng: Any) -> bool:
    """Check that a lat/lng pair is numeric, finite and on the globe."""
    if lat is None or lng is None or isinstance(lat, bool) or isinstance(lng, bool):
        return False
    try:
        lat_f = float(lat)
        lng_f = float(lng)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lat_f) and math.isfinite(lng_f)):
        return False
    return -90.0 <= lat_f <= 90.0 and -180.0 <= lng_f <= 180.0


# Optional numeric fields: (integer only, lower bound). Unusable values become None.
NUMERIC_FIELDS: dict[str, tuple[bool, Optional[float]]] = {
    "price": (False, 0.0),
    "bedrooms": (True, 0.0),
    "bathrooms": (False, 0.0),
    "area": (False, 0.0),
    "price_per_sqft": (False, 0.0),
    "projected_return": (False, None),
    "rental_yield": (False, None),
    "score": (False, None),
}

TEXT_FIELDS = (
    "area_name",
    "locality",
    "city",
    "landmark",
    "property_type",
    "possession_status",
    "area_unit",
)


def _coerce_number(
    value: Any, integer: bool = False, minimum: Optional[float] = None
) -> Optional[float]:
    """Parse a catalog number, or None if it is not a usable value."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    if minimum is not None and number < minimum:
        return None
    if integer:
        if not number.is_integer():
            return None
        return int(number)
    return number


def _coerce_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


class Coordinates(BaseModel):
    """A geographic point."""

    lat: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in degrees")

    model_config = ConfigDict(frozen=True)


def _parse_coordinates(value: Any) -> Optional[dict[str, float]]:
    """Coerce a raw coordinate payload, dropping anything unusable."""
    if value is None:
        return None
    if isinstance(value, Coordinates):
        return {"lat": value.lat, "lng": value.lng}
    if isinstance(value, dict):
        lat, lng = value.get("lat"), value.get("lng")
    elif isinstance(value, (list, tuple)) and len(value) == 2:
        lat, lng = value
    else:
        return None
    if not is_valid_coordinate(lat, lng):
        return None
    return {"lat": float(lat), "lng": float(lng)}


class Property(BaseModel):
    """Canonical property record.

    Catalog payloads name the same things in several ways (``_id`` vs ``id``,
    ``roi`` vs ``projectedReturn`` ...). They are normalized here, once, so
    the rest of the package only reads the fixed field names below.
    """

    # Identification
    id: str = Field(..., min_length=1, description="Catalog identifier")
    name: str = Field(default=DEFAULT_PROPERTY_NAME, description="Display name")

    # Location
    coordinates: Optional[Coordinates] = Field(
        default=None, description="Map position; None when missing or invalid"
    )
    area_name: Optional[str] = Field(default=None, description="Area or location name")
    locality: Optional[str] = Field(default=None, description="Locality within the area")
    city: Optional[str] = Field(default=None, description="City name")
    landmark: Optional[str] = Field(default=None, description="Nearby landmark")

    # Listing details
    price: Optional[float] = Field(default=None, ge=0, description="Asking price")
    bedrooms: Optional[int] = Field(default=None, ge=0, description="Number of bedrooms")
    bathrooms: Optional[float] = Field(default=None, ge=0, description="Number of bathrooms")
    area: Optional[float] = Field(default=None, ge=0, description="Carpet area")
    area_unit: str = Field(default="sqft", description="Unit of ``area``")
    property_type: Optional[str] = Field(default=None, description="Apartment, villa, ...")
    possession_status: Optional[str] = Field(default=None, description="Ready, under construction, ...")
    price_per_sqft: Optional[float] = Field(default=None, ge=0, description="Price per square foot")
    amenities: list[str] = Field(default_factory=list, description="Listed amenities")

    # Investment metrics
    projected_return: Optional[float] = Field(
        default=None, description="Projected return (ROI) percentage"
    )
    rental_yield: Optional[float] = Field(
        default=None, description="Gross rental yield percentage"
    )
    score: Optional[float] = Field(default=None, description="Overall investment score")

    # Raw data storage
    raw_data: Optional[dict[str, Any]] = Field(
        default=None, description="Original catalog payload"
    )

    model_config = ConfigDict(str_strip_whitespace=True)

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        normalized: dict[str, Any] = {}
        for field, keys in FIELD_SYNONYMS.items():
            value = first_present(data, keys)
            if value is not None:
                normalized[field] = value

        if "id" in normalized:
            normalized["id"] = str(normalized["id"])

        # A bad optional field is dropped, never the whole listing
        for field, (integer, minimum) in NUMERIC_FIELDS.items():
            if field not in normalized:
                continue
            number = _coerce_number(normalized[field], integer=integer, minimum=minimum)
            if number is None:
                logger.debug(
                    f"Dropping unusable {field}={normalized[field]!r} "
                    f"for {normalized.get('id')}"
                )
                del normalized[field]
            else:
                normalized[field] = number
        for field in TEXT_FIELDS:
            if field in normalized:
                text = _coerce_text(normalized[field])
                if text is None:
                    del normalized[field]
                else:
                    normalized[field] = text

        # Blank display names fall through to the next synonym
        names = [data.get(key) for key in FIELD_SYNONYMS["name"]]
        normalized["name"] = next(
            (n for n in names if isinstance(n, str) and n.strip()),
            DEFAULT_PROPERTY_NAME,
        )

        coords = _parse_coordinates(data.get("coordinates"))
        if coords is None and data.get("coordinates") is not None:
            logger.debug(f"Dropping invalid coordinates for {normalized.get('id')}")
        normalized["coordinates"] = coords

        amenities = normalized.get("amenities")
        if isinstance(amenities, str):
            normalized["amenities"] = [a.strip() for a in amenities.split(",") if a.strip()]
        elif isinstance(amenities, (list, tuple)):
            normalized["amenities"] = [
                text for text in map(_coerce_text, amenities) if text and text.strip()
            ]
        elif amenities is not None:
            del normalized["amenities"]

        raw = data.get("raw_data")
        if raw is None:
            raw = {k: v for k, v in data.items() if k != "raw_data"}
        normalized["raw_data"] = raw
        return normalized

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_coordinates(self) -> bool:
        """True when the property can be placed on the map."""
        return self.coordinates is not None

    @property
    def location_label(self) -> str:
        """Area, locality and city joined for display."""
        parts = [self.area_name or "N/A"]
        if self.locality:
            parts.append(self.locality)
        if self.city:
            parts.append(self.city)
        return ", ".join(parts)


class BoundingBox(BaseModel):
    """Rectangular map viewport given by its south-west and north-east corners."""

    south_west: Coordinates
    north_east: Coordinates

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_corners(self) -> "BoundingBox":
        if self.south_west.lat > self.north_east.lat:
            raise ValueError("south-west latitude is north of north-east latitude")
        if self.south_west.lng > self.north_east.lng:
            raise ValueError("south-west longitude is east of north-east longitude")
        return self

    @classmethod
    def from_corners(
        cls, south: float, west: float, north: float, east: float
    ) -> "BoundingBox":
        """Build a box from its four edges."""
        return cls(
            south_west=Coordinates(lat=south, lng=west),
            north_east=Coordinates(lat=north, lng=east),
        )

    def contains(self, lat: float, lng: float) -> bool:
        """Point containment, edges inclusive."""
        return (
            self.south_west.lat <= lat <= self.north_east.lat
            and self.south_west.lng <= lng <= self.north_east.lng
        )

    def contains_property(self, prop: Property) -> bool:
        """True if the property has coordinates inside this box."""
        if prop.coordinates is None:
            return False
        return self.contains(prop.coordinates.lat, prop.coordinates.lng)


class MetricHighlight(BaseModel):
    """Winning property for one metric."""

    name: str = DEFAULT_PROPERTY_NAME
    value: Optional[str | float] = None

    model_config = ConfigDict(extra="allow")


class RecommendationHighlight(BaseModel):
    """Overall recommended property."""

    name: str = DEFAULT_PROPERTY_NAME

    model_config = ConfigDict(extra="allow")


class HighlightResult(BaseModel):
    """Best-ROI / best-yield / recommendation summary for a comparison set.

    Field aliases match the ranking service payload so remote responses can
    be validated and dumped back verbatim.
    """

    best_roi: MetricHighlight = Field(..., alias="bestROI")
    best_yield: MetricHighlight = Field(..., alias="bestYield")
    recommendation: RecommendationHighlight

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_payload(self) -> dict[str, Any]:
        """Dump using the service's camelCase keys."""
        return self.model_dump(by_alias=True)


class Inquiry(BaseModel):
    """Buyer inquiry about a single property."""

    property_id: str = Field(..., min_length=1, alias="propertyId")
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    phone: Optional[str] = None
    message: str = Field(..., min_length=1)

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)
