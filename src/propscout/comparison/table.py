"""Attribute-by-property comparison table and its CSV export."""

import csv
import io
from typing import Any, Callable, Sequence

from ..models.property import Property
from .highlights import format_percentage

CURRENCY_SYMBOL = "₹"
MISSING = "N/A"

Row = list[str]


def _money(value: float | None) -> str:
    return MISSING if value is None else f"{CURRENCY_SYMBOL}{value:,.0f}"


def _text(value: Any) -> str:
    if value is None or value == "":
        return MISSING
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _area(p: Property) -> str:
    return MISSING if p.area is None else f"{_text(p.area)} {p.area_unit}"


def _coordinates(p: Property) -> str:
    if p.coordinates is None:
        return MISSING
    return f"{p.coordinates.lat}, {p.coordinates.lng}"


def _raw(key: str) -> Callable[[Property], str]:
    def get(p: Property) -> str:
        return _text((p.raw_data or {}).get(key))
    return get


def _raw_flag(key: str) -> Callable[[Property], str]:
    def get(p: Property) -> str:
        return "Yes" if (p.raw_data or {}).get(key) else "No"
    return get


# (label, accessor) in display order
COMPARISON_FIELDS: list[tuple[str, Callable[[Property], str]]] = [
    ("Property Name", lambda p: p.name),
    ("ID", lambda p: p.id),
    ("Location", lambda p: p.location_label),
    ("Property Type", lambda p: _text(p.property_type)),
    ("Price", lambda p: _money(p.price)),
    ("Bedrooms", lambda p: _text(p.bedrooms)),
    ("Bathrooms", lambda p: _text(p.bathrooms)),
    ("Carpet Area", _area),
    ("Sqft Price", lambda p: _money(p.price_per_sqft)),
    ("Possession Status", lambda p: _text(p.possession_status)),
    ("Projected Return", lambda p: format_percentage(p.projected_return)),
    ("Rental Yield", lambda p: format_percentage(p.rental_yield)),
    ("Investment Score", lambda p: _text(p.score)),
    ("Amenities", lambda p: ", ".join(p.amenities) if p.amenities else MISSING),
    ("Developer", _raw("developer")),
    ("Ownership Type", _raw("ownershipType")),
    ("Furnished Type", _raw("furnishedType")),
    ("Facing", _raw("facing")),
    ("Floor No", _raw("floorNo")),
    ("RERA", _raw("rera")),
    ("Lift", _raw_flag("lift")),
    ("Parking", _raw_flag("parking")),
    ("Security", _raw_flag("security")),
    ("Power Backup", _raw_flag("powerBackup")),
    ("Landmark", lambda p: _text(p.landmark)),
    ("Coordinates", _coordinates),
]


def build_comparison_rows(properties: Sequence[Property]) -> list[Row]:
    """One row per attribute: ``[label, value for each property...]``.

    The first row is the header (``Attribute`` followed by property names).
    """
    rows: list[Row] = [["Attribute", *[p.name for p in properties]]]
    for label, accessor in COMPARISON_FIELDS:
        rows.append([label, *[accessor(p) for p in properties]])
    return rows


def generate_csv(properties: Sequence[Property]) -> str:
    """Export the comparison table as CSV text."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerows(build_comparison_rows(properties))
    return buf.getvalue().rstrip("\n")
