"""Reference data lookups for airport names."""

from itinerary.reference.airports import (
    REQUIRED_COLUMNS,
    AirportLookup,
    build_airport_lookup,
    load_airport_lookup,
)

__all__ = [
    "REQUIRED_COLUMNS",
    "AirportLookup",
    "build_airport_lookup",
    "load_airport_lookup",
]
