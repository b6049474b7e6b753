"""Passes: Pipeline stages for itinerary conversion."""

from itinerary.passes.p00_normalize import normalize
from itinerary.passes.p10_split_lines import split_lines
from itinerary.passes.p20_airport_codes import substitute_airport_codes
from itinerary.passes.p30_datetimes import rewrite_datetimes
from itinerary.passes.p80_package import package

__all__ = [
    "normalize",
    "split_lines",
    "substitute_airport_codes",
    "rewrite_datetimes",
    "package",
]
