"""
Itinerary Prettifier

Turns terse, code-laden itinerary text into a display-ready rendering:
airport codes become airport names, ISO timestamps become readable
dates and clock times.
"""

__version__ = "0.1.0"
