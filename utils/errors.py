"""
Exception taxonomy for the hotel search core.
"""


class HotelSearchError(Exception):
    """Base class for failures surfaced to the caller as "search failed, try again"."""


class ParseError(HotelSearchError):
    """The structured-parse service failed or returned content that does not fit the schema."""


class RetrievalError(HotelSearchError):
    """Query embedding or candidate retrieval failed."""
