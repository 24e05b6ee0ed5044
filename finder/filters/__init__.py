"""Listing filter state, serialization, and query construction."""

from finder.filters.query import build_listing_conditions, build_listings_query
from finder.filters.query_string import deserialize, serialize, to_payload
from finder.filters.session import CityCheckState, FilterSession
from finder.filters.state import (
    CATEGORICAL_FIELDS,
    DEFAULT_BOUNDS,
    MULTI_OPTIONS,
    FilterState,
    normalize,
)

__all__ = [
    "CATEGORICAL_FIELDS",
    "DEFAULT_BOUNDS",
    "MULTI_OPTIONS",
    "CityCheckState",
    "FilterSession",
    "FilterState",
    "build_listing_conditions",
    "build_listings_query",
    "deserialize",
    "normalize",
    "serialize",
    "to_payload",
]
