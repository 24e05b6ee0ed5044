"""Translate a ``FilterState`` into a parameterized listings query."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from sqlalchemy import ColumnElement, Select, and_, func, or_, select
from sqlalchemy.orm import InstrumentedAttribute

from finder.filters.state import CATEGORICAL_FIELDS, FilterState, Number, is_unconstrained
from finder.models.listing import Listing

RECENCY_DAYS = 14
RESULT_LIMIT = 100

_RANGE_COLUMNS: dict[str, InstrumentedAttribute] = {
    "price": Listing.price,
    "size": Listing.size,
    "rooms": Listing.num_rooms,
}


def range_condition(
    column: InstrumentedAttribute,
    low: Number,
    high: Number,
    include_zero: bool,
) -> ColumnElement[bool]:
    """Bounds apply to known values only; 0/NULL rows hinge on ``include_zero``."""

    value = func.coalesce(column, 0)
    known_in_range = and_(value.between(low, high), value != 0)
    if include_zero:
        return or_(known_in_range, value == 0)
    return known_in_range


def categorical_condition(
    column: InstrumentedAttribute, selected: list[str]
) -> ColumnElement[bool] | None:
    if is_unconstrained(selected):
        return None
    return column.in_(sorted(set(selected)))


def neighborhood_condition(
    column: InstrumentedAttribute, neighborhoods: list[str]
) -> ColumnElement[bool] | None:
    if not neighborhoods:
        return None
    return column.in_(list(dict.fromkeys(neighborhoods)))


def build_listing_conditions(state: FilterState) -> list[ColumnElement[bool]]:
    """Per-field conditions for ``state``; unconstrained fields contribute nothing."""

    conditions: list[ColumnElement[bool]] = []
    for name, column in _RANGE_COLUMNS.items():
        low, high = state.bounds(name)
        conditions.append(range_condition(column, low, high, state.include_zero(name)))

    for field_name in CATEGORICAL_FIELDS:
        condition = categorical_condition(
            getattr(Listing, field_name), state.selected(field_name)
        )
        if condition is not None:
            conditions.append(condition)

    condition = neighborhood_condition(Listing.neighborhood, state.neighborhoods)
    if condition is not None:
        conditions.append(condition)

    return conditions


def build_listings_query(
    state: FilterState,
    *,
    now: datetime | None = None,
    recency_days: int = RECENCY_DAYS,
    limit: int = RESULT_LIMIT,
) -> Select[tuple[Listing]]:
    """Recent for-rent listings matching every constraint, newest first."""

    current = now or datetime.now(UTC)
    since = current - timedelta(days=recency_days)

    return (
        select(Listing)
        .where(Listing.created_at >= since)
        .where(Listing.is_for_rent.is_(True))
        .where(*build_listing_conditions(state))
        .order_by(Listing.created_at.desc())
        .limit(limit)
    )
