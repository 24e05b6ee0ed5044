"""Mapping between ``FilterState`` and its flat query-string form."""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import parse_qsl, urlencode

from finder.filters.state import (
    CATEGORICAL_FIELDS,
    DEFAULT_BOUNDS,
    RANGE_FIELDS,
    FilterState,
    is_unconstrained,
    normalize,
    parse_number,
)

_RANGE_PARAMS: dict[str, tuple[str, str, str]] = {
    "price": ("minPrice", "maxPrice", "includeZeroPrice"),
    "size": ("minSize", "maxSize", "includeZeroSize"),
    "rooms": ("minRooms", "maxRooms", "includeZeroRooms"),
}
_LIST_PARAMS: tuple[str, ...] = ("neighborhoods", *CATEGORICAL_FIELDS)

FILTER_PARAM_NAMES = frozenset(
    [name for names in _RANGE_PARAMS.values() for name in names] + list(_LIST_PARAMS)
)


def _format_number(value: object) -> str:
    parsed = parse_number(value)
    return "" if parsed is None else str(parsed)


def serialize(state: FilterState, *, compact: bool = False) -> str:
    """Flatten a filter state into a query string.

    With ``compact`` the request form is produced: categorical fields with
    every option selected and an empty neighborhood list are left out.
    """

    pairs: list[tuple[str, str]] = []
    for name in RANGE_FIELDS:
        min_param, max_param, _ = _RANGE_PARAMS[name]
        low, high = state.bounds(name)
        pairs.append((min_param, _format_number(low)))
        pairs.append((max_param, _format_number(high)))

    pairs.extend(("neighborhoods", value) for value in state.neighborhoods)
    for field_name in CATEGORICAL_FIELDS:
        selected = state.selected(field_name)
        if compact and is_unconstrained(selected):
            continue
        pairs.extend((field_name, value) for value in selected)

    for name in RANGE_FIELDS:
        _, _, zero_param = _RANGE_PARAMS[name]
        pairs.append((zero_param, "true" if state.include_zero(name) else "false"))

    return urlencode(pairs)


def _pairs(query: str | Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    if isinstance(query, str):
        return parse_qsl(query.lstrip("?"), keep_blank_values=True)
    return [(str(key), str(value)) for key, value in query]


def deserialize(query: str | Iterable[tuple[str, str]]) -> FilterState:
    """Rebuild a filter state from a query string or ``(key, value)`` pairs.

    Missing or malformed bounds fall back to the defaults, an empty
    categorical list expands to every option, and only the literal
    ``"false"`` turns a zero-inclusion flag off. Unknown keys are ignored.
    """

    singles: dict[str, str] = {}
    lists: dict[str, list[str]] = {name: [] for name in _LIST_PARAMS}
    for key, value in _pairs(query):
        if key in lists:
            lists[key].append(value)
        elif key in FILTER_PARAM_NAMES and key not in singles:
            singles[key] = value

    values: dict[str, object] = {}
    for name in RANGE_FIELDS:
        min_param, max_param, zero_param = _RANGE_PARAMS[name]
        default_low, default_high = DEFAULT_BOUNDS[name]
        low = parse_number(singles.get(min_param))
        high = parse_number(singles.get(max_param))
        values[f"min_{name}"] = default_low if low is None else low
        values[f"max_{name}"] = default_high if high is None else high
        values[f"include_zero_{name}"] = singles.get(zero_param) != "false"

    for name in _LIST_PARAMS:
        values[name] = lists[name]

    return normalize(FilterState(**values))


def to_payload(state: FilterState) -> dict[str, object]:
    """JSON form of a filter state using the query-string parameter names."""

    payload: dict[str, object] = {}
    for name in RANGE_FIELDS:
        min_param, max_param, zero_param = _RANGE_PARAMS[name]
        low, high = state.bounds(name)
        payload[min_param] = low
        payload[max_param] = high
        payload[zero_param] = state.include_zero(name)
    payload["neighborhoods"] = list(state.neighborhoods)
    for field_name in CATEGORICAL_FIELDS:
        payload[field_name] = list(state.selected(field_name))
    return payload
