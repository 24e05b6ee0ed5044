"""Filter state shared by listing search, subscriptions, and saved filters."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace

MULTI_OPTIONS: tuple[str, ...] = ("yes", "no", "not mentioned")
CATEGORICAL_FIELDS: tuple[str, ...] = ("balcony", "parking", "furnished", "agent")
RANGE_FIELDS: tuple[str, ...] = ("price", "size", "rooms")

DEFAULT_BOUNDS: dict[str, tuple[int, int]] = {
    "price": (0, 10000),
    "size": (0, 500),
    "rooms": (0, 10),
}

Number = int | float


def _all_options() -> list[str]:
    return list(MULTI_OPTIONS)


@dataclass(slots=True)
class FilterState:
    """Range and categorical constraints for one search session.

    An empty ``neighborhoods`` list means "no neighborhood restriction".
    A categorical field holding every option in ``MULTI_OPTIONS`` means
    "no restriction on that field".
    """

    min_price: Number = DEFAULT_BOUNDS["price"][0]
    max_price: Number = DEFAULT_BOUNDS["price"][1]
    min_size: Number = DEFAULT_BOUNDS["size"][0]
    max_size: Number = DEFAULT_BOUNDS["size"][1]
    min_rooms: Number = DEFAULT_BOUNDS["rooms"][0]
    max_rooms: Number = DEFAULT_BOUNDS["rooms"][1]
    include_zero_price: bool = True
    include_zero_size: bool = True
    include_zero_rooms: bool = True
    neighborhoods: list[str] = field(default_factory=list)
    balcony: list[str] = field(default_factory=_all_options)
    parking: list[str] = field(default_factory=_all_options)
    furnished: list[str] = field(default_factory=_all_options)
    agent: list[str] = field(default_factory=_all_options)

    def bounds(self, name: str) -> tuple[Number, Number]:
        _check_range_name(name)
        return getattr(self, f"min_{name}"), getattr(self, f"max_{name}")

    def include_zero(self, name: str) -> bool:
        _check_range_name(name)
        return getattr(self, f"include_zero_{name}")

    def selected(self, field_name: str) -> list[str]:
        _check_categorical_name(field_name)
        return getattr(self, field_name)


def _check_range_name(name: str) -> None:
    if name not in RANGE_FIELDS:
        raise ValueError(f"Unknown range field: {name}")


def _check_categorical_name(name: str) -> None:
    if name not in CATEGORICAL_FIELDS:
        raise ValueError(f"Unknown categorical field: {name}")


def is_unconstrained(selected: list[str] | tuple[str, ...] | set[str]) -> bool:
    """Empty selection and full option set both mean "no filter"."""

    chosen = set(selected)
    return not chosen or chosen == set(MULTI_OPTIONS)


def parse_number(raw: object) -> Number | None:
    """Parse a bound from user input; ``None`` for missing or malformed values."""

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    if not math.isfinite(value):
        return None
    return int(value) if value.is_integer() else value


def _unique(values: list[str]) -> list[str]:
    return list(dict.fromkeys(value for value in values if value != ""))


def normalize(state: FilterState) -> FilterState:
    """Apply the defaulting rules used when a state is read back from a URL."""

    changes: dict[str, object] = {}
    for name in RANGE_FIELDS:
        default_low, default_high = DEFAULT_BOUNDS[name]
        low, high = state.bounds(name)
        parsed_low = parse_number(low)
        parsed_high = parse_number(high)
        changes[f"min_{name}"] = default_low if parsed_low is None else parsed_low
        changes[f"max_{name}"] = default_high if parsed_high is None else parsed_high
        changes[f"include_zero_{name}"] = bool(state.include_zero(name))

    changes["neighborhoods"] = _unique(list(state.neighborhoods))
    for field_name in CATEGORICAL_FIELDS:
        chosen = _unique(list(state.selected(field_name)))
        changes[field_name] = chosen or _all_options()

    return replace(state, **changes)
