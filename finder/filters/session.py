"""Editing session over a filter state with selection invariants."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum

from finder.config.neighborhoods import CITIES_AND_NEIGHBORHOODS
from finder.filters.query_string import deserialize, serialize
from finder.filters.state import (
    CATEGORICAL_FIELDS,
    MULTI_OPTIONS,
    FilterState,
    Number,
)

LAST_OPTION_ERROR = "צריך לבחור לפחות אופציה אחת על מנת לקבל תוצאות"
NEIGHBORHOOD_REQUIRED_ERROR = "יש לבחור לפחות שכונה אחת"


class CityCheckState(str, Enum):
    CHECKED = "checked"
    INDETERMINATE = "indeterminate"
    UNCHECKED = "unchecked"


class FilterSession:
    """Holds the current filter state and field-scoped validation messages.

    Rejected edits leave the state untouched and record a message in
    ``errors`` under the field name; they never raise.
    """

    def __init__(
        self,
        state: FilterState | None = None,
        *,
        cities: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        self.state = state if state is not None else FilterState()
        self.errors: dict[str, str] = {}
        self._cities = cities if cities is not None else CITIES_AND_NEIGHBORHOODS

    @classmethod
    def from_query_string(
        cls,
        query: str,
        *,
        cities: Mapping[str, Sequence[str]] | None = None,
    ) -> "FilterSession":
        return cls(deserialize(query), cities=cities)

    def query_string(self) -> str:
        return serialize(self.state)

    def toggle_option(self, field_name: str, option: str) -> bool:
        """Toggle a categorical option; refuse to drop the last selected one."""

        if field_name not in CATEGORICAL_FIELDS:
            raise ValueError(f"Unknown categorical field: {field_name}")
        if option not in MULTI_OPTIONS:
            raise ValueError(f"Unknown option for {field_name}: {option}")

        current = self.state.selected(field_name)
        if option in current:
            if len(current) == 1:
                self.errors[field_name] = LAST_OPTION_ERROR
                return False
            updated = [value for value in current if value != option]
        else:
            updated = [*current, option]

        setattr(self.state, field_name, updated)
        self.errors.pop(field_name, None)
        return True

    def toggle_neighborhood(self, name: str) -> None:
        current = self.state.neighborhoods
        if name in current:
            self.state.neighborhoods = [value for value in current if value != name]
        else:
            self.state.neighborhoods = [*current, name]
        if self.state.neighborhoods:
            self.errors.pop("neighborhoods", None)

    def city_neighborhoods(self, city: str) -> tuple[str, ...]:
        try:
            return tuple(self._cities[city])
        except KeyError:
            raise ValueError(f"Unknown city: {city}") from None

    def toggle_city(self, city: str) -> None:
        """Select every neighborhood of ``city``, or clear them if all are selected."""

        city_names = self.city_neighborhoods(city)
        others = [name for name in self.state.neighborhoods if name not in city_names]
        selected = set(self.state.neighborhoods)
        if all(name in selected for name in city_names):
            self.state.neighborhoods = others
        else:
            self.state.neighborhoods = [*others, *city_names]
            self.errors.pop("neighborhoods", None)

    def city_state(self, city: str) -> CityCheckState:
        city_names = self.city_neighborhoods(city)
        selected = set(self.state.neighborhoods)
        count = sum(1 for name in city_names if name in selected)
        if count == 0:
            return CityCheckState.UNCHECKED
        if count == len(city_names):
            return CityCheckState.CHECKED
        return CityCheckState.INDETERMINATE

    def selected_cities(self) -> list[str]:
        return [
            city
            for city in self._cities
            if self.city_state(city) is not CityCheckState.UNCHECKED
        ]

    def set_range(self, name: str, low: Number, high: Number) -> None:
        self.state.bounds(name)
        setattr(self.state, f"min_{name}", low)
        setattr(self.state, f"max_{name}", high)

    def set_include_zero(self, name: str, include: bool) -> None:
        self.state.include_zero(name)
        setattr(self.state, f"include_zero_{name}", include)

    def validate_for_subscription(self) -> bool:
        """Subscriptions must name at least one neighborhood."""

        if not self.state.neighborhoods:
            self.errors["neighborhoods"] = NEIGHBORHOOD_REQUIRED_ERROR
            return False
        self.errors.pop("neighborhoods", None)
        return True
