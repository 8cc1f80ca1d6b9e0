"""Sorting and filtering of city rows for the overview table."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from functools import cmp_to_key
from numbers import Real
from typing import Any, List, Sequence

import pandas as pd

from ..data.models import City
from ..utils.formatting import format_number
from .classifier import classify

SORT_ASC = "asc"
SORT_DESC = "desc"
DEFAULT_SORT_KEY = "aqi_index"


def _collation_key(text: str) -> tuple:
    # Accents, then case, only break ties; lowercase sorts before uppercase.
    folded = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in folded if not unicodedata.combining(ch)).casefold()
    return (base, folded.casefold(), text.swapcase())


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def compare_values(left: Any, right: Any) -> int:
    """Numbers compare by difference and strings by collation; anything else ties."""
    if _is_number(left) and _is_number(right):
        diff = left - right
        return (diff > 0) - (diff < 0)
    if isinstance(left, str) and isinstance(right, str):
        a, b = _collation_key(left), _collation_key(right)
        return (a > b) - (a < b)
    return 0


def project(
    cities: Sequence[City],
    sort_key: str = DEFAULT_SORT_KEY,
    sort_order: str = SORT_DESC,
    filter_text: str = "",
) -> List[City]:
    """Return a filtered, sorted copy of ``cities``.

    The filter is a case-insensitive substring match on the city name. The
    sort is stable in both directions: rows with equal keys keep their input
    order. An unknown ``sort_key`` leaves the filtered rows in input order.
    """
    needle = filter_text.casefold()
    filtered = [city for city in cities if needle in city.city.casefold()]
    sign = -1 if sort_order == SORT_DESC else 1

    def compare(a: City, b: City) -> int:
        return sign * compare_values(getattr(a, sort_key, None), getattr(b, sort_key, None))

    return sorted(filtered, key=cmp_to_key(compare))


@dataclass(frozen=True)
class SortState:
    key: str = DEFAULT_SORT_KEY
    order: str = SORT_DESC

    def toggle(self, key: str) -> "SortState":
        """Flip the order for the current column, otherwise sort the new column descending."""
        if key == self.key:
            return SortState(key, SORT_ASC if self.order == SORT_DESC else SORT_DESC)
        return SortState(key, SORT_DESC)

    def arrow(self, key: str) -> str:
        if key != self.key:
            return ""
        return "↑" if self.order == SORT_ASC else "↓"


def cities_frame(cities: Sequence[City]) -> pd.DataFrame:
    rows = []
    for city in cities:
        rows.append(
            {
                "City": city.city,
                "AQI": city.aqi_index,
                "Category": city.aqi_category or classify(city.aqi_index).category.label,
                "PM2.5 (µg/m³)": city.pm25,
                "PM10 (µg/m³)": city.pm10,
                "Population": format_number(city.population),
            }
        )
    return pd.DataFrame(rows, columns=["City", "AQI", "Category", "PM2.5 (µg/m³)", "PM10 (µg/m³)", "Population"])
