"""Country-level KPIs derived from current city conditions."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..data.models import City
from ..utils.formatting import round_half_up

WHO_PM25_GUIDELINE = 15.0


@dataclass(frozen=True)
class CountryStats:
    avg_pm25: int
    worst_city: str
    worst_city_aqi: int
    percent_above_who: int
    total_population: int


def summarize(cities: Sequence[City]) -> Optional[CountryStats]:
    """Return the overview KPIs, or ``None`` when there are no cities.

    On equal AQI the first city in input order is reported as the worst.
    Provider ordering is not guaranteed, so that choice can change between
    fetches of the same country.
    """
    if not cities:
        return None

    worst = cities[0]
    for city in cities[1:]:
        if city.aqi_index > worst.aqi_index:
            worst = city

    count = len(cities)
    avg_pm25 = math.fsum(city.pm25 for city in cities) / count
    above_who = sum(1 for city in cities if city.pm25 > WHO_PM25_GUIDELINE)
    return CountryStats(
        avg_pm25=round_half_up(avg_pm25),
        worst_city=worst.city,
        worst_city_aqi=worst.aqi_index,
        percent_above_who=round_half_up(above_who / count * 100),
        total_population=sum(city.population for city in cities),
    )


def top_polluted(cities: Sequence[City], limit: int = 10) -> List[City]:
    """Cities by AQI descending; ties keep input order."""
    return sorted(cities, key=lambda city: city.aqi_index, reverse=True)[:limit]
