"""Merge per-city daily histories into one national series."""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from ..data.models import City, HistoricalEntry
from ..utils.formatting import round_half_up

TREND_CITY_LIMIT = 5


@dataclass(frozen=True)
class TrendPoint:
    date: str
    avg_aqi: int
    avg_pm25: float


def align_and_average(series: Iterable[Optional[Sequence[HistoricalEntry]]]) -> List[TrendPoint]:
    """Average AQI and PM2.5 per calendar date across several histories.

    Dates are the union over all series and entries are matched by date
    string, so series may differ in length or skip days. A date only counts
    the cities that reported it; ``None`` series contribute nothing. If a
    series repeats a date, its first entry for that date is used.
    """
    aqi_by_date: Dict[str, List[float]] = defaultdict(list)
    pm25_by_date: Dict[str, List[float]] = defaultdict(list)
    for history in series:
        seen = set()
        for entry in history or ():
            if entry.date in seen:
                continue
            seen.add(entry.date)
            aqi_by_date[entry.date].append(entry.aqi_index)
            pm25_by_date[entry.date].append(entry.pm25)

    points: List[TrendPoint] = []
    # ISO dates sort chronologically as strings.
    for day in sorted(aqi_by_date):
        aqi_values = aqi_by_date[day]
        pm25_values = pm25_by_date[day]
        points.append(
            TrendPoint(
                date=day,
                avg_aqi=round_half_up(math.fsum(aqi_values) / len(aqi_values)),
                avg_pm25=round_half_up(math.fsum(pm25_values) / len(pm25_values), 1),
            )
        )
    return points


def select_trend_cities(cities: Sequence[City], limit: int = TREND_CITY_LIMIT) -> List[str]:
    """Names of the most populous cities, used as the national sample."""
    ranked = sorted(cities, key=lambda city: city.population, reverse=True)
    return [city.city for city in ranked[:limit]]


def trend_frame(points: Sequence[TrendPoint]) -> pd.DataFrame:
    frame = pd.DataFrame(
        [{"date": point.date, "avg_aqi": point.avg_aqi, "avg_pm25": point.avg_pm25} for point in points],
        columns=["date", "avg_aqi", "avg_pm25"],
    )
    frame["date"] = pd.to_datetime(frame["date"])
    return frame
