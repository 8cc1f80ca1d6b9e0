"""Side-by-side comparison of two city histories."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import pandas as pd

from ..data.models import HistoricalEntry


@dataclass(frozen=True)
class ComparisonRow:
    date: str
    pm25_a: Optional[float]
    pm25_b: Optional[float]
    aqi_a: Optional[int]
    aqi_b: Optional[int]


@dataclass(frozen=True)
class CityComparison:
    city_a: str
    city_b: str
    rows: List[ComparisonRow]
    avg_pm25_a: float
    avg_pm25_b: float
    percent_diff: float
    higher_city: str

    def to_frame(self) -> pd.DataFrame:
        frame = pd.DataFrame(
            [
                {
                    "date": row.date,
                    f"{self.city_a} PM2.5": row.pm25_a,
                    f"{self.city_b} PM2.5": row.pm25_b,
                    f"{self.city_a} AQI": row.aqi_a,
                    f"{self.city_b} AQI": row.aqi_b,
                }
                for row in self.rows
            ]
        )
        frame["date"] = pd.to_datetime(frame["date"])
        return frame


def _by_date(history: Sequence[HistoricalEntry]) -> Dict[str, HistoricalEntry]:
    # Later duplicates win.
    return {entry.date: entry for entry in history}


def compare_cities(
    city_a: str,
    history_a: Sequence[HistoricalEntry],
    city_b: str,
    history_b: Sequence[HistoricalEntry],
) -> Optional[CityComparison]:
    if not history_a or not history_b:
        return None

    entries_a = _by_date(history_a)
    entries_b = _by_date(history_b)
    rows = []
    for day in sorted(set(entries_a) | set(entries_b)):
        a = entries_a.get(day)
        b = entries_b.get(day)
        rows.append(
            ComparisonRow(
                date=day,
                pm25_a=a.pm25 if a else None,
                pm25_b=b.pm25 if b else None,
                aqi_a=a.aqi_index if a else None,
                aqi_b=b.aqi_index if b else None,
            )
        )

    avg_a = math.fsum(entry.pm25 for entry in history_a) / len(history_a)
    avg_b = math.fsum(entry.pm25 for entry in history_b) / len(history_b)
    percent_diff = abs((avg_a - avg_b) / avg_b * 100) if avg_a and avg_b else 0.0
    return CityComparison(
        city_a=city_a,
        city_b=city_b,
        rows=rows,
        avg_pm25_a=avg_a,
        avg_pm25_b=avg_b,
        percent_diff=percent_diff,
        higher_city=city_a if avg_a > avg_b else city_b,
    )
