"""Date utilities."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum


class TimeRange(str, Enum):
    TODAY = "today"
    LAST_7_DAYS = "7days"
    LAST_30_DAYS = "30days"

    @property
    def days(self) -> int:
        return {"today": 1, "7days": 7, "30days": 30}[self.value]

    @property
    def label(self) -> str:
        return {"today": "Today", "7days": "7 Days", "30days": "30 Days"}[self.value]


def parse_ymd(value: str) -> date:
    return datetime.strptime(value[:10], "%Y-%m-%d").date()


def format_date(value: str | date | datetime) -> str:
    """Short axis label such as ``Mar 5``."""
    if isinstance(value, str):
        value = parse_ymd(value)
    return f"{value.strftime('%b')} {value.day}"
