"""Fetch a sample of city histories in parallel and build the national trend."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Generic, Hashable, List, Optional, Protocol, Sequence, TypeVar

from ..data.models import City, HistoricalEntry
from .trend import TrendPoint, align_and_average, select_trend_cities

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class HistorySource(Protocol):
    def city_history(self, city: str, country: str, days: int) -> List[HistoricalEntry]:
        ...


def fetch_histories(
    client: HistorySource,
    cities: Sequence[str],
    country: str,
    days: int,
    max_workers: int = 5,
) -> List[List[HistoricalEntry]]:
    """Request every city's history concurrently and wait for all of them.

    A city whose request fails is logged and contributes an empty series.
    The result lines up with ``cities``.
    """
    if not cities:
        return []

    def load(city: str) -> List[HistoricalEntry]:
        try:
            return client.city_history(city, country, days)
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("History for %s/%s unavailable, skipping: %s", country, city, exc)
            return []

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(cities)))) as executor:
        return list(executor.map(load, cities))


def national_trend(
    client: HistorySource,
    cities: Sequence[City],
    country: str,
    days: int,
    limit: int = 5,
) -> List[TrendPoint]:
    sample = select_trend_cities(cities, limit=limit)
    LOGGER.debug("National trend for %s over %d days from %s", country, days, sample)
    histories = fetch_histories(client, sample, country, days)
    return align_and_average(histories)


def trend_request_key(country: str, cities: Sequence[str], days: int) -> tuple:
    return (country, tuple(cities), days)


@dataclass(frozen=True)
class Ticket:
    key: Hashable
    sequence: int


class LatestRequestGate(Generic[T]):
    """Drop results of requests that were superseded by a newer one."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sequence = 0
        self._latest: Optional[Ticket] = None

    def begin(self, key: Hashable) -> Ticket:
        with self._lock:
            self._sequence += 1
            ticket = Ticket(key, self._sequence)
            self._latest = ticket
            return ticket

    def accept(self, ticket: Ticket, result: T) -> Optional[T]:
        with self._lock:
            if ticket != self._latest:
                LOGGER.debug("Discarding stale result for %s", ticket.key)
                return None
            return result


class NationalTrendView:
    """Hold the last national trend shown and rebuild it only when its request changes.

    Streamlit reruns the page on every widget interaction; a rerun with the
    same country, sample cities and day count reuses the previous points
    instead of refetching every history.
    """

    def __init__(self, limit: int = 5) -> None:
        self.limit = limit
        self.gate: LatestRequestGate[List[TrendPoint]] = LatestRequestGate()
        self._key: Optional[Hashable] = None
        self._points: Optional[List[TrendPoint]] = None

    def points(
        self, client: HistorySource, cities: Sequence[City], country: str, days: int
    ) -> Optional[List[TrendPoint]]:
        key = trend_request_key(country, select_trend_cities(cities, limit=self.limit), days)
        if self._points is not None and key == self._key:
            LOGGER.debug("Reusing national trend for %s", key)
            return self._points
        ticket = self.gate.begin(key)
        points = self.gate.accept(ticket, national_trend(client, cities, country, days, limit=self.limit))
        if points is not None:
            self._key, self._points = key, points
        return points
