"""Access the air-quality provider's REST API."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar
from urllib.parse import quote

import requests

from ..utils.cache import QueryCache
from ..utils.config import DashboardSettings, load_settings
from .models import City, Country, HeatmapPoint, HistoricalEntry, Insights, Station

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class ProviderError(RuntimeError):
    """A provider request failed after all retries."""

    def __init__(self, message: str, resource: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.resource = resource
        self.status = status


class AirQualityClient:
    """Thin wrapper around the provider API with in-memory caching."""

    def __init__(
        self,
        settings: Optional[DashboardSettings] = None,
        cache: Optional[QueryCache] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.cache = cache or QueryCache(ttl_seconds=self.settings.cache_ttl_seconds)
        self.session = session or requests.Session()

    def _get_json(self, path: str, params: Dict[str, object], resource: str) -> Any:
        url = f"{self.settings.api_base_url}{path}"
        attempts = 1 + max(self.settings.retries, 0)
        last_error: Optional[ProviderError] = None
        for attempt in range(1, attempts + 1):
            LOGGER.debug("Requesting %s params=%s attempt=%d", url, params, attempt)
            try:
                response = self.session.get(url, params=params or None, timeout=self.settings.timeout_seconds)
                response.raise_for_status()
                return response.json()
            except requests.HTTPError as exc:
                status = getattr(exc.response, "status_code", None)
                last_error = ProviderError(f"Failed to fetch {resource}", resource, status)
                last_error.__cause__ = exc
            except (requests.RequestException, ValueError) as exc:
                last_error = ProviderError(f"Failed to fetch {resource}", resource)
                last_error.__cause__ = exc
            LOGGER.debug("Request for %s failed on attempt %d: %s", resource, attempt, last_error.__cause__)
        raise last_error

    def _fetch(
        self,
        key: tuple,
        path: str,
        params: Dict[str, object],
        resource: str,
        parse: Callable[[Any], T],
        ttl: Optional[float] = None,
    ) -> T:
        def load() -> T:
            payload = self._get_json(path, params, resource)
            try:
                return parse(payload)
            except (KeyError, TypeError, ValueError) as exc:
                raise ProviderError(f"Malformed {resource} response: {exc}", resource) from exc

        return self.cache.fetch(key, load, ttl=ttl)

    def countries(self) -> List[Country]:
        return self._fetch(
            ("countries",),
            "/api/countries",
            {},
            "countries",
            lambda payload: [Country.from_payload(item) for item in payload["countries"]],
        )

    def cities(self, country: str) -> List[City]:
        return self._fetch(
            ("cities", country),
            "/api/cities",
            {"country": country},
            "cities",
            lambda payload: [City.from_payload(item) for item in payload["cities"]],
        )

    def city_summary(self, city: str, country: str) -> City:
        return self._fetch(
            ("city-summary", city, country),
            f"/api/city/{quote(city, safe='')}/summary",
            {"country": country},
            "city summary",
            City.from_payload,
        )

    def city_history(self, city: str, country: str, days: int) -> List[HistoricalEntry]:
        # Histories are always refetched so a new time range never shows stale points.
        return self._fetch(
            ("city-history", city, country, days),
            f"/api/city/{quote(city, safe='')}/history",
            {"country": country, "days": days},
            "city history",
            lambda payload: [HistoricalEntry.from_payload(item) for item in payload["history"]],
            ttl=0,
        )

    def city_stations(self, city: str, country: str) -> List[Station]:
        return self._fetch(
            ("city-stations", city, country),
            f"/api/city/{quote(city, safe='')}/stations",
            {"country": country},
            "city stations",
            lambda payload: [Station.from_payload(item) for item in payload["stations"]],
        )

    def heatmap(self, country: Optional[str] = None) -> List[HeatmapPoint]:
        params: Dict[str, object] = {}
        if country:
            params["country"] = country
        return self._fetch(
            ("heatmap", country),
            "/api/heatmap",
            params,
            "heatmap",
            lambda payload: [HeatmapPoint.from_payload(item) for item in payload["points"]],
        )

    def insights(self, city: str, country: str) -> Insights:
        return self._fetch(
            ("insights", city, country),
            "/api/insights",
            {"country": country, "city": city},
            "insights",
            Insights.from_payload,
        )
