"""Record types for provider resources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

POLLUTANT_FIELDS = ("pm25", "pm10", "no2", "o3", "co", "so2")


def _number(payload: Mapping[str, Any], key: str, default: float = 0.0) -> float:
    value = payload.get(key)
    if value is None:
        return default
    return float(value)


def _pollutants(payload: Mapping[str, Any]) -> Dict[str, float]:
    return {field: _number(payload, field) for field in POLLUTANT_FIELDS}


@dataclass(frozen=True)
class Country:
    code: str
    name: str
    city_count: int
    average_aqi: float
    worst_city: str
    worst_city_aqi: int

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Country":
        return cls(
            code=str(payload["code"]),
            name=str(payload["name"]),
            city_count=int(payload.get("cityCount") or 0),
            average_aqi=_number(payload, "averageAqi"),
            worst_city=str(payload.get("worstCity") or ""),
            worst_city_aqi=int(payload.get("worstCityAqi") or 0),
        )


@dataclass(frozen=True)
class City:
    city: str
    aqi_index: int
    aqi_category: str
    pm25: float
    pm10: float
    no2: float
    o3: float
    co: float
    so2: float
    population: int
    lat: float
    lon: float
    last_updated: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "City":
        return cls(
            city=str(payload["city"]),
            aqi_index=int(payload["aqiIndex"]),
            aqi_category=str(payload.get("aqiCategory") or ""),
            population=int(payload.get("population") or 0),
            lat=_number(payload, "lat"),
            lon=_number(payload, "lon"),
            last_updated=str(payload.get("lastUpdated") or ""),
            **_pollutants(payload),
        )


@dataclass(frozen=True)
class HistoricalEntry:
    date: str
    pm25: float
    pm10: float
    no2: float
    o3: float
    co: float
    so2: float
    aqi_index: int

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "HistoricalEntry":
        return cls(
            date=str(payload["date"]),
            aqi_index=int(payload["aqiIndex"]),
            **_pollutants(payload),
        )


@dataclass(frozen=True)
class Station:
    station_name: str
    latitude: float
    longitude: float
    pm25: float
    pm10: float
    no2: float
    o3: float
    co: float
    so2: float
    aqi_index: int
    last_updated: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Station":
        return cls(
            station_name=str(payload["stationName"]),
            latitude=_number(payload, "latitude"),
            longitude=_number(payload, "longitude"),
            aqi_index=int(payload["aqiIndex"]),
            last_updated=str(payload.get("lastUpdated") or ""),
            **_pollutants(payload),
        )


@dataclass(frozen=True)
class HeatmapPoint:
    city: str
    country: str
    latitude: float
    longitude: float
    pm25: float
    aqi_index: int
    aqi_category: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "HeatmapPoint":
        return cls(
            city=str(payload["city"]),
            country=str(payload.get("country") or ""),
            latitude=_number(payload, "latitude"),
            longitude=_number(payload, "longitude"),
            pm25=_number(payload, "pm25"),
            aqi_index=int(payload["aqiIndex"]),
            aqi_category=str(payload.get("aqiCategory") or ""),
        )


@dataclass(frozen=True)
class ActivityInsight:
    safe: bool
    recommendation: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ActivityInsight":
        return cls(safe=bool(payload["safe"]), recommendation=str(payload.get("recommendation") or ""))


HEALTH_GROUPS = ("general", "sensitive", "children", "elderly", "asthma")
ACTIVITIES = ("walking", "running", "outdoor_play", "cycling")


@dataclass(frozen=True)
class Insights:
    city: str
    country: str
    aqi: int
    category: str
    health: Dict[str, str]
    activities: Dict[str, ActivityInsight]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Insights":
        health = payload.get("health") or {}
        activities = payload.get("activities") or {}
        missing = [name for name in ACTIVITIES if name not in activities]
        if missing:
            raise ValueError(f"Insights payload missing activities: {missing}")
        return cls(
            city=str(payload["city"]),
            country=str(payload.get("country") or ""),
            aqi=int(payload["aqi"]),
            category=str(payload.get("category") or ""),
            health={group: str(health.get(group) or "") for group in HEALTH_GROUPS},
            activities={name: ActivityInsight.from_payload(activities[name]) for name in ACTIVITIES},
        )
