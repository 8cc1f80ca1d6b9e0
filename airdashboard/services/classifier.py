"""AQI and pollutant health categorization."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Sequence, Tuple

import pandas as pd

INF = float("inf")


class AqiCategory(str, Enum):
    GOOD = "Good"
    MODERATE = "Moderate"
    UNHEALTHY_SENSITIVE = "Unhealthy for Sensitive Groups"
    UNHEALTHY = "Unhealthy"
    VERY_UNHEALTHY = "Very Unhealthy"
    HAZARDOUS = "Hazardous"

    @property
    def label(self) -> str:
        return self.value


CATEGORY_ORDER: Tuple[AqiCategory, ...] = tuple(AqiCategory)

CATEGORY_COLORS: Dict[AqiCategory, str] = {
    AqiCategory.GOOD: "#10b981",
    AqiCategory.MODERATE: "#fbbf24",
    AqiCategory.UNHEALTHY_SENSITIVE: "#f97316",
    AqiCategory.UNHEALTHY: "#ef4444",
    AqiCategory.VERY_UNHEALTHY: "#991b1b",
    AqiCategory.HAZARDOUS: "#7f1d1d",
}

HEALTH_MESSAGES: Dict[AqiCategory, str] = {
    AqiCategory.GOOD: "Air quality is excellent. Perfect conditions for outdoor activities.",
    AqiCategory.MODERATE: "Air quality is acceptable for most people.",
    AqiCategory.UNHEALTHY_SENSITIVE: (
        "Air quality is unhealthy for sensitive groups. People with respiratory conditions "
        "should limit outdoor exposure."
    ),
    AqiCategory.UNHEALTHY: (
        "Air quality is unhealthy. Everyone may experience health effects. Sensitive groups "
        "should avoid outdoor activities."
    ),
    AqiCategory.VERY_UNHEALTHY: (
        "Air quality is very unhealthy. Health alert: everyone may experience serious "
        "effects. Stay indoors if possible."
    ),
    AqiCategory.HAZARDOUS: (
        "Hazardous air quality. Health warnings of emergency conditions. Everyone should "
        "avoid outdoor exposure."
    ),
}


@dataclass(frozen=True)
class Band:
    upper: float
    category: AqiCategory
    display_range: str


AQI_BANDS: Tuple[Band, ...] = (
    Band(50, AqiCategory.GOOD, "0-50"),
    Band(100, AqiCategory.MODERATE, "51-100"),
    Band(150, AqiCategory.UNHEALTHY_SENSITIVE, "101-150"),
    Band(200, AqiCategory.UNHEALTHY, "151-200"),
    Band(300, AqiCategory.VERY_UNHEALTHY, "201-300"),
    Band(INF, AqiCategory.HAZARDOUS, "301+"),
)


class Pollutant(str, Enum):
    PM25 = "pm25"
    PM10 = "pm10"
    NO2 = "no2"
    O3 = "o3"
    CO = "co"
    SO2 = "so2"

    @property
    def label(self) -> str:
        return _POLLUTANT_LABELS[self]

    @property
    def unit(self) -> str:
        return _POLLUTANT_UNITS[self]

    @classmethod
    def from_key(cls, key: str) -> "Pollutant":
        """Accept ``pm25``, ``PM2.5`` and friends in any case."""
        normalized = key.strip().lower().replace(".", "")
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unsupported pollutant {key}") from None


_POLLUTANT_LABELS = {
    Pollutant.PM25: "PM2.5",
    Pollutant.PM10: "PM10",
    Pollutant.NO2: "NO2",
    Pollutant.O3: "O3",
    Pollutant.CO: "CO",
    Pollutant.SO2: "SO2",
}

_POLLUTANT_UNITS = {
    Pollutant.PM25: "µg/m³",
    Pollutant.PM10: "µg/m³",
    Pollutant.NO2: "ppb",
    Pollutant.O3: "ppb",
    Pollutant.CO: "ppm",
    Pollutant.SO2: "ppb",
}


def _bands(rows: Sequence[Tuple[float, str]]) -> Tuple[Band, ...]:
    return tuple(Band(upper, category, text) for (upper, text), category in zip(rows, CATEGORY_ORDER))


POLLUTANT_BANDS: Dict[Pollutant, Tuple[Band, ...]] = {
    Pollutant.PM25: _bands(
        [(12, "0-12"), (35.4, "12.1-35.4"), (55.4, "35.5-55.4"), (150.4, "55.5-150.4"), (250.4, "150.5-250.4"), (INF, "250.5+")]
    ),
    Pollutant.PM10: _bands(
        [(54, "0-54"), (154, "55-154"), (254, "155-254"), (354, "255-354"), (424, "355-424"), (INF, "425+")]
    ),
    Pollutant.NO2: _bands(
        [(53, "0-53"), (100, "54-100"), (360, "101-360"), (649, "361-649"), (1249, "650-1249"), (INF, "1250+")]
    ),
    Pollutant.O3: _bands(
        [(54, "0-54"), (70, "55-70"), (85, "71-85"), (105, "86-105"), (200, "106-200"), (INF, "201+")]
    ),
    Pollutant.CO: _bands(
        [(4.4, "0-4.4"), (9.4, "4.5-9.4"), (12.4, "9.5-12.4"), (15.4, "12.5-15.4"), (30.4, "15.5-30.4"), (INF, "30.5+")]
    ),
    Pollutant.SO2: _bands(
        [(35, "0-35"), (75, "36-75"), (185, "76-185"), (304, "186-304"), (604, "305-604"), (INF, "605+")]
    ),
}


@dataclass(frozen=True)
class AqiClassification:
    category: AqiCategory
    color: str


@dataclass(frozen=True)
class PollutantLevel:
    pollutant: Pollutant
    level: str
    category: AqiCategory
    unit: str


def _lookup(bands: Sequence[Band], value: float) -> Band:
    for band in bands:
        if value <= band.upper:
            return band
    return bands[-1]


def classify(aqi: float) -> AqiClassification:
    category = _lookup(AQI_BANDS, aqi).category
    return AqiClassification(category=category, color=CATEGORY_COLORS[category])


def aqi_color(aqi: float) -> str:
    return classify(aqi).color


def health_message(aqi: float) -> str:
    return HEALTH_MESSAGES[classify(aqi).category]


def classify_pollutant(kind: Pollutant | str, value: float) -> PollutantLevel:
    pollutant = kind if isinstance(kind, Pollutant) else Pollutant.from_key(kind)
    band = _lookup(POLLUTANT_BANDS[pollutant], value)
    return PollutantLevel(
        pollutant=pollutant,
        level=band.category.label,
        category=band.category,
        unit=pollutant.unit,
    )


@dataclass(frozen=True)
class PollutantInfo:
    name: str
    description: str
    why_it_matters: str
    ranges: List[Tuple[str, str]]


_POLLUTANT_TEXT: Dict[str, Tuple[str, str, str]] = {
    "pm25": (
        "PM2.5 (Fine Particulate Matter)",
        "Particles smaller than 2.5 micrometers in diameter. These tiny particles can come from "
        "vehicle exhaust, industrial emissions, and wildfires.",
        "PM2.5 can penetrate deep into the lungs and even enter the bloodstream, causing "
        "respiratory and cardiovascular problems.",
    ),
    "pm10": (
        "PM10 (Coarse Particulate Matter)",
        "Particles between 2.5 and 10 micrometers in diameter. Sources include dust, pollen, and mold.",
        "PM10 can irritate airways, cause coughing and difficulty breathing, and aggravate asthma.",
    ),
    "no2": (
        "NO2 (Nitrogen Dioxide)",
        "A reddish-brown gas primarily from vehicle emissions and power plants.",
        "NO2 can irritate airways and worsen asthma. Long-term exposure can decrease lung function.",
    ),
    "o3": (
        "O3 (Ozone)",
        "Ground-level ozone forms when pollutants from cars and industry react with sunlight.",
        "Ozone can trigger asthma attacks, reduce lung function, and cause throat irritation and coughing.",
    ),
    "co": (
        "CO (Carbon Monoxide)",
        "A colorless, odorless gas from incomplete combustion of fossil fuels.",
        "CO reduces oxygen delivery to the body's organs. High levels can cause dizziness, "
        "confusion, and death.",
    ),
    "so2": (
        "SO2 (Sulfur Dioxide)",
        "A gas produced by burning fossil fuels and during volcanic eruptions.",
        "SO2 can cause breathing difficulties, especially for people with asthma.",
    ),
    "aqi": (
        "AQI (Air Quality Index)",
        "A unified index that represents overall air quality based on multiple pollutants.",
        "The AQI provides a simple way to understand air quality and its health implications.",
    ),
}

_AQI_RANGE_NOTES: Dict[AqiCategory, str] = {
    AqiCategory.GOOD: "Good - Air quality is satisfactory",
    AqiCategory.MODERATE: "Moderate - Acceptable for most people",
    AqiCategory.UNHEALTHY_SENSITIVE: "Unhealthy for Sensitive Groups",
    AqiCategory.UNHEALTHY: "Unhealthy - Everyone may experience effects",
    AqiCategory.VERY_UNHEALTHY: "Very Unhealthy - Health alert",
    AqiCategory.HAZARDOUS: "Hazardous - Emergency conditions",
}


def describe_pollutant(key: str) -> PollutantInfo:
    """Tooltip content for a pollutant key or ``aqi``."""
    if key == "aqi":
        name, description, why = _POLLUTANT_TEXT["aqi"]
        ranges = [(band.display_range, _AQI_RANGE_NOTES[band.category]) for band in AQI_BANDS]
        return PollutantInfo(name, description, why, ranges)
    try:
        pollutant = Pollutant.from_key(key)
    except ValueError:
        return PollutantInfo(name=key, description="", why_it_matters="", ranges=[])
    name, description, why = _POLLUTANT_TEXT[pollutant.value]
    ranges = [
        (f"{band.display_range} {pollutant.unit}", band.category.label)
        for band in POLLUTANT_BANDS[pollutant]
    ]
    return PollutantInfo(name, description, why, ranges)


def pollutant_ranges_frame() -> pd.DataFrame:
    """All breakpoint tiers, one row per pollutant and category."""
    rows = []
    for band in AQI_BANDS:
        rows.append({"pollutant": "AQI", "unit": "", "category": band.category.label, "range": band.display_range})
    for pollutant, bands in POLLUTANT_BANDS.items():
        for band in bands:
            rows.append(
                {
                    "pollutant": pollutant.label,
                    "unit": pollutant.unit,
                    "category": band.category.label,
                    "range": band.display_range,
                }
            )
    return pd.DataFrame(rows, columns=["pollutant", "unit", "category", "range"])
