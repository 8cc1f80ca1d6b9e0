import pytest

from airdashboard.data.models import City, HistoricalEntry


def make_city(name="Testville", aqi=40, pm25=10.0, population=1000, **overrides):
    values = dict(
        city=name,
        aqi_index=aqi,
        aqi_category="",
        pm25=pm25,
        pm10=20.0,
        no2=5.0,
        o3=30.0,
        co=0.4,
        so2=2.0,
        population=population,
        lat=0.0,
        lon=0.0,
        last_updated="2024-03-01T00:00:00Z",
    )
    values.update(overrides)
    return City(**values)


def make_entry(date, aqi=0, pm25=0.0):
    return HistoricalEntry(date=date, pm25=pm25, pm10=0.0, no2=0.0, o3=0.0, co=0.0, so2=0.0, aqi_index=aqi)


@pytest.fixture
def cities():
    return [
        make_city("New Delhi", aqi=180, pm25=90.0, population=32_000_000),
        make_city("Mumbai", aqi=95, pm25=30.0, population=21_000_000),
        make_city("Shimla", aqi=20, pm25=5.0, population=170_000),
        make_city("NEWARK", aqi=60, pm25=15.0, population=300_000),
    ]
