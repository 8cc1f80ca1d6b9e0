"""Tests for the country summary KPIs."""

from airdashboard.services.summary import summarize, top_polluted

from conftest import make_city


class TestSummarize:
    def test_empty_input_returns_none(self):
        assert summarize([]) is None

    def test_single_city_is_average_and_worst(self):
        stats = summarize([make_city("Solo", aqi=40, pm25=10, population=500)])
        assert stats.avg_pm25 == 10
        assert stats.worst_city == "Solo"
        assert stats.worst_city_aqi == 40
        assert stats.percent_above_who == 0
        assert stats.total_population == 500

    def test_aggregates(self, cities):
        stats = summarize(cities)
        # (90 + 30 + 5 + 15) / 4 = 35
        assert stats.avg_pm25 == 35
        assert stats.worst_city == "New Delhi"
        assert stats.worst_city_aqi == 180
        # 15.0 is not above the guideline
        assert stats.percent_above_who == 50
        assert stats.total_population == 53_470_000

    def test_worst_city_tie_keeps_first(self):
        stats = summarize([make_city("A", aqi=100), make_city("B", aqi=150), make_city("C", aqi=150)])
        assert stats.worst_city == "B"

    def test_rounding_halves_up(self):
        stats = summarize([make_city("A", pm25=2.0), make_city("B", pm25=3.0)])
        assert stats.avg_pm25 == 3

    def test_percent_rounded(self):
        stats = summarize([make_city("A", pm25=20), make_city("B", pm25=1), make_city("C", pm25=1)])
        assert stats.percent_above_who == 33

    def test_does_not_mutate_input(self, cities):
        before = list(cities)
        summarize(cities)
        assert cities == before


class TestTopPolluted:
    def test_orders_by_aqi_descending(self, cities):
        assert [city.city for city in top_polluted(cities)] == ["New Delhi", "Mumbai", "NEWARK", "Shimla"]

    def test_limit(self, cities):
        assert len(top_polluted(cities, limit=2)) == 2

    def test_empty(self):
        assert top_polluted([]) == []
