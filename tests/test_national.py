"""Tests for the parallel national trend fetch."""

import threading

from airdashboard.data.provider import ProviderError
from airdashboard.services.national import (
    LatestRequestGate,
    NationalTrendView,
    fetch_histories,
    national_trend,
    trend_request_key,
)
from airdashboard.services.trend import TrendPoint

from conftest import make_city, make_entry


class FakeHistoryClient:
    def __init__(self, histories, failing=()):
        self.histories = histories
        self.failing = set(failing)
        self.calls = []
        self._lock = threading.Lock()

    def city_history(self, city, country, days):
        with self._lock:
            self.calls.append((city, country, days))
        if city in self.failing:
            raise ProviderError("Failed to fetch city history", "city history", 500)
        return self.histories.get(city, [])


class TestFetchHistories:
    def test_results_follow_city_order(self):
        client = FakeHistoryClient({"A": [make_entry("2024-03-01", aqi=1)], "B": [make_entry("2024-03-01", aqi=2)]})
        histories = fetch_histories(client, ["B", "A"], "IN", 7)
        assert [h[0].aqi_index for h in histories] == [2, 1]
        assert sorted(client.calls) == [("A", "IN", 7), ("B", "IN", 7)]

    def test_failed_city_degrades_to_empty(self, caplog):
        client = FakeHistoryClient({"A": [make_entry("2024-03-01", aqi=10)]}, failing={"B"})
        with caplog.at_level("WARNING"):
            histories = fetch_histories(client, ["A", "B"], "IN", 7)
        assert histories[1] == []
        assert "B" in caplog.text

    def test_no_cities(self):
        assert fetch_histories(FakeHistoryClient({}), [], "IN", 7) == []


class TestNationalTrend:
    def test_samples_most_populous_cities(self):
        cities = [make_city(f"C{i}", population=i * 100) for i in range(7)]
        histories = {f"C{i}": [make_entry("2024-03-01", aqi=i * 10, pm25=float(i))] for i in range(7)}
        client = FakeHistoryClient(histories)
        points = national_trend(client, cities, "IN", 30)
        assert {call[0] for call in client.calls} == {"C6", "C5", "C4", "C3", "C2"}
        # (60 + 50 + 40 + 30 + 20) / 5
        assert points[0].avg_aqi == 40
        assert points[0].avg_pm25 == 4.0

    def test_failure_does_not_abort(self):
        cities = [make_city("A", population=2), make_city("B", population=1)]
        client = FakeHistoryClient(
            {"A": [make_entry("2024-03-01", aqi=50)], "B": [make_entry("2024-03-01", aqi=150)]},
            failing={"B"},
        )
        points = national_trend(client, cities, "IN", 7)
        assert [(p.date, p.avg_aqi) for p in points] == [("2024-03-01", 50)]

    def test_no_cities_no_points(self):
        assert national_trend(FakeHistoryClient({}), [], "IN", 7) == []


class TestLatestRequestGate:
    def test_latest_result_accepted(self):
        gate = LatestRequestGate()
        ticket = gate.begin(trend_request_key("IN", ["A"], 7))
        assert gate.accept(ticket, ["result"]) == ["result"]

    def test_superseded_result_discarded(self):
        gate = LatestRequestGate()
        old = gate.begin(trend_request_key("IN", ["A"], 7))
        new = gate.begin(trend_request_key("IN", ["A"], 30))
        assert gate.accept(old, "stale") is None
        assert gate.accept(new, "fresh") == "fresh"

    def test_same_parameters_reissued_still_supersede(self):
        gate = LatestRequestGate()
        key = trend_request_key("IN", ["A", "B"], 7)
        first = gate.begin(key)
        gate.begin(key)
        assert gate.accept(first, "old") is None

    def test_request_key(self):
        assert trend_request_key("IN", ["A", "B"], 7) == ("IN", ("A", "B"), 7)


class TestNationalTrendView:
    def setup_method(self):
        self.cities = [make_city("A", population=2), make_city("B", population=1)]
        self.client = FakeHistoryClient(
            {"A": [make_entry("2024-03-01", aqi=20)], "B": [make_entry("2024-03-01", aqi=40)]}
        )

    def test_repeat_request_reuses_points(self):
        view = NationalTrendView()
        first = view.points(self.client, self.cities, "IN", 7)
        second = view.points(self.client, self.cities, "IN", 7)
        assert second == first == [TrendPoint("2024-03-01", 30, 0.0)]
        assert len(self.client.calls) == 2

    def test_new_day_count_refetches(self):
        view = NationalTrendView()
        view.points(self.client, self.cities, "IN", 7)
        view.points(self.client, self.cities, "IN", 30)
        assert [call[2] for call in self.client.calls].count(30) == 2

    def test_new_city_sample_refetches(self):
        view = NationalTrendView()
        view.points(self.client, self.cities, "IN", 7)
        view.points(self.client, self.cities + [make_city("C", population=3)], "IN", 7)
        assert len(self.client.calls) == 5
