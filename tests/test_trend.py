"""Tests for date-aligned national trend averaging."""

import itertools

from airdashboard.services.trend import TrendPoint, align_and_average, select_trend_cities, trend_frame

from conftest import make_city, make_entry


class TestAlignAndAverage:
    def test_union_of_dates_with_gaps(self):
        a = [make_entry("2024-03-01", aqi=10), make_entry("2024-03-02", aqi=20)]
        b = [make_entry("2024-03-01", aqi=30)]
        c = []
        points = align_and_average([a, b, c])
        assert [(p.date, p.avg_aqi) for p in points] == [("2024-03-01", 20), ("2024-03-02", 20)]

    def test_empty_inputs(self):
        assert align_and_average([]) == []
        assert align_and_average([[], []]) == []

    def test_none_series_contributes_nothing(self):
        points = align_and_average([None, [make_entry("2024-03-01", aqi=7, pm25=1.0)]])
        assert points == [TrendPoint("2024-03-01", 7, 1.0)]

    def test_unsorted_input_is_aligned_by_date(self):
        a = [make_entry("2024-03-03", aqi=30), make_entry("2024-03-01", aqi=10)]
        b = [make_entry("2024-03-01", aqi=20), make_entry("2024-03-03", aqi=40)]
        points = align_and_average([a, b])
        assert [(p.date, p.avg_aqi) for p in points] == [("2024-03-01", 15), ("2024-03-03", 35)]

    def test_not_positional(self):
        # b skips the first day; index alignment would pair 03-02 with 03-01.
        a = [make_entry("2024-03-01", aqi=100), make_entry("2024-03-02", aqi=10)]
        b = [make_entry("2024-03-02", aqi=30)]
        points = align_and_average([a, b])
        assert points[0].avg_aqi == 100
        assert points[1].avg_aqi == 20

    def test_repeated_date_counts_city_once(self):
        a = [make_entry("2024-03-01", aqi=10, pm25=2.0), make_entry("2024-03-01", aqi=90, pm25=8.0)]
        b = [make_entry("2024-03-01", aqi=40, pm25=4.0)]
        points = align_and_average([a, b])
        assert points == [TrendPoint("2024-03-01", 25, 3.0)]

    def test_pm25_rounded_to_one_decimal(self):
        a = [make_entry("2024-03-01", pm25=10.0)]
        b = [make_entry("2024-03-01", pm25=10.25)]
        assert align_and_average([a, b])[0].avg_pm25 == 10.1

    def test_aqi_mean_rounds_half_up(self):
        a = [make_entry("2024-03-01", aqi=10)]
        b = [make_entry("2024-03-01", aqi=11)]
        assert align_and_average([a, b])[0].avg_aqi == 11

    def test_independent_of_series_order(self):
        days = ["2024-03-01", "2024-03-02"]
        series = [
            [make_entry(day, aqi=aqi, pm25=aqi / 3) for day in days]
            for aqi in (13, 71, 152, 39)
        ]
        expected = align_and_average(series)
        for permutation in itertools.permutations(series):
            assert align_and_average(list(permutation)) == expected
        assert expected[0].avg_aqi == 69

    def test_does_not_mutate_input(self):
        a = [make_entry("2024-03-02", aqi=1), make_entry("2024-03-01", aqi=2)]
        snapshot = list(a)
        align_and_average([a])
        assert a == snapshot


class TestTrendHelpers:
    def test_select_trend_cities_by_population(self, cities):
        assert select_trend_cities(cities, limit=2) == ["New Delhi", "Mumbai"]

    def test_select_trend_cities_default_limit(self):
        many = [make_city(f"C{i}", population=i) for i in range(8)]
        assert select_trend_cities(many) == ["C7", "C6", "C5", "C4", "C3"]

    def test_trend_frame(self):
        frame = trend_frame([TrendPoint("2024-03-01", 20, 4.5)])
        assert list(frame.columns) == ["date", "avg_aqi", "avg_pm25"]
        assert frame["date"].iloc[0].day == 1

    def test_trend_frame_empty(self):
        assert trend_frame([]).empty
