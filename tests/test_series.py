"""Tests for the actual/forecast series classifier."""

import pytest

from analysis.series import boundary_index, classify_series, year_keys
from schemas.market_schema import ChartPoint, MarketRecord


class TestYearKeys:

    def test_only_four_digit_keys_sorted(self):
        data = {"2025": 3, "y-axis_units": "億円", "2019": 1, "123": 9, "20200": 9, "2021": 2}
        assert year_keys(data) == ["2019", "2021", "2025"]

    def test_accepts_market_record(self, sample_record):
        assert year_keys(sample_record) == [str(y) for y in range(2019, 2028)]

    def test_empty_record(self):
        assert year_keys({}) == []


class TestBoundaryIndex:

    def test_found(self):
        assert boundary_index(["2021", "2022", "2023", "2024"]) == 2

    def test_missing_boundary_is_minus_one(self):
        assert boundary_index(["2024", "2025"]) == -1

    def test_custom_boundary(self):
        assert boundary_index(["2021", "2022"], "2021") == 0


class TestClassifySeries:

    def test_split_at_2023(self, sample_record):
        points = classify_series(sample_record)

        for p in points:
            if p.year <= "2023":
                assert p.actual == sample_record[p.year]
                assert p.forecast is None
            else:
                assert p.actual is None
                assert p.forecast == sample_record[p.year]

    def test_single_boundary_year(self):
        assert classify_series({"2023": 100}) == [ChartPoint(year="2023", actual=100, forecast=None)]

    def test_missing_boundary_makes_everything_forecast(self):
        points = classify_series({"2024": 10, "2025": 20, "2022": 5})

        assert [p.year for p in points] == ["2022", "2024", "2025"]
        assert all(p.actual is None for p in points)
        assert [p.forecast for p in points] == [5, 10, 20]

    def test_full_width_digits_are_not_years(self):
        points = classify_series({"2023": 1, "２０２２": 5})
        assert points == [ChartPoint(year="2023", actual=1, forecast=None)]

    def test_trailing_newline_key_is_not_a_year(self):
        assert year_keys({"2023": 1, "2024\n": 2}) == ["2023"]
        assert [p.year for p in classify_series({"2023": 1, "2024\n": 2})] == ["2023"]

    def test_gaps_are_tolerated(self):
        points = classify_series({"2010": 1, "2023": 2, "2030": 3})
        assert [(p.year, p.actual, p.forecast) for p in points] == [
            ("2010", 1, None),
            ("2023", 2, None),
            ("2030", None, 3),
        ]

    def test_values_pass_through_unchanged(self):
        points = classify_series({"2023": "n/a", "2024": None, "2022": 1.5})

        assert points[0].actual == 1.5
        assert points[1].actual == "n/a"
        assert points[2].actual is None and points[2].forecast is None

    def test_metadata_keys_ignored(self, sample_payload):
        points = classify_series(sample_payload)
        assert len(points) == 9

    def test_idempotent(self, sample_record):
        assert classify_series(sample_record) == classify_series(sample_record)

    def test_does_not_mutate_input(self, sample_payload):
        before = dict(sample_payload)
        classify_series(sample_payload)
        assert sample_payload == before

    @pytest.mark.parametrize("boundary", ["2020", "2026"])
    def test_configurable_boundary(self, sample_record, boundary):
        points = classify_series(sample_record, boundary)
        actual_years = [p.year for p in points if p.actual is not None]
        assert actual_years[-1] == boundary

    def test_empty_record(self):
        assert classify_series(MarketRecord()) == []
