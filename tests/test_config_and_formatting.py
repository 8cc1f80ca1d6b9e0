"""Tests for settings loading and display helpers."""

import pytest

from airdashboard.utils.config import DEFAULT_API_BASE_URL, load_settings
from airdashboard.utils.dates import TimeRange, format_date
from airdashboard.utils.formatting import format_number, round_half_up


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("AIRDASH_API_BASE_URL", "AIRDASH_RETRIES", "AIRDASH_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:
    def test_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "missing.env")
        assert settings.api_base_url == DEFAULT_API_BASE_URL
        assert settings.retries == 1
        assert settings.cache_ttl_seconds == 300.0

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("AIRDASH_API_BASE_URL=http://api.example/\nAIRDASH_RETRIES=3\n", encoding="utf-8")
        settings = load_settings(env_file)
        assert settings.api_base_url == "http://api.example"
        assert settings.retries == 3

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("AIRDASH_RETRIES=3\n", encoding="utf-8")
        monkeypatch.setenv("AIRDASH_RETRIES", "0")
        assert load_settings(env_file).retries == 0

    def test_invalid_number(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AIRDASH_TIMEOUT_SECONDS", "soon")
        with pytest.raises(RuntimeError, match="Invalid dashboard configuration"):
            load_settings(tmp_path / "missing.env")


class TestFormatting:
    @pytest.mark.parametrize("value, expected", [(0.5, 1), (1.5, 2), (2.5, 3), (2.49, 2)])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_round_half_up_one_decimal(self):
        assert round_half_up(4.25, 1) == 4.3

    @pytest.mark.parametrize(
        "value, expected",
        [(1_500_000, "1.5M"), (2_300, "2.3K"), (999, "999"), (0, "0")],
    )
    def test_format_number(self, value, expected):
        assert format_number(value) == expected

    def test_format_date(self):
        assert format_date("2024-03-05") == "Mar 5"

    def test_time_range_days(self):
        assert [r.days for r in TimeRange] == [1, 7, 30]
        assert TimeRange("7days").label == "7 Days"
