"""Tests for Settings defaults and environment overrides."""

from __future__ import annotations

import pytest

from src.config import Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in (
            "HIGH_CONFIDENCE_THRESHOLD",
            "TOP_PATTERNS_LIMIT",
            "WEEKLY_STATS_WINDOW",
            "PROCESSING_DELAY_SECONDS",
            "LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)

        cfg = Settings(_env_file=None)  # type: ignore[call-arg]
        assert cfg.high_confidence_threshold == 0.7
        assert cfg.top_patterns_limit == 8
        assert cfg.weekly_stats_window == 8
        assert cfg.processing_delay_seconds == 0.0
        assert cfg.log_level == "INFO"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOP_PATTERNS_LIMIT", "5")
        monkeypatch.setenv("HIGH_CONFIDENCE_THRESHOLD", "0.8")

        cfg = Settings(_env_file=None)  # type: ignore[call-arg]
        assert cfg.top_patterns_limit == 5
        assert cfg.high_confidence_threshold == 0.8

    def test_invalid_value_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WEEKLY_STATS_WINDOW", "many")
        with pytest.raises(ValueError):
            Settings(_env_file=None)  # type: ignore[call-arg]

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()
