"""Tests for shared common modules: config, logging."""

import io
import logging

import pytest
import yaml

from src.common.config import (
    CacheSettings,
    Settings,
    SourceSettings,
    SyntheticSettings,
    get_data_gov_api_key,
)
from src.common.logging import setup_logging


class TestSettingsDefaults:
    def test_cache_defaults_to_one_hour(self):
        assert CacheSettings().ttl_seconds == 3600
        assert CacheSettings().max_entries > 0

    def test_synthetic_base_prices(self):
        cfg = SyntheticSettings()
        assert cfg.base_prices["spices"] == 150
        assert cfg.base_prices["textiles"] == 2000
        assert cfg.default_base_price == 500
        assert cfg.min_observations == 7
        assert cfg.fallback_observations == 30

    def test_forecast_defaults(self):
        cfg = Settings().forecast
        assert cfg.history_days == 90
        assert cfg.season_length == 7
        assert cfg.festival_months == [10, 11]

    def test_source_timeout_is_bounded(self):
        cfg = SourceSettings()
        assert 0 < cfg.request_timeout <= 10


class TestSettingsLoad:
    def test_missing_file_gives_defaults(self, tmp_path):
        loaded = Settings.load(tmp_path / "nope.yaml")
        assert loaded == Settings()

    def test_yaml_overrides(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            yaml.dump({
                "cache": {"ttl_seconds": 60},
                "forecast": {"history_days": 45, "festival_months": [12]},
            }),
            encoding="utf-8",
        )
        loaded = Settings.load(path)
        assert loaded.cache.ttl_seconds == 60
        assert loaded.forecast.history_days == 45
        assert loaded.forecast.festival_months == [12]
        # untouched sections keep defaults
        assert loaded.synthetic.base_prices["pottery"] == 300

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("", encoding="utf-8")
        assert Settings.load(path) == Settings()

    def test_invalid_value_rejected(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(yaml.dump({"cache": {"ttl_seconds": "soon"}}), encoding="utf-8")
        with pytest.raises(Exception):
            Settings.load(path)


class TestEnvironment:
    def test_agmarknet_flag_from_env(self, monkeypatch):
        monkeypatch.setenv("AGMARKNET_ENABLED", "true")
        assert SourceSettings().agmarknet_enabled is True

    def test_agmarknet_flag_off(self, monkeypatch):
        monkeypatch.setenv("AGMARKNET_ENABLED", "no")
        assert SourceSettings().agmarknet_enabled is False

    def test_api_key(self, monkeypatch):
        monkeypatch.setenv("DATA_GOV_IN_API_KEY", "  abc123 ")
        assert get_data_gov_api_key() == "abc123"

    def test_api_key_missing(self, monkeypatch):
        monkeypatch.delenv("DATA_GOV_IN_API_KEY", raising=False)
        assert get_data_gov_api_key() == ""


class TestLogging:
    def test_setup_logging_is_idempotent(self):
        logger = setup_logging(level=logging.DEBUG, module_name="test_forecast_logger")
        again = setup_logging(module_name="test_forecast_logger")
        assert logger is again
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_later_call_can_change_level(self):
        logger = setup_logging(module_name="test_forecast_level")
        assert logger.level == logging.INFO
        setup_logging(level=logging.WARNING, module_name="test_forecast_level")
        assert logger.level == logging.WARNING
        assert logger.handlers[0].level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_writes_to_given_stream(self):
        stream = io.StringIO()
        logger = setup_logging(module_name="test_forecast_stream", stream=stream)
        logger.info("fetched %d observations", 12)
        line = stream.getvalue()
        assert "[INFO] test_forecast_stream: fetched 12 observations" in line

    def test_defaults_to_stderr(self, capsys):
        logger = setup_logging(module_name="test_forecast_stderr")
        logger.warning("feed unavailable")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "feed unavailable" in captured.err

    def test_quiets_http_library_debug(self):
        setup_logging(level=logging.DEBUG, module_name="test_forecast_http")
        assert logging.getLogger("urllib3").level >= logging.WARNING
