"""Tests for the forecaster CLI."""

from __future__ import annotations

import json
import logging
from unittest.mock import patch

import pytest

from src.forecast_engine.forecaster import main as cli
from src.forecast_engine.price_source.base import StaticPriceSource
from src.forecast_engine.service import MarketForecastService


@pytest.fixture
def patched_service(app_settings, cache, make_obs, ramp_prices):
    source = StaticPriceSource({"spices": make_obs("spices", ramp_prices)})
    service = MarketForecastService(source, cache=cache, app_settings=app_settings)
    with patch.object(
        cli.MarketForecastService, "from_settings", return_value=service
    ) as factory:
        yield factory
    # main() attaches a handler bound to the captured stderr
    logger = logging.getLogger("src")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


class TestMain:
    def test_forecast_printed_as_json(self, patched_service, capsys):
        assert cli.main(["--category", "spices", "--horizon", "5"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["category"] == "spices"
        assert len(payload["predictions"]) == 5
        assert payload["simulated"] is False
        patched_service.assert_called_once()

    def test_history_only_written_to_file(self, patched_service, tmp_path, capsys):
        out = tmp_path / "reports" / "spices_history.json"

        code = cli.main([
            "--category", "spices",
            "--history-only",
            "--history-days", "30",
            "--output", str(out),
        ])

        assert code == 0
        assert capsys.readouterr().out == ""
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert set(payload) == {"dates", "prices", "trend", "changePercent", "source"}
        assert len(payload["prices"]) == 30
        assert payload["source"] == "market"

    def test_category_is_required(self, patched_service):
        with pytest.raises(SystemExit):
            cli.main(["--horizon", "7"])
        patched_service.assert_not_called()
