"""CLI entry point for the forecaster module.

Usage:
    python -m src.forecast_engine.forecaster.main --category spices --horizon 7
    python -m src.forecast_engine.forecaster.main --category textiles \
        --history-only --history-days 60 --output data/textiles_history.json
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from src.common.config import settings
from src.common.logging import setup_logging

from ..service import MarketForecastService

logger = logging.getLogger("src.forecast_engine.forecaster")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Market price forecaster")
    parser.add_argument(
        "--category",
        required=True,
        help="Product category (e.g., 'spices', 'textiles')",
    )
    parser.add_argument(
        "--horizon",
        type=int,
        default=30,
        help="Days to forecast (default: 30)",
    )
    parser.add_argument(
        "--history-days",
        type=int,
        default=settings.forecast.history_days,
        help=f"Days of history for --history-only (default: {settings.forecast.history_days})",
    )
    parser.add_argument(
        "--history-only",
        action="store_true",
        help="Print the reconstructed price history instead of a forecast",
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Output JSON file path",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)
    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        module_name="src",
    )

    with MarketForecastService.from_settings() as service:
        if args.history_only:
            payload = service.get_price_history(args.category, args.history_days).to_dict()
        else:
            result = service.get_forecast(args.category, args.horizon)
            payload = result.to_dict()
            for insight in result.insights:
                logger.info("  %s", insight)

    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        Path(args.output).write_text(text, encoding="utf-8")
        logger.info("Output written to %s", args.output)
    else:
        print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
