from __future__ import annotations

import argparse
import json
import os
from datetime import date

from src.analytics.periods import PeriodMode
from src.core.config import get_settings
from src.core.logging import configure_logging
from src.repositories.bookings_repository import BookingsRepository
from src.repositories.properties_repository import PropertiesRepository
from src.schemas.analytics import AnalyticsFilters
from src.services.analytics_service import AnalyticsService


def load_env_file(env_path: str) -> None:
    if not os.path.exists(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as env_file:
        for line in env_file:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key, value)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compute occupancy, price and booking-window analytics for a set of objects."
    )
    parser.add_argument("objects", nargs="+", type=int, help="Object (property) ids.")
    parser.add_argument("--start-date", required=True, type=date.fromisoformat)
    parser.add_argument("--end-date", required=True, type=date.fromisoformat)
    parser.add_argument(
        "--period-mode",
        default=PeriodMode.FIXED_SEASON.value,
        choices=[mode.value for mode in PeriodMode],
    )
    parser.add_argument("--step", type=int, default=None, help="Bucket size in days for custom mode.")
    parser.add_argument("--start-median", type=float, default=None)
    parser.add_argument("--end-median", type=float, default=None)
    parser.add_argument(
        "--env-file",
        default=os.path.join(os.path.dirname(__file__), "..", ".env"),
        help="Path to .env file.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    load_env_file(os.path.abspath(args.env_file))
    settings = get_settings()
    configure_logging(settings.log_level)

    filters = AnalyticsFilters(
        objects=args.objects,
        start_median=args.start_median
        if args.start_median is not None
        else settings.analytics_default_start_median,
        end_median=args.end_median if args.end_median is not None else settings.analytics_default_end_median,
        start_date=args.start_date,
        end_date=args.end_date,
        period_mode=args.period_mode,
        step=args.step,
    )
    service = AnalyticsService(
        properties_repository=PropertiesRepository(),
        bookings_repository=BookingsRepository(),
    )
    result = service.get_analytics(filters)
    print(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
