from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from src.analytics.availability import first_nights
from src.analytics.deviations import apply_baseline, apply_warnings
from src.analytics.header import summarize_header
from src.analytics.occupancy import analyze_object
from src.analytics.periods import generate_periods
from src.core.config import get_settings
from src.models.bookings import PropertyRecord
from src.repositories.bookings_repository import BookingsRepository
from src.repositories.properties_repository import PropertiesRepository
from src.schemas.analytics import AnalyticsFilters, AnalyticsResponse, ObjectAnalytics, Period

logger = logging.getLogger(__name__)


def compose_analytics(periods: Sequence[Period], objects: Sequence[ObjectAnalytics]) -> AnalyticsResponse:
    header = summarize_header(periods, objects)
    compared = apply_baseline(header, objects)
    return AnalyticsResponse(header=header, data=apply_warnings(header, compared))


class AnalyticsService:
    def __init__(
        self,
        properties_repository: PropertiesRepository,
        bookings_repository: BookingsRepository,
        max_workers: Optional[int] = None,
    ) -> None:
        self.properties_repository = properties_repository
        self.bookings_repository = bookings_repository
        self.max_workers = max_workers or get_settings().analytics_max_concurrency

    def get_analytics(self, filters: AnalyticsFilters) -> AnalyticsResponse:
        periods = generate_periods(filters.period_mode, filters.start_date, filters.end_date, filters.step)
        by_id = {prop.id: prop for prop in self.properties_repository.list_properties(filters.objects)}
        # Respond in the order the objects were requested, not the storage order.
        properties = [by_id[object_id] for object_id in dict.fromkeys(filters.objects) if object_id in by_id]
        objects = self._analyze_properties(properties, periods, filters)
        return compose_analytics(periods, objects)

    def _analyze_properties(
        self,
        properties: Sequence[PropertyRecord],
        periods: Sequence[Period],
        filters: AnalyticsFilters,
    ) -> List[ObjectAnalytics]:
        if not properties:
            return []
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="analytics") as executor:
            futures = [
                executor.submit(self._analyze_property, prop, periods, filters) for prop in properties
            ]
            try:
                # Collect in submission order so the response follows the requested objects.
                return [future.result() for future in futures]
            except Exception:
                for future in futures:
                    future.cancel()
                raise

    def _analyze_property(
        self,
        prop: PropertyRecord,
        periods: Sequence[Period],
        filters: AnalyticsFilters,
    ) -> ObjectAnalytics:
        started = time.perf_counter()
        try:
            bookings = self.bookings_repository.list_property_bookings(prop.id)
        except Exception:
            logger.exception("Booking fetch failed for object %s", prop.id)
            raise

        active = sorted(
            (booking for booking in bookings if not booking.is_inquiry),
            key=lambda booking: booking.booking_time,
        )
        result = analyze_object(
            prop,
            periods,
            active,
            first_nights(active),
            filters.start_median,
            filters.end_median,
        )
        logger.info(
            "Analytics for object %s (%s) computed in %.1f ms",
            prop.id,
            prop.name,
            (time.perf_counter() - started) * 1000,
        )
        return result
