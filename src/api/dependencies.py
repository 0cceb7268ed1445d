from __future__ import annotations

from functools import lru_cache

from src.repositories.accountancy_repository import AccountancyRepository
from src.repositories.bookings_repository import BookingsRepository
from src.repositories.properties_repository import PropertiesRepository
from src.services.analytics_service import AnalyticsService
from src.services.busyness_calendar_service import BusynessCalendarService
from src.services.commission_service import CommissionService


@lru_cache
def get_properties_repository() -> PropertiesRepository:
    return PropertiesRepository()


@lru_cache
def get_bookings_repository() -> BookingsRepository:
    return BookingsRepository()


@lru_cache
def get_accountancy_repository() -> AccountancyRepository:
    return AccountancyRepository()


def get_analytics_service() -> AnalyticsService:
    return AnalyticsService(
        properties_repository=get_properties_repository(),
        bookings_repository=get_bookings_repository(),
    )


def get_commission_service() -> CommissionService:
    return CommissionService(
        accountancy_repository=get_accountancy_repository(),
        bookings_repository=get_bookings_repository(),
    )


def get_busyness_calendar_service() -> BusynessCalendarService:
    return BusynessCalendarService(
        properties_repository=get_properties_repository(),
        bookings_repository=get_bookings_repository(),
    )
