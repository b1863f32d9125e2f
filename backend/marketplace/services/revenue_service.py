"""
Revenue Service
Period windows and date-range validation for revenue reporting

"Current" periods are computed in UTC: the day, the ISO week (Monday
start), the calendar month and the calendar year containing now.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

from marketplace.core.auth import Principal
from marketplace.core.errors import BadRequestError
from marketplace.core.policies import Action, authorize
from marketplace.domain.revenue import PeriodRevenue, SellerRevenue
from marketplace.repositories.revenue_repository import Granularity, RevenueRepository


logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def current_period_bounds(now: datetime, granularity: Granularity) -> Tuple[datetime, datetime]:
    """Return [start, end) of the period of the given size containing now"""
    day_start = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)

    if granularity == Granularity.DAY:
        return day_start, day_start + timedelta(days=1)

    if granularity == Granularity.WEEK:
        week_start = day_start - timedelta(days=day_start.weekday())
        return week_start, week_start + timedelta(days=7)

    if granularity == Granularity.MONTH:
        month_start = day_start.replace(day=1)
        if month_start.month == 12:
            next_month = month_start.replace(year=month_start.year + 1, month=1)
        else:
            next_month = month_start.replace(month=month_start.month + 1)
        return month_start, next_month

    year_start = day_start.replace(month=1, day=1)
    return year_start, year_start.replace(year=year_start.year + 1)


def parse_date_range(start_date: Optional[str], end_date: Optional[str]) -> Tuple[datetime, datetime]:
    """
    Validate a YYYY-MM-DD range and return UTC bounds [start, end + 1 day)

    Raises:
        BadRequestError: missing dates, bad format, or start after end
    """
    if not start_date or not end_date:
        raise BadRequestError("startDate and endDate are required")

    try:
        start = datetime.strptime(start_date, DATE_FORMAT).replace(tzinfo=timezone.utc)
        end = datetime.strptime(end_date, DATE_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        raise BadRequestError("Invalid date format for startDate or endDate")

    if start > end:
        raise BadRequestError("startDate must be before or equal to endDate")

    return start, end + timedelta(days=1)


class RevenueService:

    def __init__(self, repository: RevenueRepository = None, clock: Callable[[], datetime] = None):
        self.repository = repository or RevenueRepository()
        self.clock = clock or _utc_now

    def seller_revenue(self, principal: Principal) -> float:
        authorize(principal, Action.REVENUE_OWN)
        return self.repository.get_seller_revenue(int(principal.id))

    def total_revenue(self, principal: Principal) -> float:
        authorize(principal, Action.REVENUE_PLATFORM)
        return self.repository.get_total_revenue()

    def current_period_revenue(self, principal: Principal, granularity: Granularity) -> List[PeriodRevenue]:
        authorize(principal, Action.REVENUE_PLATFORM)
        start, end = current_period_bounds(self.clock(), granularity)
        return self.repository.get_revenue_by_period(start, end, granularity)

    def revenue_by_range(self, principal: Principal, start_date: Optional[str],
                         end_date: Optional[str]) -> List[PeriodRevenue]:
        authorize(principal, Action.REVENUE_PLATFORM)
        start, end = parse_date_range(start_date, end_date)
        return self.repository.get_revenue_by_period(start, end, Granularity.DAY)

    def revenue_per_seller(self, principal: Principal) -> List[SellerRevenue]:
        authorize(principal, Action.REVENUE_PLATFORM)
        return self.repository.get_revenue_per_seller()


# Singleton instance for easy import
_revenue_service: Optional[RevenueService] = None

def get_revenue_service() -> RevenueService:
    """Get the singleton revenue service instance"""
    global _revenue_service
    if _revenue_service is None:
        _revenue_service = RevenueService()
    return _revenue_service
