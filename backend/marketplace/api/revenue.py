"""
Revenue API Endpoints
Revenue from paid orders: a seller's own total, and platform-wide
reports for admins (total, current day/week/month/year, date range,
per seller).

Handlers are plain functions: the repository calls block, so FastAPI
runs them in its threadpool.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from marketplace.core.auth import Principal, get_current_user
from marketplace.repositories.revenue_repository import Granularity
from marketplace.services.revenue_service import RevenueService, get_revenue_service

router = APIRouter()

# Per-row total key for each period report
TOTAL_KEYS = {
    Granularity.DAY: "dailyTotal",
    Granularity.WEEK: "weeklyTotal",
    Granularity.MONTH: "monthlyTotal",
    Granularity.YEAR: "yearlyTotal",
}


def _success(data: dict) -> dict:
    return {"status": "success", "data": data}


def _periods(rows, granularity: Granularity) -> list:
    total_key = TOTAL_KEYS[granularity]
    return [row.to_dict(total_key) for row in rows]


@router.get("/")
def get_seller_revenue(
    principal: Principal = Depends(get_current_user),
    service: RevenueService = Depends(get_revenue_service)
):
    """Total revenue of the authenticated seller's products in paid orders"""
    return _success({"sellerRevenue": service.seller_revenue(principal)})


@router.get("/total")
def get_total_revenue(
    principal: Principal = Depends(get_current_user),
    service: RevenueService = Depends(get_revenue_service)
):
    """Platform-wide revenue from all paid orders (admin only)"""
    return _success({"totalRevenue": service.total_revenue(principal)})


@router.get("/daily")
def get_daily_revenue(
    principal: Principal = Depends(get_current_user),
    service: RevenueService = Depends(get_revenue_service)
):
    """Revenue for the current day, keyed YYYY-MM-DD (admin only)"""
    rows = service.current_period_revenue(principal, Granularity.DAY)
    return _success({"dailyRevenue": _periods(rows, Granularity.DAY)})


@router.get("/weekly")
def get_weekly_revenue(
    principal: Principal = Depends(get_current_user),
    service: RevenueService = Depends(get_revenue_service)
):
    """Revenue for the current ISO week, keyed YYYY-Www (admin only)"""
    rows = service.current_period_revenue(principal, Granularity.WEEK)
    return _success({"weeklyRevenue": _periods(rows, Granularity.WEEK)})


@router.get("/monthly")
def get_monthly_revenue(
    principal: Principal = Depends(get_current_user),
    service: RevenueService = Depends(get_revenue_service)
):
    """Revenue for the current month, keyed YYYY-MM (admin only)"""
    rows = service.current_period_revenue(principal, Granularity.MONTH)
    return _success({"monthlyRevenue": _periods(rows, Granularity.MONTH)})


@router.get("/yearly")
def get_yearly_revenue(
    principal: Principal = Depends(get_current_user),
    service: RevenueService = Depends(get_revenue_service)
):
    """Revenue for the current year, keyed YYYY (admin only)"""
    rows = service.current_period_revenue(principal, Granularity.YEAR)
    return _success({"yearlyRevenue": _periods(rows, Granularity.YEAR)})


@router.get("/range")
def get_revenue_by_range(
    start_date: Optional[str] = Query(None, alias="startDate", description="Start date (YYYY-MM-DD)"),
    end_date: Optional[str] = Query(None, alias="endDate", description="End date (YYYY-MM-DD), inclusive"),
    principal: Principal = Depends(get_current_user),
    service: RevenueService = Depends(get_revenue_service)
):
    """Revenue per day within a date range (admin only)"""
    rows = service.revenue_by_range(principal, start_date, end_date)
    return _success({"revenueByRange": _periods(rows, Granularity.DAY)})


@router.get("/sellers")
def get_revenue_per_seller(
    principal: Principal = Depends(get_current_user),
    service: RevenueService = Depends(get_revenue_service)
):
    """Revenue and items sold per seller, highest revenue first (admin only)"""
    rows = service.revenue_per_seller(principal)
    return _success({"revenuePerSeller": [row.to_dict() for row in rows]})
