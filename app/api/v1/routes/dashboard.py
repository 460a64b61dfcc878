# app/api/v1/routes/dashboard.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import datetime

from app.core.database import get_async_session
from app.core.auth import User
from app.api.deps import get_current_user
from app.schemas.dashboard import CategoryBreakdownItem, DashboardStats, SpendingTrendPoint
from app.utils.analytics import (
    DEFAULT_TREND_MONTHS,
    get_category_breakdown as compute_breakdown_for_user,
    get_dashboard_stats as compute_stats_for_user,
    get_spending_trends as compute_trends_for_user,
)
from app.utils.timestamp import start_of_month, to_naive_utc, utcnow

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """
    Month-to-date balance, expenses, income and savings rate, with the
    percentage change of expenses and income against last month.
    """
    return await compute_stats_for_user(user.id, db)


@router.get("/category-breakdown", response_model=List[CategoryBreakdownItem])
async def get_category_breakdown(
    start_date: Optional[datetime] = Query(None, description="Defaults to the start of the current month"),
    end_date: Optional[datetime] = Query(None, description="Defaults to now"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    now = utcnow()
    start = to_naive_utc(start_date) if start_date else start_of_month(now)
    end = to_naive_utc(end_date) if end_date else now
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end_date must not be before start_date",
        )
    return await compute_breakdown_for_user(user.id, db, start, end)


@router.get("/spending-trends", response_model=List[SpendingTrendPoint])
async def get_spending_trends(
    months: int = Query(DEFAULT_TREND_MONTHS, ge=1, le=60, description="Calendar months to look back"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await compute_trends_for_user(user.id, db, months_back=months)
