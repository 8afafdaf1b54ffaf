from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.api.deps import get_current_user
from fintrack.core.database import get_db
from fintrack.models.user import User
from fintrack.services.filters import parse_date
from fintrack.services.reports import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/spending-by-category")
async def spending_by_category(
        start_date: str = Query(..., alias="startDate"),
        end_date: str = Query(..., alias="endDate"),
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    report = await ReportService.spending_by_category(
        db, user.id, parse_date(start_date), parse_date(end_date, end_of_day=True)
    )
    return {"type": "spending_by_category", "period": {"startDate": start_date, "endDate": end_date}, **report}


@router.get("/income-vs-expenses")
async def income_vs_expenses(
        start_date: str = Query(..., alias="startDate"),
        end_date: str = Query(..., alias="endDate"),
        group_by: Literal["day", "week", "month", "year"] = Query("month", alias="groupBy"),
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    report = await ReportService.income_vs_expenses(
        db, user.id, parse_date(start_date), parse_date(end_date, end_of_day=True), group_by
    )
    period = {"startDate": start_date, "endDate": end_date, "groupBy": group_by}
    return {"type": "income_vs_expenses", "period": period, **report}


@router.get("/monthly-trend")
async def monthly_trend(
        months: int = Query(6, ge=1, le=120),
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    return {"type": "monthly_trend", **await ReportService.monthly_trend(db, user.id, months)}
