from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.api.deps import ListParams, get_current_user
from fintrack.core.database import get_db
from fintrack.models.user import User
from fintrack.schemas.budget import (
    BudgetCreate, BudgetEnvelope, BudgetListResponse, BudgetPeriod, BudgetQuery, BudgetResponse, BudgetUpdate,
)
from fintrack.schemas.common import paginate
from fintrack.services.budgets import BudgetService

router = APIRouter(prefix="/budgets", tags=["Budgets"])

BudgetCollection = dict[str, list[BudgetResponse]]


@router.get("", response_model=BudgetListResponse)
async def list_budgets(
        params: ListParams = Depends(),
        period: Optional[str] = Query(None),
        category: Optional[str] = Query(None),
        start_date: Optional[str] = Query(None, alias="startDate"),
        end_date: Optional[str] = Query(None, alias="endDate"),
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    filters = BudgetQuery(period=period, category=category, start_date=start_date, end_date=end_date,
                          sort=params.sort, include_deleted=params.include_deleted)
    items, total = await BudgetService.get_all(db, user.id, filters, params.page, params.limit)
    return {"budgets": items, **paginate(total, params.page, params.limit)}


@router.get("/deleted", response_model=BudgetCollection)
async def list_deleted_budgets(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return {"budgets": await BudgetService.get_deleted(db, user.id)}


@router.get("/current", response_model=BudgetCollection)
async def list_current_budgets(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return {"budgets": await BudgetService.get_current(db, user.id)}


@router.get("/period/{period}", response_model=BudgetCollection)
async def list_budgets_by_period(period: BudgetPeriod, user: User = Depends(get_current_user),
                                 db: AsyncSession = Depends(get_db)):
    return {"budgets": await BudgetService.get_by_period(db, user.id, period)}


@router.get("/category-type/{category_type}", response_model=BudgetCollection)
async def list_budgets_by_category_type(category_type: Literal["income", "expense"],
                                        user: User = Depends(get_current_user),
                                        db: AsyncSession = Depends(get_db)):
    return {"budgets": await BudgetService.get_by_category_type(db, user.id, category_type)}


@router.get("/{budget_id}", response_model=BudgetEnvelope)
async def get_budget(budget_id: str, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return {"budget": await BudgetService.get_by_id(db, budget_id, user.id)}


@router.post("", response_model=BudgetEnvelope, status_code=201)
async def create_budget(data: BudgetCreate, user: User = Depends(get_current_user),
                        db: AsyncSession = Depends(get_db)):
    return {"budget": await BudgetService.create(db, user.id, data), "message": "Budget created"}


@router.api_route("/{budget_id}", methods=["PUT", "PATCH"], response_model=BudgetEnvelope)
async def update_budget(budget_id: str, data: BudgetUpdate, user: User = Depends(get_current_user),
                        db: AsyncSession = Depends(get_db)):
    return {"budget": await BudgetService.update(db, budget_id, user.id, data), "message": "Budget updated"}


@router.delete("/{budget_id}")
async def delete_budget(budget_id: str, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    budget = await BudgetService.delete(db, budget_id, user.id)
    return {"budgetId": budget.id, "message": "Budget deleted"}


@router.patch("/{budget_id}/restore", response_model=BudgetEnvelope)
async def restore_budget(budget_id: str, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return {"budget": await BudgetService.restore(db, budget_id, user.id), "message": "Budget restored"}
