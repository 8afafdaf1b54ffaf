import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.core.errors import BadRequestError
from fintrack.models.base import utcnow
from fintrack.models.finance import Budget, Category
from fintrack.schemas.budget import BudgetCreate, BudgetQuery, BudgetUpdate
from fintrack.services import repository
from fintrack.services.filters import parse_date

logger = logging.getLogger(__name__)


class BudgetService:
    @staticmethod
    def _check_dates(start_date, end_date) -> None:
        if end_date is not None and end_date <= start_date:
            raise BadRequestError("End date must be after start date")

    @staticmethod
    def _base(user_id: Optional[str], include_deleted: bool = False, only_deleted: bool = False):
        stmt = repository.owned(select(Budget), Budget, user_id)
        return repository.visible(stmt, Budget, include_deleted=include_deleted, only_deleted=only_deleted)

    @staticmethod
    async def get_all(db: AsyncSession, user_id: Optional[str], filters: BudgetQuery, page: int, limit: int):
        stmt = BudgetService._base(user_id, include_deleted=filters.include_deleted)
        if filters.period:
            stmt = stmt.where(Budget.period == filters.period)
        if filters.category:
            stmt = stmt.where(Budget.category_id == filters.category)
        # date filters bound the budget's start date
        start = parse_date(filters.start_date)
        end = parse_date(filters.end_date, end_of_day=True)
        if start:
            stmt = stmt.where(Budget.start_date >= start)
        if end:
            stmt = stmt.where(Budget.start_date <= end)
        stmt = repository.apply_sort(stmt, Budget, filters.sort, default=(Budget.start_date.desc(),))
        return await repository.fetch_page(db, stmt, page, limit)

    @staticmethod
    async def get_by_id(db: AsyncSession, budget_id: str, user_id: Optional[str]) -> Budget:
        return await repository.get_entity(db, Budget, budget_id, user_id)

    @staticmethod
    async def create(db: AsyncSession, user_id: str, data: BudgetCreate) -> Budget:
        BudgetService._check_dates(data.start_date, data.end_date)
        await repository.get_reference(db, Category, data.category, user_id)
        payload = data.model_dump(exclude={"category"})
        budget = Budget(**payload, category_id=data.category, user_id=user_id)
        budget = await repository.save(db, budget)
        logger.info("Budget created", extra={"budget_id": budget.id, "user_id": user_id})
        return await BudgetService.get_by_id(db, budget.id, user_id)

    @staticmethod
    async def update(db: AsyncSession, budget_id: str, user_id: str, data: BudgetUpdate) -> Budget:
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise BadRequestError("No update data provided.")
        budget = await repository.get_entity(db, Budget, budget_id, user_id)
        BudgetService._check_dates(
            changes.get("start_date", budget.start_date), changes.get("end_date", budget.end_date)
        )
        if "category" in changes:
            await repository.get_reference(db, Category, changes["category"], user_id)
            budget.category_id = changes.pop("category")
        for field, value in changes.items():
            setattr(budget, field, value)
        await repository.save(db, budget)
        return await BudgetService.get_by_id(db, budget_id, user_id)

    @staticmethod
    async def delete(db: AsyncSession, budget_id: str, user_id: Optional[str]) -> Budget:
        budget = await repository.get_entity(db, Budget, budget_id, user_id, include_deleted=True)
        budget = await repository.soft_delete(db, budget)
        logger.info("Budget deleted", extra={"budget_id": budget.id})
        return budget

    @staticmethod
    async def restore(db: AsyncSession, budget_id: str, user_id: Optional[str]) -> Budget:
        budget = await repository.get_restorable(db, Budget, budget_id, user_id)
        await repository.restore(db, budget)
        logger.info("Budget restored", extra={"budget_id": budget_id})
        return await BudgetService.get_by_id(db, budget_id, user_id)

    @staticmethod
    async def get_deleted(db: AsyncSession, user_id: Optional[str]):
        stmt = BudgetService._base(user_id, only_deleted=True).order_by(Budget.start_date.desc())
        return (await db.execute(stmt)).scalars().unique().all()

    @staticmethod
    async def get_by_period(db: AsyncSession, user_id: str, period: str):
        stmt = BudgetService._base(user_id).where(Budget.period == period).order_by(Budget.start_date.desc())
        return (await db.execute(stmt)).scalars().unique().all()

    @staticmethod
    async def get_by_category_type(db: AsyncSession, user_id: str, category_type: str):
        stmt = (
            BudgetService._base(user_id)
            .join(Category, Budget.category_id == Category.id)
            .where(Category.type == category_type, Category.is_deleted.is_(False))
            .order_by(Budget.start_date.desc())
        )
        return (await db.execute(stmt)).scalars().unique().all()

    @staticmethod
    async def get_current(db: AsyncSession, user_id: str):
        now = utcnow()
        stmt = (
            BudgetService._base(user_id)
            .where(Budget.start_date <= now, or_(Budget.end_date.is_(None), Budget.end_date >= now))
            .order_by(Budget.start_date.desc())
        )
        return (await db.execute(stmt)).scalars().unique().all()
