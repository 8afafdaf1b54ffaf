import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.core.errors import BadRequestError
from fintrack.models.finance import Category
from fintrack.schemas.category import CategoryCreate, CategoryQuery, CategoryUpdate
from fintrack.services import repository
from fintrack.services.filters import contains

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "A category with this name and type already exists"


class CategoryService:
    @staticmethod
    async def get_all(db: AsyncSession, user_id: Optional[str], filters: CategoryQuery, page: int, limit: int):
        stmt = repository.owned(select(Category), Category, user_id)
        stmt = repository.visible(stmt, Category, include_deleted=filters.include_deleted)
        if filters.type:
            stmt = stmt.where(Category.type == filters.type)
        if filters.name:
            stmt = stmt.where(contains(Category.name, filters.name))
        stmt = repository.apply_sort(stmt, Category, filters.sort, default=(Category.name.asc(),))
        return await repository.fetch_page(db, stmt, page, limit)

    @staticmethod
    async def get_by_id(db: AsyncSession, category_id: str, user_id: Optional[str]) -> Category:
        return await repository.get_entity(db, Category, category_id, user_id)

    @staticmethod
    async def create(db: AsyncSession, user_id: str, data: CategoryCreate) -> Category:
        category = Category(**data.model_dump(), user_id=user_id)
        category = await repository.save(db, category, DUPLICATE_NAME)
        logger.info("Category created", extra={"category_id": category.id, "user_id": user_id})
        return category

    @staticmethod
    async def update(db: AsyncSession, category_id: str, user_id: Optional[str], data: CategoryUpdate) -> Category:
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise BadRequestError("No update data provided.")
        category = await repository.get_entity(db, Category, category_id, user_id)
        for field, value in changes.items():
            setattr(category, field, value)
        return await repository.save(db, category, DUPLICATE_NAME)

    @staticmethod
    async def delete(db: AsyncSession, category_id: str, user_id: Optional[str]) -> Category:
        category = await repository.get_entity(db, Category, category_id, user_id, include_deleted=True)
        category = await repository.soft_delete(db, category)
        logger.info("Category deleted", extra={"category_id": category.id})
        return category

    @staticmethod
    async def restore(db: AsyncSession, category_id: str, user_id: Optional[str]) -> Category:
        category = await repository.get_restorable(db, Category, category_id, user_id)
        category = await repository.restore(db, category, DUPLICATE_NAME)
        logger.info("Category restored", extra={"category_id": category.id})
        return category

    @staticmethod
    async def get_deleted(db: AsyncSession, user_id: Optional[str]):
        stmt = repository.owned(select(Category), Category, user_id)
        stmt = repository.visible(stmt, Category, only_deleted=True).order_by(Category.name)
        return (await db.execute(stmt)).scalars().all()
