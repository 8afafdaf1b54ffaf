from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.api.deps import ListParams, get_current_user
from fintrack.core.database import get_db
from fintrack.models.user import User
from fintrack.schemas.category import (
    CategoryCreate, CategoryEnvelope, CategoryListResponse, CategoryQuery, CategoryResponse, CategoryUpdate,
)
from fintrack.schemas.common import paginate
from fintrack.services.categories import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=CategoryListResponse)
async def list_categories(
        params: ListParams = Depends(),
        type: Optional[str] = Query(None),
        name: Optional[str] = Query(None),
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    filters = CategoryQuery(type=type, name=name, sort=params.sort, include_deleted=params.include_deleted)
    items, total = await CategoryService.get_all(db, user.id, filters, params.page, params.limit)
    return {"categories": items, **paginate(total, params.page, params.limit)}


@router.get("/deleted", response_model=dict[str, list[CategoryResponse]])
async def list_deleted_categories(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return {"categories": await CategoryService.get_deleted(db, user.id)}


@router.get("/type/{category_type}", response_model=CategoryListResponse)
async def list_categories_by_type(
        category_type: Literal["income", "expense"],
        params: ListParams = Depends(),
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    filters = CategoryQuery(type=category_type, sort=params.sort)
    items, total = await CategoryService.get_all(db, user.id, filters, params.page, params.limit)
    return {"categories": items, **paginate(total, params.page, params.limit)}


@router.get("/{category_id}", response_model=CategoryEnvelope)
async def get_category(category_id: str, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return {"category": await CategoryService.get_by_id(db, category_id, user.id)}


@router.post("", response_model=CategoryEnvelope, status_code=201)
async def create_category(data: CategoryCreate, user: User = Depends(get_current_user),
                          db: AsyncSession = Depends(get_db)):
    return {"category": await CategoryService.create(db, user.id, data), "message": "Category created"}


@router.api_route("/{category_id}", methods=["PUT", "PATCH"], response_model=CategoryEnvelope)
async def update_category(category_id: str, data: CategoryUpdate, user: User = Depends(get_current_user),
                          db: AsyncSession = Depends(get_db)):
    category = await CategoryService.update(db, category_id, user.id, data)
    return {"category": category, "message": "Category updated"}


@router.delete("/{category_id}")
async def delete_category(category_id: str, user: User = Depends(get_current_user),
                          db: AsyncSession = Depends(get_db)):
    category = await CategoryService.delete(db, category_id, user.id)
    return {"categoryId": category.id, "message": "Category deleted"}


@router.patch("/{category_id}/restore", response_model=CategoryEnvelope)
async def restore_category(category_id: str, user: User = Depends(get_current_user),
                           db: AsyncSession = Depends(get_db)):
    return {"category": await CategoryService.restore(db, category_id, user.id), "message": "Category restored"}
