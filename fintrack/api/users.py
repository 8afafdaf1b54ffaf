from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.api.deps import AdminListParams, require_admin
from fintrack.core.database import get_db
from fintrack.models.user import User
from fintrack.schemas.common import paginate
from fintrack.schemas.user import UserEnvelope, UserListResponse
from fintrack.services.users import UserService

router = APIRouter(prefix="/users", tags=["Users"], dependencies=[Depends(require_admin)])


@router.get("", response_model=UserListResponse)
async def list_users(params: AdminListParams = Depends(), db: AsyncSession = Depends(get_db)):
    items, total = await UserService.get_all(db, params.page, params.limit, params.include_deleted)
    return {"users": items, **paginate(total, params.page, params.limit)}


@router.get("/{user_id}", response_model=UserEnvelope)
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)):
    return {"user": await UserService.get_by_id(db, user_id)}
