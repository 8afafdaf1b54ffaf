import logging
from typing import Optional

from fastapi import Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.config import settings
from fintrack.core.database import get_db
from fintrack.core.errors import ForbiddenError, UnauthorizedError
from fintrack.core.security import decode_access_token
from fintrack.models.user import User
from fintrack.services.users import UserService

logger = logging.getLogger(__name__)


async def get_current_user(
        authorization: Optional[str] = Header(None),
        db: AsyncSession = Depends(get_db),
) -> User:
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Authentication required")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise UnauthorizedError("Authentication required")

    payload = decode_access_token(token)
    user = await UserService.get_active(db, payload.get("id", ""))
    if user is None:
        raise UnauthorizedError("User not found")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        logger.warning("Admin access denied", extra={"user_id": user.id})
        raise ForbiddenError("Administrator access required")
    return user


class ListParams:
    def __init__(
            self,
            page: int = Query(1, ge=1),
            limit: Optional[int] = Query(None, ge=1, le=100),
            sort: Optional[str] = Query(None),
            include_deleted: bool = Query(False, alias="includeDeleted"),
    ):
        self.page = page
        self.limit = limit or settings.DEFAULT_PAGE_LIMIT
        self.sort = sort
        self.include_deleted = include_deleted


class AdminListParams(ListParams):
    def __init__(
            self,
            page: int = Query(1, ge=1),
            limit: Optional[int] = Query(None, ge=1, le=100),
            sort: Optional[str] = Query(None),
            include_deleted: bool = Query(False, alias="includeDeleted"),
    ):
        super().__init__(page, limit or settings.ADMIN_PAGE_LIMIT, sort, include_deleted)
