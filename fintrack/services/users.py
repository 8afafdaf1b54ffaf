import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.core.errors import BadRequestError, NotFoundError, UnauthorizedError
from fintrack.core.security import create_access_token, hash_password, verify_password
from fintrack.models.base import utcnow
from fintrack.models.user import User
from fintrack.schemas.user import ChangePasswordRequest, LoginRequest, RegisterRequest
from fintrack.services import repository

logger = logging.getLogger(__name__)


class AuthService:
    @staticmethod
    async def register(db: AsyncSession, data: RegisterRequest) -> tuple[str, User]:
        stmt = select(User).where(or_(User.email == data.email.lower(), User.username == data.username))
        if (await db.execute(stmt)).scalars().first():
            raise BadRequestError("User with this email or username already exists")

        user = User(
            username=data.username,
            email=data.email.lower(),
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            currency=data.currency,
        )
        user = await repository.save(db, user, "User with this email or username already exists")
        logger.info("User registered", extra={"user_id": user.id})
        return create_access_token(user.id, user.username), user

    @staticmethod
    async def login(db: AsyncSession, data: LoginRequest) -> tuple[str, User]:
        stmt = repository.visible(select(User).where(User.email == data.email.lower()), User)
        user = (await db.execute(stmt)).scalars().first()
        if not user or not verify_password(data.password, user.password_hash):
            logger.warning("Failed login", extra={"email": data.email})
            raise UnauthorizedError("Invalid credentials")

        user.last_login = utcnow()
        user = await repository.save(db, user)
        return create_access_token(user.id, user.username), user

    @staticmethod
    async def change_password(db: AsyncSession, user: User, data: ChangePasswordRequest) -> None:
        if not verify_password(data.current_password, user.password_hash):
            raise UnauthorizedError("Current password is incorrect")
        user.password_hash = hash_password(data.new_password)
        await repository.save(db, user)
        logger.info("Password changed", extra={"user_id": user.id})


class UserService:
    @staticmethod
    async def get_active(db: AsyncSession, user_id: str) -> Optional[User]:
        stmt = repository.visible(select(User).where(User.id == user_id), User)
        return (await db.execute(stmt)).scalars().first()

    @staticmethod
    async def get_all(db: AsyncSession, page: int, limit: int, include_deleted: bool = False):
        stmt = repository.visible(select(User), User, include_deleted=include_deleted)
        return await repository.fetch_page(db, stmt.order_by(User.created_at.desc()), page, limit)

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: str) -> User:
        user = await UserService.get_active(db, user_id)
        if user is None:
            raise NotFoundError(f"User not found with id {user_id}")
        return user
