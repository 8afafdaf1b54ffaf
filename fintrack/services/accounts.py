import logging
from typing import Optional

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.core.errors import BadRequestError
from fintrack.models.finance import Account, Transaction
from fintrack.schemas.account import AccountCreate, AccountQuery, AccountUpdate, BalanceUpdate
from fintrack.services import repository
from fintrack.services.filters import apply_numeric_filters, contains

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "An account with this name already exists"


class AccountService:
    @staticmethod
    def build_query(user_id: Optional[str], filters: AccountQuery):
        stmt = repository.owned(select(Account), Account, user_id)
        stmt = repository.visible(stmt, Account, include_deleted=filters.include_deleted)
        if filters.type:
            stmt = stmt.where(Account.type == filters.type)
        if filters.name:
            stmt = stmt.where(or_(contains(Account.name, filters.name), contains(Account.description, filters.name)))
        return apply_numeric_filters(stmt, Account, filters.numeric_filters, allowed=("balance",))

    @staticmethod
    async def get_all(db: AsyncSession, user_id: Optional[str], filters: AccountQuery, page: int, limit: int):
        stmt = AccountService.build_query(user_id, filters)
        default = (Account.created_at.desc(),) if user_id is None else (Account.created_at.asc(),)
        stmt = repository.apply_sort(stmt, Account, filters.sort, default=default)
        return await repository.fetch_page(db, stmt, page, limit)

    @staticmethod
    async def get_by_id(db: AsyncSession, account_id: str, user_id: Optional[str]) -> Account:
        return await repository.get_entity(db, Account, account_id, user_id)

    @staticmethod
    async def create(db: AsyncSession, user_id: str, data: AccountCreate) -> Account:
        # balance always starts at zero; it moves only through update_balance
        account = Account(**data.model_dump(), user_id=user_id, balance=0.0)
        account = await repository.save(db, account, DUPLICATE_NAME)
        logger.info("Account created", extra={"account_id": account.id, "user_id": user_id})
        return account

    @staticmethod
    async def update(db: AsyncSession, account_id: str, user_id: str, data: AccountUpdate) -> Account:
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise BadRequestError("No update data provided.")
        account = await repository.get_entity(db, Account, account_id, user_id)
        for field, value in changes.items():
            setattr(account, field, value)
        return await repository.save(db, account, DUPLICATE_NAME)

    @staticmethod
    async def delete(db: AsyncSession, account_id: str, user_id: Optional[str]) -> Account:
        account = await repository.get_entity(db, Account, account_id, user_id, include_deleted=True)
        if account.is_deleted:
            return account

        # transactions booked against the account go with it
        result = await db.execute(
            update(Transaction)
            .where(Transaction.account_id == account.id, Transaction.is_deleted.is_(False))
            .values(is_deleted=True)
        )
        account = await repository.soft_delete(db, account)
        logger.info(
            "Account deleted",
            extra={"account_id": account.id, "cascaded_transactions": result.rowcount},
        )
        return account

    @staticmethod
    async def restore(db: AsyncSession, account_id: str, user_id: Optional[str]) -> Account:
        account = await repository.get_restorable(db, Account, account_id, user_id)
        account = await repository.restore(db, account, DUPLICATE_NAME)
        logger.info("Account restored", extra={"account_id": account.id})
        return account

    @staticmethod
    async def get_deleted(db: AsyncSession, user_id: Optional[str]):
        stmt = repository.owned(select(Account), Account, user_id)
        stmt = repository.visible(stmt, Account, only_deleted=True).order_by(Account.updated_at.desc())
        return (await db.execute(stmt)).scalars().all()

    @staticmethod
    async def update_balance(db: AsyncSession, account_id: str, user_id: str, data: BalanceUpdate) -> Account:
        account = await repository.get_entity(db, Account, account_id, user_id)
        if data.operation == "add":
            account.balance += data.amount
        else:
            if account.balance < data.amount:
                raise BadRequestError("Insufficient funds")
            account.balance -= data.amount
        return await repository.save(db, account)

    @staticmethod
    async def toggle_active(db: AsyncSession, account_id: str, user_id: str) -> Account:
        account = await repository.get_entity(db, Account, account_id, user_id)
        account.is_active = not account.is_active
        return await repository.save(db, account)
