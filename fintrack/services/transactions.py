import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.core.errors import BadRequestError
from fintrack.models.base import utcnow
from fintrack.models.finance import Account, Category, Transaction
from fintrack.schemas.transaction import TransactionCreate, TransactionQuery, TransactionUpdate
from fintrack.services import repository
from fintrack.services.filters import apply_numeric_filters, contains, parse_date

logger = logging.getLogger(__name__)


class TransactionService:
    @staticmethod
    def build_query(user_id: Optional[str], filters: TransactionQuery):
        stmt = repository.owned(select(Transaction), Transaction, user_id)
        stmt = repository.visible(stmt, Transaction, include_deleted=filters.include_deleted)
        if filters.type:
            stmt = stmt.where(Transaction.type == filters.type)
        if filters.description:
            stmt = stmt.where(contains(Transaction.description, filters.description))
        if filters.category:
            stmt = stmt.where(Transaction.category_id == filters.category)
        if filters.account:
            stmt = stmt.where(Transaction.account_id == filters.account)
        start = parse_date(filters.start_date)
        end = parse_date(filters.end_date, end_of_day=True)
        if start:
            stmt = stmt.where(Transaction.date >= start)
        if end:
            stmt = stmt.where(Transaction.date <= end)
        return apply_numeric_filters(stmt, Transaction, filters.numeric_filters, allowed=("amount",))

    @staticmethod
    async def get_all(db: AsyncSession, user_id: Optional[str], filters: TransactionQuery, page: int, limit: int):
        stmt = TransactionService.build_query(user_id, filters)
        stmt = repository.apply_sort(
            stmt, Transaction, filters.sort, default=(Transaction.date.desc(), Transaction.created_at.desc())
        )
        return await repository.fetch_page(db, stmt, page, limit)

    @staticmethod
    async def get_by_id(db: AsyncSession, transaction_id: str, user_id: Optional[str]) -> Transaction:
        return await repository.get_entity(db, Transaction, transaction_id, user_id)

    @staticmethod
    async def create(db: AsyncSession, user_id: str, data: TransactionCreate) -> Transaction:
        await repository.get_reference(db, Account, data.account, user_id)
        await repository.get_reference(db, Category, data.category, user_id)

        transaction = Transaction(
            amount=data.amount,
            type=data.type,
            description=data.description,
            date=data.date or utcnow(),
            category_id=data.category,
            account_id=data.account,
            user_id=user_id,
            img_url=data.img_url,
        )
        transaction = await repository.save(db, transaction)
        logger.info(
            "Transaction created",
            extra={"transaction_id": transaction.id, "user_id": user_id, "amount": transaction.amount},
        )
        return transaction

    @staticmethod
    async def update(db: AsyncSession, transaction_id: str, user_id: str, data: TransactionUpdate) -> Transaction:
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise BadRequestError("No update data provided.")
        transaction = await repository.get_entity(db, Transaction, transaction_id, user_id)
        if "category" in changes:
            await repository.get_reference(db, Category, changes["category"], user_id)
            transaction.category_id = changes.pop("category")
        for field, value in changes.items():
            setattr(transaction, field, value)
        return await repository.save(db, transaction)

    @staticmethod
    async def delete(db: AsyncSession, transaction_id: str, user_id: Optional[str]) -> Transaction:
        transaction = await repository.get_entity(db, Transaction, transaction_id, user_id, include_deleted=True)
        transaction = await repository.soft_delete(db, transaction)
        logger.info("Transaction deleted", extra={"transaction_id": transaction.id})
        return transaction

    @staticmethod
    async def restore(db: AsyncSession, transaction_id: str, user_id: Optional[str]) -> Transaction:
        transaction = await repository.get_restorable(db, Transaction, transaction_id, user_id)
        account = await repository.get_entity(db, Account, transaction.account_id, None, include_deleted=True)
        if account.is_deleted:
            raise BadRequestError("Cannot restore transaction: associated account is deleted")
        transaction = await repository.restore(db, transaction)
        logger.info("Transaction restored", extra={"transaction_id": transaction.id})
        return transaction

    @staticmethod
    async def get_deleted(db: AsyncSession, user_id: Optional[str]):
        stmt = repository.owned(select(Transaction), Transaction, user_id)
        stmt = repository.visible(stmt, Transaction, only_deleted=True).order_by(Transaction.date.desc())
        return (await db.execute(stmt)).scalars().all()
