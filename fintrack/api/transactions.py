from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.api.deps import ListParams, get_current_user
from fintrack.core.database import get_db
from fintrack.models.user import User
from fintrack.schemas.common import paginate
from fintrack.schemas.transaction import (
    TransactionCreate, TransactionEnvelope, TransactionListResponse, TransactionQuery, TransactionResponse,
    TransactionUpdate,
)
from fintrack.services.transactions import TransactionService

router = APIRouter(prefix="/transactions", tags=["Transactions"])


async def _page(db: AsyncSession, user: User, filters: TransactionQuery, params: ListParams) -> dict:
    items, total = await TransactionService.get_all(db, user.id, filters, params.page, params.limit)
    return {"transactions": items, **paginate(total, params.page, params.limit)}


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
        params: ListParams = Depends(),
        type: Optional[str] = Query(None),
        description: Optional[str] = Query(None),
        category: Optional[str] = Query(None),
        account: Optional[str] = Query(None),
        start_date: Optional[str] = Query(None, alias="startDate"),
        end_date: Optional[str] = Query(None, alias="endDate"),
        numeric_filters: Optional[str] = Query(None, alias="numericFilters"),
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    filters = TransactionQuery(
        type=type, description=description, category=category, account=account,
        start_date=start_date, end_date=end_date, numeric_filters=numeric_filters,
        sort=params.sort, include_deleted=params.include_deleted,
    )
    return await _page(db, user, filters, params)


@router.get("/deleted/all", response_model=dict[str, list[TransactionResponse]])
async def list_deleted_transactions(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return {"transactions": await TransactionService.get_deleted(db, user.id)}


@router.get("/account/{account_id}", response_model=TransactionListResponse)
async def list_account_transactions(account_id: str, params: ListParams = Depends(),
                                    user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await _page(db, user, TransactionQuery(account=account_id, sort=params.sort), params)


@router.get("/category/{category_id}", response_model=TransactionListResponse)
async def list_category_transactions(category_id: str, params: ListParams = Depends(),
                                     user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await _page(db, user, TransactionQuery(category=category_id, sort=params.sort), params)


@router.get("/{transaction_id}", response_model=TransactionEnvelope)
async def get_transaction(transaction_id: str, user: User = Depends(get_current_user),
                          db: AsyncSession = Depends(get_db)):
    return {"transaction": await TransactionService.get_by_id(db, transaction_id, user.id)}


@router.post("", response_model=TransactionEnvelope, status_code=201)
async def create_transaction(data: TransactionCreate, user: User = Depends(get_current_user),
                             db: AsyncSession = Depends(get_db)):
    transaction = await TransactionService.create(db, user.id, data)
    return {"transaction": transaction, "message": "Transaction created"}


@router.api_route("/{transaction_id}", methods=["PUT", "PATCH"], response_model=TransactionEnvelope)
async def update_transaction(transaction_id: str, data: TransactionUpdate, user: User = Depends(get_current_user),
                             db: AsyncSession = Depends(get_db)):
    transaction = await TransactionService.update(db, transaction_id, user.id, data)
    return {"transaction": transaction, "message": "Transaction updated"}


@router.delete("/{transaction_id}")
async def delete_transaction(transaction_id: str, user: User = Depends(get_current_user),
                             db: AsyncSession = Depends(get_db)):
    transaction = await TransactionService.delete(db, transaction_id, user.id)
    return {"transactionId": transaction.id, "message": "Transaction deleted"}


@router.api_route("/{transaction_id}/restore", methods=["PATCH", "POST"], response_model=TransactionEnvelope)
async def restore_transaction(transaction_id: str, user: User = Depends(get_current_user),
                              db: AsyncSession = Depends(get_db)):
    transaction = await TransactionService.restore(db, transaction_id, user.id)
    return {"transaction": transaction, "message": "Transaction restored"}
