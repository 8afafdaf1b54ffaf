from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.api.deps import AdminListParams, ListParams, get_current_user, require_admin
from fintrack.core.database import get_db
from fintrack.models.user import User
from fintrack.schemas.account import (
    AccountCreate, AccountEnvelope, AccountListResponse, AccountQuery, AccountResponse,
    AccountUpdate, BalanceResponse, BalanceUpdate,
)
from fintrack.schemas.common import paginate
from fintrack.services.accounts import AccountService

router = APIRouter(prefix="/accounts", tags=["Accounts"])


def _list_payload(items, total, params: ListParams) -> dict:
    return {"accounts": items, "total": total, **paginate(total, params.page, params.limit)}


@router.get("", response_model=AccountListResponse)
async def list_accounts(
        params: ListParams = Depends(),
        type: Optional[str] = Query(None),
        name: Optional[str] = Query(None),
        numeric_filters: Optional[str] = Query(None, alias="numericFilters"),
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
):
    filters = AccountQuery(type=type, name=name, numeric_filters=numeric_filters,
                           sort=params.sort, include_deleted=params.include_deleted)
    items, total = await AccountService.get_all(db, user.id, filters, params.page, params.limit)
    return _list_payload(items, total, params)


@router.get("/deleted/all", response_model=dict[str, list[AccountResponse]])
async def list_deleted_accounts(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return {"accounts": await AccountService.get_deleted(db, user.id)}


@router.get("/admin/all", response_model=AccountListResponse)
async def list_all_accounts(
        params: AdminListParams = Depends(),
        _: User = Depends(require_admin),
        db: AsyncSession = Depends(get_db),
):
    filters = AccountQuery(sort=params.sort, include_deleted=params.include_deleted)
    items, total = await AccountService.get_all(db, None, filters, params.page, params.limit)
    return _list_payload(items, total, params)


@router.get("/{account_id}", response_model=AccountEnvelope)
async def get_account(account_id: str, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return {"account": await AccountService.get_by_id(db, account_id, user.id)}


@router.post("", response_model=AccountEnvelope, status_code=201)
async def create_account(data: AccountCreate, user: User = Depends(get_current_user),
                         db: AsyncSession = Depends(get_db)):
    account = await AccountService.create(db, user.id, data)
    return {"account": account, "message": "Account created"}


@router.api_route("/{account_id}", methods=["PUT", "PATCH"], response_model=AccountEnvelope)
async def update_account(account_id: str, data: AccountUpdate, user: User = Depends(get_current_user),
                         db: AsyncSession = Depends(get_db)):
    return {"account": await AccountService.update(db, account_id, user.id, data), "message": "Account updated"}


@router.delete("/{account_id}")
async def delete_account(account_id: str, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    account = await AccountService.delete(db, account_id, user.id)
    return {"accountId": account.id, "message": "Account deleted"}


@router.api_route("/{account_id}/restore", methods=["PATCH", "POST"], response_model=AccountEnvelope)
async def restore_account(account_id: str, user: User = Depends(get_current_user),
                          db: AsyncSession = Depends(get_db)):
    return {"account": await AccountService.restore(db, account_id, user.id), "message": "Account restored"}


@router.patch("/{account_id}/balance", response_model=BalanceResponse)
async def update_balance(account_id: str, data: BalanceUpdate, user: User = Depends(get_current_user),
                         db: AsyncSession = Depends(get_db)):
    account = await AccountService.update_balance(db, account_id, user.id, data)
    return {
        "balance": account.balance,
        "name": account.name,
        "operation": data.operation,
        "amount": data.amount,
        "timestamp": account.updated_at.isoformat(),
    }


@router.patch("/{account_id}/toggle-active", response_model=AccountEnvelope)
async def toggle_active(account_id: str, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return {"account": await AccountService.toggle_active(db, account_id, user.id)}
