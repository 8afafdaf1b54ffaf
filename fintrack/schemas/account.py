from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from fintrack.schemas.common import EntityResponse, Pagination, RequestModel, reject_null

AccountType = Literal["cash", "bank", "credit", "investment", "checking", "savings", "other"]


class AccountCreate(RequestModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: AccountType = "bank"
    description: Optional[str] = None
    is_active: bool = True


class AccountUpdate(RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[AccountType] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None

    _not_null = field_validator("name", "type", "is_active", mode="before")(reject_null)


class BalanceUpdate(RequestModel):
    amount: float = Field(..., ge=0)
    operation: Literal["add", "subtract"]


class AccountResponse(EntityResponse):
    name: str
    type: str
    balance: float
    description: Optional[str] = None
    is_active: bool
    user_id: str = Field(serialization_alias="user")


class AccountEnvelope(BaseModel):
    account: AccountResponse
    message: Optional[str] = None


class AccountListResponse(Pagination):
    accounts: List[AccountResponse]
    total: int


class BalanceResponse(BaseModel):
    balance: float
    name: str
    operation: str
    amount: float
    timestamp: str


class AccountQuery(BaseModel):
    type: Optional[str] = None
    name: Optional[str] = None
    numeric_filters: Optional[str] = None
    sort: Optional[str] = None
    include_deleted: bool = False
