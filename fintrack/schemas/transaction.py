from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from fintrack.schemas.common import DateTimeInput, EntityResponse, Pagination, RequestModel, reject_null

TransactionType = Literal["income", "expense"]


class TransactionCreate(RequestModel):
    amount: float = Field(..., gt=0)
    type: TransactionType
    description: str = Field(..., min_length=1)
    date: Optional[DateTimeInput] = None
    category: str = Field(..., min_length=1)
    account: str = Field(..., min_length=1)
    img_url: Optional[str] = None


class TransactionUpdate(RequestModel):
    amount: Optional[float] = Field(None, gt=0)
    type: Optional[TransactionType] = None
    description: Optional[str] = Field(None, min_length=1)
    date: Optional[DateTimeInput] = None
    category: Optional[str] = Field(None, min_length=1)
    img_url: Optional[str] = None

    _not_null = field_validator("amount", "type", "description", "date", "category", mode="before")(reject_null)


class TransactionResponse(EntityResponse):
    amount: float
    type: str
    description: str
    date: datetime
    category_id: str = Field(serialization_alias="category")
    account_id: str = Field(serialization_alias="account")
    user_id: str = Field(serialization_alias="user")
    img_url: Optional[str] = None


class TransactionEnvelope(BaseModel):
    transaction: TransactionResponse
    message: Optional[str] = None


class TransactionListResponse(Pagination):
    transactions: List[TransactionResponse]


class TransactionQuery(BaseModel):
    type: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    account: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    numeric_filters: Optional[str] = None
    sort: Optional[str] = None
    include_deleted: bool = False
