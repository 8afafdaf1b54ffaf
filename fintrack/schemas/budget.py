from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from fintrack.schemas.category import CategoryResponse
from fintrack.schemas.common import DateTimeInput, EntityResponse, Pagination, RequestModel, reject_null

BudgetPeriod = Literal["daily", "weekly", "monthly", "yearly"]


class BudgetCreate(RequestModel):
    amount: float = Field(..., gt=0)
    period: BudgetPeriod
    category: str = Field(..., min_length=1)
    start_date: DateTimeInput
    end_date: Optional[DateTimeInput] = None
    is_recurring: bool = True


class BudgetUpdate(RequestModel):
    amount: Optional[float] = Field(None, gt=0)
    period: Optional[BudgetPeriod] = None
    category: Optional[str] = Field(None, min_length=1)
    start_date: Optional[DateTimeInput] = None
    end_date: Optional[DateTimeInput] = None
    is_recurring: Optional[bool] = None

    _not_null = field_validator(
        "amount", "period", "category", "start_date", "is_recurring", mode="before"
    )(reject_null)


class BudgetResponse(EntityResponse):
    amount: float
    period: str
    category_id: str = Field(serialization_alias="category")
    start_date: datetime
    end_date: Optional[datetime] = None
    is_recurring: bool
    user_id: str = Field(serialization_alias="user")
    category_details: Optional[CategoryResponse] = None


class BudgetEnvelope(BaseModel):
    budget: BudgetResponse
    message: Optional[str] = None


class BudgetListResponse(Pagination):
    budgets: List[BudgetResponse]


class BudgetQuery(BaseModel):
    period: Optional[str] = None
    category: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    sort: Optional[str] = None
    include_deleted: bool = False
