"""Client-side entity and envelope models.

Every response is validated against one of these before it reaches the
caller, so a malformed envelope fails at the network boundary.
"""
from datetime import date, datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

DateLike = Union[date, datetime, str]

ACCOUNT_TYPES = ("cash", "bank", "credit", "investment", "checking", "savings", "other")


class ClientModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Entity(ClientModel):
    id: str = Field(alias="_id")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_deleted: bool = False


class Account(Entity):
    name: str
    type: str
    balance: float = 0.0
    description: Optional[str] = None
    is_active: bool = True
    user: Optional[str] = None


class Category(Entity):
    name: str
    type: Literal["income", "expense"]
    icon: Optional[str] = None
    color: Optional[str] = None
    user: Optional[str] = None


class Budget(Entity):
    amount: float
    period: Literal["daily", "weekly", "monthly", "yearly"]
    category: str
    start_date: datetime
    end_date: Optional[datetime] = None
    is_recurring: bool = True
    user: Optional[str] = None
    category_details: Optional[Category] = None


class Transaction(Entity):
    amount: float
    type: Literal["income", "expense"]
    description: str
    date: datetime
    category: str
    account: str
    user: Optional[str] = None
    img_url: Optional[str] = None


class PaginationData(ClientModel):
    count: int
    page: int
    limit: int
    total_pages: int


class AccountList(PaginationData):
    accounts: List[Account]

    @model_validator(mode="before")
    @classmethod
    def legacy_total(cls, data):
        # older servers only sent ``total``
        if isinstance(data, dict) and data.get("count") is None and data.get("total") is not None:
            data = {**data, "count": data["total"]}
        return data


class CategoryList(PaginationData):
    categories: List[Category]


class BudgetList(PaginationData):
    budgets: List[Budget]


class TransactionList(PaginationData):
    transactions: List[Transaction]


class AccountItem(ClientModel):
    account: Account
    message: Optional[str] = None


class CategoryItem(ClientModel):
    category: Category
    message: Optional[str] = None


class BudgetItem(ClientModel):
    budget: Budget
    message: Optional[str] = None


class TransactionItem(ClientModel):
    transaction: Transaction
    message: Optional[str] = None


class AccountForm(ClientModel):
    name: str
    type: str = "bank"
    description: Optional[str] = None
    is_active: Optional[bool] = None


class CategoryForm(ClientModel):
    name: str
    type: Literal["income", "expense"]
    icon: Optional[str] = None
    color: Optional[str] = None


class BudgetForm(ClientModel):
    amount: float
    period: Literal["daily", "weekly", "monthly", "yearly"]
    category: str
    start_date: DateLike
    end_date: Optional[DateLike] = None
    is_recurring: bool = True


class TransactionForm(ClientModel):
    amount: float
    type: Literal["income", "expense"]
    description: str
    category: str
    account: str
    date: Optional[DateLike] = None
    img_url: Optional[str] = None


class User(Entity):
    username: str
    email: str
    first_name: str
    last_name: str
    currency: str
    is_admin: bool = False


class AuthResult(ClientModel):
    token: str
    user: User
