from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from fintrack.schemas.common import EntityResponse, Pagination, RequestModel, reject_null

CategoryType = Literal["income", "expense"]


class CategoryCreate(RequestModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: CategoryType
    icon: Optional[str] = None
    color: Optional[str] = None


class CategoryUpdate(RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[CategoryType] = None
    icon: Optional[str] = None
    color: Optional[str] = None

    _not_null = field_validator("name", "type", mode="before")(reject_null)


class CategoryResponse(EntityResponse):
    name: str
    type: str
    icon: Optional[str] = None
    color: Optional[str] = None
    user_id: str = Field(serialization_alias="user")


class CategoryEnvelope(BaseModel):
    category: CategoryResponse
    message: Optional[str] = None


class CategoryListResponse(Pagination):
    categories: List[CategoryResponse]


class CategoryQuery(BaseModel):
    type: Optional[str] = None
    name: Optional[str] = None
    sort: Optional[str] = None
    include_deleted: bool = False
