import math
from datetime import date, datetime, timezone
from typing import Annotated, Any

from pydantic import AfterValidator, AliasGenerator, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def coerce_datetime(value: Any) -> Any:
    """Accept bare ``YYYY-MM-DD`` dates wherever a datetime is expected."""
    if isinstance(value, str) and len(value) == 10:
        return datetime.combine(date.fromisoformat(value), datetime.min.time())
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, datetime.min.time())
    return value


def as_naive_utc(value: datetime) -> datetime:
    # stored naive, always UTC
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


DateTimeInput = Annotated[datetime, BeforeValidator(coerce_datetime), AfterValidator(as_naive_utc)]


def reject_null(value: Any) -> Any:
    """Partial updates may omit a required column but never clear it."""
    if value is None:
        raise ValueError("may not be null")
    return value


class RequestModel(BaseModel):
    """Incoming payloads accept camelCase keys as well as field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


class EntityResponse(BaseModel):
    id: str = Field(serialization_alias="_id")
    created_at: datetime
    updated_at: datetime
    is_deleted: bool

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )


class Pagination(BaseModel):
    count: int
    page: int
    limit: int
    total_pages: int = Field(serialization_alias="totalPages")

    model_config = ConfigDict(alias_generator=AliasGenerator(serialization_alias=to_camel))


class MessageResponse(BaseModel):
    message: str


def paginate(count: int, page: int, limit: int) -> dict:
    return {
        "count": count,
        "page": page,
        "limit": limit,
        "total_pages": math.ceil(count / limit) if limit > 0 else 0,
    }
