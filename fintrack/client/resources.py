"""Generic CRUD access to the REST resources.

A single :class:`CrudService` carries the request logic; what differs per
resource (endpoint, envelope keys, models, recognized filter fields) lives
in a :class:`ResourceCodec`.
"""
import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from fintrack.client.http import ApiClient, ApiError
from fintrack.client.models import (
    Account, AccountForm, AccountItem, AccountList, Budget, BudgetForm, BudgetItem, BudgetList,
    Category, CategoryForm, CategoryItem, CategoryList, PaginationData, Transaction, TransactionForm,
    TransactionItem, TransactionList,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


@dataclass
class AccountFilters:
    type: Optional[str] = None
    name: Optional[str] = None


@dataclass
class CategoryFilters:
    pass


@dataclass
class BudgetFilters:
    period: Optional[str] = None
    category: Optional[str] = None
    start_date: Optional[Any] = None
    end_date: Optional[Any] = None


@dataclass
class TransactionFilters:
    start_date: Optional[Any] = None
    end_date: Optional[Any] = None
    type: Optional[str] = None
    category: Optional[str] = None
    account: Optional[str] = None


def _query_value(value) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _json_value(value):
    return value.isoformat() if isinstance(value, (date, datetime)) else value


def filters_to_query_params(filters, keys: Sequence[str]) -> dict[str, str]:
    """Flatten a filter object into query parameters.

    Only the recognized ``keys`` are read; a field that is missing, ``None``
    or an empty string is left out entirely. Keys are emitted in camelCase.
    """
    if filters is None:
        return {}
    if dataclasses.is_dataclass(filters):
        source = dataclasses.asdict(filters)
    elif isinstance(filters, Mapping):
        source = filters
    else:
        raise TypeError(f"Unsupported filter object: {type(filters).__name__}")

    params = {}
    for key in keys:
        value = source.get(key)
        if value is None and to_camel(key) != key:
            value = source.get(to_camel(key))
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        params[to_camel(key)] = _query_value(value)
    return params


@dataclass(frozen=True)
class ResourceCodec(Generic[T]):
    endpoint: str
    singular: str
    plural: str
    item_model: Type[T]
    envelope_model: Type[BaseModel]
    list_model: Type[PaginationData]
    form_model: Type[BaseModel]
    filter_keys: tuple = ()

    def encode(self, data, partial: bool = False) -> dict:
        if partial:
            if isinstance(data, BaseModel):
                return data.model_dump(mode="json", by_alias=True, exclude_unset=True)
            return {to_camel(key): _json_value(value) for key, value in data.items()}
        form = data if isinstance(data, BaseModel) else self.form_model.model_validate(data)
        return form.model_dump(mode="json", by_alias=True, exclude_none=True)

    def decode_one(self, body) -> T:
        envelope = self.envelope_model.model_validate(body)
        return getattr(envelope, self.singular)

    def decode_list(self, body) -> PaginationData:
        return self.list_model.model_validate(body)


@dataclass
class Page(Generic[T]):
    items: List[T]
    pagination: PaginationData


ACCOUNTS = ResourceCodec(
    endpoint="/accounts", singular="account", plural="accounts",
    item_model=Account, envelope_model=AccountItem, list_model=AccountList, form_model=AccountForm,
    filter_keys=("type", "name"),
)
CATEGORIES = ResourceCodec(
    endpoint="/categories", singular="category", plural="categories",
    item_model=Category, envelope_model=CategoryItem, list_model=CategoryList, form_model=CategoryForm,
)
BUDGETS = ResourceCodec(
    endpoint="/budgets", singular="budget", plural="budgets",
    item_model=Budget, envelope_model=BudgetItem, list_model=BudgetList, form_model=BudgetForm,
    filter_keys=("period", "category", "start_date", "end_date"),
)
TRANSACTIONS = ResourceCodec(
    endpoint="/transactions", singular="transaction", plural="transactions",
    item_model=Transaction, envelope_model=TransactionItem, list_model=TransactionList,
    form_model=TransactionForm,
    filter_keys=("start_date", "end_date", "type", "category", "account"),
)


class CrudService(Generic[T]):
    def __init__(self, api: ApiClient, codec: ResourceCodec[T]):
        self.api = api
        self.codec = codec

    def _path(self, *parts: str) -> str:
        return "/".join((self.codec.endpoint, *parts))

    def _decode(self, decoder, body):
        try:
            return decoder(body)
        except ValidationError as exc:
            logger.warning("Malformed %s response: %s", self.codec.plural, exc)
            raise ApiError(f"Malformed response from {self.codec.endpoint}") from exc

    def query_params(self, filters=None) -> dict[str, str]:
        return filters_to_query_params(filters, self.codec.filter_keys)

    async def get_all(self, filters=None) -> List[T]:
        body = await self.api.request("GET", self.codec.endpoint, params=self.query_params(filters))
        return getattr(self._decode(self.codec.decode_list, body), self.codec.plural)

    async def get_all_paginated(self, filters=None, page: int = 1, limit: int = 10) -> Page[T]:
        params = {**self.query_params(filters), "page": str(page), "limit": str(limit)}
        body = await self.api.request("GET", self.codec.endpoint, params=params)
        envelope = self._decode(self.codec.decode_list, body)
        pagination = PaginationData(
            count=envelope.count, page=envelope.page, limit=envelope.limit, total_pages=envelope.total_pages
        )
        return Page(items=getattr(envelope, self.codec.plural), pagination=pagination)

    async def get_by_id(self, entity_id: str) -> T:
        body = await self.api.request("GET", self._path(entity_id))
        return self._decode(self.codec.decode_one, body)

    async def create(self, data) -> T:
        body = await self.api.request("POST", self.codec.endpoint, json=self.codec.encode(data))
        return self._decode(self.codec.decode_one, body)

    async def update(self, entity_id: str, data) -> T:
        body = await self.api.request("PUT", self._path(entity_id), json=self.codec.encode(data, partial=True))
        return self._decode(self.codec.decode_one, body)

    async def delete(self, entity_id: str) -> None:
        await self.api.request("DELETE", self._path(entity_id))

    async def restore(self, entity_id: str) -> T:
        body = await self.api.request("PATCH", self._path(entity_id, "restore"))
        return self._decode(self.codec.decode_one, body)

    async def get_collection(self, *parts: str) -> List[T]:
        """Fetch an unpaginated ``{<plural>: [...]}`` listing below the endpoint."""
        body = await self.api.request("GET", self._path(*parts))
        if not isinstance(body, dict) or not isinstance(body.get(self.codec.plural), list):
            raise ApiError(f"Malformed response from {self._path(*parts)}")
        return [self._decode(self.codec.item_model.model_validate, item) for item in body[self.codec.plural]]
