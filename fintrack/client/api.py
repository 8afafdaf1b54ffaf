import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from fintrack.client.config import client_settings
from fintrack.client.http import ApiClient, ApiError
from fintrack.client.models import AuthResult, Budget, User
from fintrack.client.resources import ACCOUNTS, BUDGETS, CATEGORIES, TRANSACTIONS, CrudService
from fintrack.client.tokens import FileTokenStore, TokenStore

logger = logging.getLogger(__name__)


class BudgetResource(CrudService[Budget]):
    async def get_by_period(self, period: str) -> List[Budget]:
        return await self.get_collection("period", period)

    async def get_current(self) -> List[Budget]:
        return await self.get_collection("current")

    async def get_by_category_type(self, category_type: str) -> List[Budget]:
        return await self.get_collection("category-type", category_type)


class FinanceClient:
    """Entry point for talking to a fintrack server.

    >>> async with FinanceClient("http://localhost:8000/api") as client:
    ...     await client.login("demo@example.com", "demo1234")
    ...     page = await client.transactions.get_all_paginated(page=2)
    """

    def __init__(
            self,
            base_url: Optional[str] = None,
            token_store: Optional[TokenStore] = None,
            transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if token_store is None:
            token_store = FileTokenStore(client_settings.FINTRACK_TOKEN_PATH)
        self.api = ApiClient(base_url, token_store=token_store, transport=transport)
        self.accounts = CrudService(self.api, ACCOUNTS)
        self.categories = CrudService(self.api, CATEGORIES)
        self.budgets = BudgetResource(self.api, BUDGETS)
        self.transactions = CrudService(self.api, TRANSACTIONS)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self.api.aclose()

    def _authenticated(self, body) -> User:
        try:
            result = AuthResult.model_validate(body)
        except ValidationError as exc:
            raise ApiError("Malformed authentication response") from exc
        self.api.token_store.set(result.token)
        logger.info("Signed in as %s", result.user.username)
        return result.user

    async def login(self, email: str, password: str) -> User:
        body = await self.api.request("POST", "/auth/login", json={"email": email, "password": password})
        return self._authenticated(body)

    async def register(self, username: str, email: str, password: str, first_name: str, last_name: str,
                       currency: str = "USD") -> User:
        payload = {
            "username": username,
            "email": email,
            "password": password,
            "firstName": first_name,
            "lastName": last_name,
            "currency": currency,
        }
        return self._authenticated(await self.api.request("POST", "/auth/register", json=payload))

    async def current_user(self) -> User:
        body = await self.api.request("GET", "/auth/current-user")
        try:
            return User.model_validate(body["user"])
        except (KeyError, TypeError, ValidationError) as exc:
            raise ApiError("Malformed response from /auth/current-user") from exc

    def logout(self) -> None:
        self.api.token_store.clear()
