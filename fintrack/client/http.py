import logging
from typing import Any, Optional

import httpx

from fintrack.client.config import client_settings
from fintrack.client.tokens import MemoryTokenStore, TokenStore

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "An unknown error occurred"


class ApiError(Exception):
    def __init__(self, message: str = UNKNOWN_ERROR, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


def error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Request failed with status code {response.status_code}"


class ApiClient:
    """Thin wrapper over ``httpx.AsyncClient`` used by every resource service.

    The bearer token is read from ``token_store`` on each request; when none
    is stored the request is sent without one and the server decides.
    """

    def __init__(
            self,
            base_url: Optional[str] = None,
            token_store: Optional[TokenStore] = None,
            transport: Optional[httpx.AsyncBaseTransport] = None,
            timeout: Optional[float] = None,
    ):
        self.token_store = token_store or MemoryTokenStore()
        self._http = httpx.AsyncClient(
            base_url=(base_url or client_settings.FINTRACK_API_URL).rstrip("/"),
            headers={"Content-Type": "application/json"},
            transport=transport,
            timeout=timeout or client_settings.FINTRACK_TIMEOUT,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    def _headers(self) -> dict:
        token = self.token_store.get()
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def request(
            self,
            method: str,
            path: str,
            params: Optional[dict] = None,
            json: Any = None,
    ) -> Any:
        try:
            response = await self._http.request(method, path, params=params, json=json, headers=self._headers())
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(str(exc) or UNKNOWN_ERROR) from exc

        if response.is_error:
            raise ApiError(error_message(response), response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError("Malformed response body", response.status_code) from exc
