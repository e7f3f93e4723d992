"""Item store collaborator — the operations the assignment board depends on.

`ItemStore` is the contract. `HttpItemStore` implements it against the
REST API in routers/; services/item_store_service.py implements it
in-process on top of a database session.

Every failure surfaces as ItemStoreError with a stable `code` so callers
can tell permission problems from network problems without reading the
message. No retries here: each call is at most once.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable

import httpx
from pydantic import ValidationError

from ..cache.session_cache import SessionCache
from ..config import settings
from ..http_client import build_client, close_client
from ..schemas.errors import FORBIDDEN, NETWORK, SERVER, UNAUTHORIZED, code_for_status
from ..schemas.items import CustomerOut, InquiryOut, ItemOut, UserOut

log = logging.getLogger(__name__)


class ItemStoreError(Exception):
    def __init__(self, code: str, message: str, status_code: int | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code

    @property
    def is_permission_error(self) -> bool:
        return self.code in (UNAUTHORIZED, FORBIDDEN)


class ItemStore(ABC):
    @abstractmethod
    async def list_items(self, limit: int = 200) -> list[ItemOut]:
        pass

    @abstractmethod
    async def list_users(self, roles: Iterable[str] = (), active_only: bool = True) -> list[UserOut]:
        pass

    @abstractmethod
    async def list_customers(self, active_only: bool = True, limit: int = 100) -> list[CustomerOut]:
        pass

    @abstractmethod
    async def list_inquiries(self, limit: int = 100) -> list[InquiryOut]:
        pass

    @abstractmethod
    async def assign_items(self, item_ids: list, assignee_id) -> dict:
        pass

    @abstractmethod
    async def unassign_items(self, item_ids: list) -> dict:
        pass


class HttpItemStore(ItemStore):
    """REST client for the inquiry API.

    Authenticates with the X-Agent-Key header. The optional SessionCache
    de-duplicates identity lookups across callers sharing this store.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        identity_cache: SessionCache | None = None,
    ):
        headers = {"Accept": "application/json"}
        key = api_key if api_key is not None else settings.agent_api_key
        if key:
            headers["X-Agent-Key"] = key
        self._client = client or build_client(
            base_url=base_url or settings.api_base_url,
            headers=headers,
            timeout=settings.api_timeout_seconds,
        )
        self._identity_cache = identity_cache or SessionCache(settings.identity_cache_ttl_seconds)

    async def aclose(self) -> None:
        await close_client(self._client)

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log.warning("Item store %s %s failed: %s", method, path, e)
            raise ItemStoreError(NETWORK, f"Network error: {e}") from e

        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            message = body.get("error") or resp.reason_phrase or "Request failed"
            code = body.get("code") or code_for_status(resp.status_code)
            raise ItemStoreError(code, message, resp.status_code)

        try:
            return resp.json()
        except ValueError as e:
            raise ItemStoreError(SERVER, f"Invalid JSON from {path}", resp.status_code) from e

    @staticmethod
    def _parse(model, rows) -> list:
        try:
            return [model.model_validate(row) for row in rows or []]
        except ValidationError as e:
            raise ItemStoreError(SERVER, f"Unexpected {model.__name__} payload: {e}") from e

    async def list_items(self, limit: int = 200) -> list[ItemOut]:
        body = await self._request("GET", "/api/items", params={"limit": limit})
        return self._parse(ItemOut, body.get("data"))

    async def list_users(self, roles: Iterable[str] = (), active_only: bool = True) -> list[UserOut]:
        params = {"active": "true" if active_only else "false"}
        roles = list(roles)
        if roles:
            params["roles"] = ",".join(roles)
        body = await self._request("GET", "/api/users", params=params)
        return self._parse(UserOut, body.get("data"))

    async def list_customers(self, active_only: bool = True, limit: int = 100) -> list[CustomerOut]:
        params = {"active": "true" if active_only else "false", "limit": limit}
        body = await self._request("GET", "/api/customers", params=params)
        return self._parse(CustomerOut, body.get("data"))

    async def list_inquiries(self, limit: int = 100) -> list[InquiryOut]:
        body = await self._request("GET", "/api/inquiries", params={"limit": limit})
        return self._parse(InquiryOut, body.get("data"))

    async def assign_items(self, item_ids: list, assignee_id) -> dict:
        return await self._request(
            "POST", "/api/items/assign", json={"item_ids": list(item_ids), "assignee_id": assignee_id}
        )

    async def unassign_items(self, item_ids: list) -> dict:
        return await self._request("POST", "/api/items/unassign", json={"item_ids": list(item_ids)})

    async def current_user(self) -> UserOut:
        async def _fetch():
            body = await self._request("GET", "/api/auth/me")
            return self._parse(UserOut, [body])[0]

        return await self._identity_cache.get_or_fetch("me", _fetch)
