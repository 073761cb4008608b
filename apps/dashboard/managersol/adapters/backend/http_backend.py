"""httpx adapter for the ManagerSol REST backend."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from managersol.adapters.backend.base import BackendClient, BackendError, BackendUnauthorizedError
from managersol.core.logging_safety import safe_log_path
from managersol.schemas.auth import BackendLoginResponse
from managersol.schemas.board import (
    CreateGroupElementPayload,
    GroupMembershipItem,
    ReorderEntry,
    ReorderRequest,
    TaskElement,
    TaskGroupModel,
)

logger = logging.getLogger(__name__)

_GROUP_ELEMENTS = TypeAdapter(list[GroupMembershipItem])
_GROUP_MODELS = TypeAdapter(list[TaskGroupModel])
_ELEMENTS = TypeAdapter(list[TaskElement])


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        payload = response.json()
    except ValueError:
        return default
    if isinstance(payload, dict):
        message = payload.get("error") or payload.get("message")
        if isinstance(message, str) and message:
            return message
    return default


class HttpBackendClient(BackendClient):
    """Issues one short-lived ``httpx.AsyncClient`` per call.

    ``transport`` is injectable so tests can mount an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._transport = transport

    def with_token(self, token: str | None) -> "HttpBackendClient":
        return HttpBackendClient(
            self._base_url,
            token=token,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def login(self, email: str, password: str) -> BackendLoginResponse:
        payload = await self._request(
            "POST",
            "/auth/login",
            json={"email": email, "password": password},
            default_error="Login failed",
            session_bound=False,
        )
        try:
            return BackendLoginResponse.model_validate(payload)
        except ValidationError as exc:
            raise BackendError("Login failed") from exc

    async def get_user(self, user_id: str) -> dict[str, Any]:
        payload = await self._request("GET", f"/users/{quote(user_id, safe='')}", default_error="Failed to load user")
        return payload if isinstance(payload, dict) else {}

    async def list_task_group_models(self) -> list[TaskGroupModel]:
        payload = await self._request("GET", "/task-group-models", default_error="Failed to load task groups")
        return self._validate(_GROUP_MODELS, payload, "Failed to load task groups")

    async def list_task_elements(self) -> list[TaskElement]:
        payload = await self._request("GET", "/task-elements", default_error="Failed to load task elements")
        return self._validate(_ELEMENTS, payload, "Failed to load task elements")

    async def list_group_elements(self, group_id: str) -> list[GroupMembershipItem]:
        payload = await self._request(
            "GET",
            "/task-group-elements",
            params={"group_id": group_id},
            default_error="Failed to load group elements",
        )
        return self._validate(_GROUP_ELEMENTS, payload, "Failed to load group elements")

    async def create_group_element(self, payload: CreateGroupElementPayload) -> str:
        created = await self._request(
            "POST",
            "/task-group-elements",
            json=payload.model_dump(mode="json"),
            default_error="Failed to create mapping",
        )
        created_id = created.get("id") if isinstance(created, dict) else None
        return "" if created_id is None else str(created_id)

    async def reorder_group_elements(self, items: list[ReorderEntry]) -> None:
        await self._request(
            "PUT",
            "/task-group-elements/reorder",
            json=ReorderRequest(items=items).model_dump(mode="json"),
            default_error="Failed to persist order",
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        default_error: str,
        json: Any = None,
        params: dict[str, str] | None = None,
        session_bound: bool = True,
    ) -> Any:
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, json=json, params=params)
        except httpx.HTTPError as exc:
            logger.warning("backend.unreachable method=%s path=%s error=%s", method, safe_log_path(path), type(exc).__name__)
            raise BackendError(default_error) from exc

        if response.status_code == 401 and session_bound:
            logger.info("backend.unauthorized method=%s path=%s", method, safe_log_path(path))
            raise BackendUnauthorizedError("Session is no longer valid", status_code=401)
        if response.is_error:
            logger.warning(
                "backend.rejected method=%s path=%s status=%s",
                method,
                safe_log_path(path),
                response.status_code,
            )
            raise BackendError(_error_message(response, default_error), status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _validate(adapter: TypeAdapter, payload: Any, message: str) -> list:
        try:
            return adapter.validate_python(payload)
        except ValidationError as exc:
            raise BackendError(message) from exc


__all__ = ["HttpBackendClient"]
