"""In-process backend for local development and tests."""

from __future__ import annotations

from typing import Any

from managersol.adapters.backend.base import BackendClient, BackendError, BackendUnauthorizedError
from managersol.repositories.memory import GroupElementRecord, InMemoryStore, UserRecord
from managersol.schemas.auth import BackendLoginResponse
from managersol.schemas.board import (
    CreateGroupElementPayload,
    GroupMembershipItem,
    ReorderEntry,
    TaskElement,
    TaskGroupModel,
)


class InMemoryBackendClient(BackendClient):
    """Serves the backend contract from an :class:`InMemoryStore`.

    Tokens are issued by :meth:`login`; any authenticated call with an unknown
    or revoked token raises :class:`BackendUnauthorizedError`, exactly as the
    HTTP adapter does on a ``401``.
    """

    def __init__(self, store: InMemoryStore, *, token: str | None = None) -> None:
        self._store = store
        self._token = token

    def with_token(self, token: str | None) -> "InMemoryBackendClient":
        return InMemoryBackendClient(self._store, token=token)

    async def login(self, email: str, password: str) -> BackendLoginResponse:
        user = self._store.authenticate(email, password)
        if user is None:
            raise BackendError("Invalid credentials", status_code=401)

        return BackendLoginResponse(
            id=user.id,
            email=user.email,
            role=user.role,
            token=self._store.issue_token(user.id),
            firstname=user.firstname,
            lastname=user.lastname,
        )

    async def get_user(self, user_id: str) -> dict[str, Any]:
        self._require_user()
        user = self._store.users.get(user_id)
        if user is None:
            raise BackendError("User not found", status_code=404)
        return {"id": user.id, "email": user.email, "role": user.role, "company_id": user.company_id}

    async def list_task_group_models(self) -> list[TaskGroupModel]:
        self._require_user()
        return [
            TaskGroupModel(id=record.id, title=record.title, description=record.description)
            for record in self._store.task_group_models.values()
        ]

    async def list_task_elements(self) -> list[TaskElement]:
        self._require_user()
        return [
            TaskElement(id=record.id, title=record.title, description=record.description, type=record.type)
            for record in self._store.task_elements.values()
        ]

    async def list_group_elements(self, group_id: str) -> list[GroupMembershipItem]:
        self._require_user()
        return [self._to_item(record) for record in self._store.list_group_elements(group_id)]

    async def create_group_element(self, payload: CreateGroupElementPayload) -> str:
        self._require_user()
        if self._store.create_failure_message is not None:
            raise BackendError(self._store.create_failure_message, status_code=500)
        if payload.task_group_model_id not in self._store.task_group_models:
            raise BackendError("Task group model not found", status_code=404)
        if payload.task_element_id not in self._store.task_elements:
            raise BackendError("Task element not found", status_code=404)

        record = self._store.create_group_element(
            task_group_model_id=payload.task_group_model_id,
            task_element_id=payload.task_element_id,
            title=payload.title,
            description=payload.description,
            mandatory=payload.mandatory,
            column_number=payload.column_number,
        )
        return record.id

    async def reorder_group_elements(self, items: list[ReorderEntry]) -> None:
        self._require_user()
        self._store.reorder_request_count += 1
        if self._store.reorder_failure_message is not None:
            raise BackendError(self._store.reorder_failure_message, status_code=500)
        self._store.reorder_group_elements([(item.id, item.sort_order, item.column_number) for item in items])

    def _require_user(self) -> UserRecord:
        user = self._store.user_for_token(self._token)
        if user is None:
            raise BackendUnauthorizedError("Session is no longer valid", status_code=401)
        return user

    def _to_item(self, record: GroupElementRecord) -> GroupMembershipItem:
        element = self._store.task_elements.get(record.task_element_id)
        return GroupMembershipItem(
            id=record.id,
            group_id=record.task_group_model_id,
            task_element_id=record.task_element_id,
            sort_order=record.sort_order,
            column_number=record.column_number,
            mandatory=record.mandatory,
            title=record.title,
            description=record.description,
            element_title=element.title if element else None,
            element_type=element.type if element else None,
        )


__all__ = ["InMemoryBackendClient"]
