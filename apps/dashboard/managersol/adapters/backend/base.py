"""REST backend client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from managersol.schemas.auth import BackendLoginResponse
from managersol.schemas.board import (
    CreateGroupElementPayload,
    GroupMembershipItem,
    ReorderEntry,
    TaskElement,
    TaskGroupModel,
)


class BackendError(Exception):
    """Raised when the backend rejects a request or cannot be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class BackendUnauthorizedError(BackendError):
    """Raised when the backend refuses the session token of an authenticated call."""


class BackendClient(ABC):
    """Provider-neutral access to the ManagerSol REST backend."""

    @abstractmethod
    def with_token(self, token: str | None) -> "BackendClient":
        """Return a client that authenticates as the bearer of ``token``."""

    @abstractmethod
    async def login(self, email: str, password: str) -> BackendLoginResponse:
        """Exchange credentials for a session record."""

    @abstractmethod
    async def get_user(self, user_id: str) -> dict[str, Any]:
        """Fetch one user record."""

    @abstractmethod
    async def list_task_group_models(self) -> list[TaskGroupModel]:
        """List task group models."""

    @abstractmethod
    async def list_task_elements(self) -> list[TaskElement]:
        """List task element definitions."""

    @abstractmethod
    async def list_group_elements(self, group_id: str) -> list[GroupMembershipItem]:
        """List the members of one group in server order."""

    @abstractmethod
    async def create_group_element(self, payload: CreateGroupElementPayload) -> str:
        """Create a group membership and return its id."""

    @abstractmethod
    async def reorder_group_elements(self, items: list[ReorderEntry]) -> None:
        """Persist a batch of ``sort_order``/``column_number`` assignments."""


__all__ = ["BackendClient", "BackendError", "BackendUnauthorizedError"]
