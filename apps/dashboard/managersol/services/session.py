"""Session service layer."""

from __future__ import annotations

import json
import logging

from fastapi import Response
from pydantic import ValidationError

from managersol.adapters.backend import BackendClient, BackendError
from managersol.adapters.storage import KeyValueStorage, MemoryStorage
from managersol.core.logging_safety import safe_log_identifier
from managersol.errors import ApiError
from managersol.schemas.auth import Principal, Role

logger = logging.getLogger(__name__)

AUTH_USER_KEY = "authUser"
COMPANY_ID_KEY = "companyId"
_SESSION_KEYS = (AUTH_USER_KEY, COMPANY_ID_KEY)
_ADMIN_AREA_ROLES = frozenset({Role.SUPER_ADMIN, Role.ADMIN})


class SessionService:
    """Single read/write seam over the persisted session record.

    Reads are cached against the raw stored text, so a change made through
    another writer of the same storage is picked up on the next read.
    """

    def __init__(self, durable: KeyValueStorage, session_scoped: KeyValueStorage | None = None) -> None:
        self._durable = durable
        self._session_scoped = session_scoped if session_scoped is not None else MemoryStorage()
        self._cached_raw: str | None = None
        self._cached_principal: Principal | None = None

    def get_principal(self) -> Principal | None:
        """Return the persisted principal; absent or malformed records read as no session."""
        raw = self._durable.get(AUTH_USER_KEY)
        if raw is None:
            self._cached_raw = None
            self._cached_principal = None
            return None
        if raw == self._cached_raw:
            return self._cached_principal

        self._cached_raw = raw
        self._cached_principal = self._parse(raw)
        return self._cached_principal

    def get_company_id(self) -> str | None:
        return self._durable.get(COMPANY_ID_KEY) or None

    def start_session(self, principal: Principal, *, company_id: str | None = None) -> None:
        self._durable.set(AUTH_USER_KEY, principal.model_dump_json(exclude_none=True))
        if company_id:
            self._durable.set(COMPANY_ID_KEY, company_id)
        else:
            self._durable.remove(COMPANY_ID_KEY)

    def end_session(self) -> None:
        """Forget the session in both the durable and the session-scoped store."""
        for storage in (self._durable, self._session_scoped):
            for key in _SESSION_KEYS:
                storage.remove(key)
        self._cached_raw = None
        self._cached_principal = None

    def apply_to(self, response: Response) -> None:
        self._durable.apply_to(response)
        self._session_scoped.apply_to(response)

    async def login(self, backend: BackendClient, *, email: str, password: str) -> Principal:
        """Authenticate against the backend and persist the session for admin-area roles."""
        try:
            result = await backend.login(email, password)
        except BackendError as exc:
            raise ApiError(status_code=401, code="LOGIN_FAILED", message=str(exc) or "Login failed") from exc

        try:
            principal = Principal.model_validate(result.model_dump())
        except ValidationError as exc:
            logger.info("session.login_refused principal_id=%s reason=unknown_role", safe_log_identifier(result.id, prefix="pid"))
            raise ApiError(status_code=403, code="UNAUTHORIZED_ROLE", message="Unauthorized role.") from exc

        if principal.role not in _ADMIN_AREA_ROLES:
            logger.info(
                "session.login_refused principal_id=%s role=%s reason=no_admin_area",
                safe_log_identifier(principal.id, prefix="pid"),
                principal.role.value,
            )
            raise ApiError(
                status_code=403,
                code="ACCESS_DENIED",
                message="Your account does not have access to the admin area.",
            )

        company_id = result.company_id
        if not company_id and principal.role is Role.ADMIN:
            company_id = await self._lookup_company_id(backend.with_token(principal.token), principal.id)

        self.start_session(principal, company_id=company_id)
        logger.info(
            "session.started principal_id=%s role=%s",
            safe_log_identifier(principal.id, prefix="pid"),
            principal.role.value,
        )
        return principal

    @staticmethod
    def _parse(raw: str) -> Principal | None:
        try:
            return Principal.model_validate(json.loads(raw))
        except (ValueError, TypeError, RecursionError, ValidationError):
            return None

    @staticmethod
    async def _lookup_company_id(backend: BackendClient, user_id: str) -> str | None:
        # Optional enrichment; a missing company id never blocks login.
        try:
            user = await backend.get_user(user_id)
        except BackendError:
            logger.info("session.company_lookup_failed principal_id=%s", safe_log_identifier(user_id, prefix="pid"))
            return None
        company_id = user.get("company_id")
        return str(company_id) if company_id else None
