"""Dependency wiring for routes."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request

from managersol.adapters.backend import BackendClient, HttpBackendClient
from managersol.adapters.storage import CookieStorage
from managersol.core.config import Settings, get_settings
from managersol.core.logging_safety import safe_log_identifier, safe_log_path
from managersol.domain.access import PUBLIC_ROUTE, Allow, RedirectTo, allowed_roles_for, guard_route, guard_shell
from managersol.errors import RedirectRequired
from managersol.repositories.boards import BoardRegistry
from managersol.schemas.auth import Principal
from managersol.services.board import BoardService
from managersol.services.session import SessionService

SESSION_SCOPED_COOKIE_PREFIX = "ss-"
logger = logging.getLogger(__name__)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def build_session_service(request: Request, settings: Settings) -> SessionService:
    durable = CookieStorage(
        request.cookies,
        max_age=settings.session_cookie_max_age,
        secure=settings.session_cookie_secure,
    )
    session_scoped = CookieStorage(
        request.cookies,
        prefix=SESSION_SCOPED_COOKIE_PREFIX,
        secure=settings.session_cookie_secure,
    )
    return SessionService(durable, session_scoped)


def get_session_service(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionService:
    """One session service per request, shared by every guard that runs for it."""
    existing = getattr(request.state, "session_service", None)
    if isinstance(existing, SessionService):
        return existing
    service = build_session_service(request, settings)
    request.state.session_service = service
    return service


def get_optional_principal(
    session: Annotated[SessionService, Depends(get_session_service)],
) -> Principal | None:
    return session.get_principal()


def _redirect(request: Request, decision: RedirectTo, *, reason: str, clear_session: bool = False) -> RedirectRequired:
    logger.info(
        "guard.redirected correlation_id=%s method=%s path=%s target=%s reason=%s",
        safe_log_identifier(_request_correlation_id(request), prefix="cid"),
        request.method,
        safe_log_path(request.url.path),
        decision.target,
        reason,
    )
    return RedirectRequired(decision.target, clear_session=clear_session)


async def require_shell_principal(
    request: Request,
    principal: Annotated[Principal | None, Depends(get_optional_principal)],
) -> Principal:
    """Gate the protected shell; runs before any protected handler."""
    decision = guard_shell(principal)
    if principal is None or isinstance(decision, RedirectTo):
        raise _redirect(request, RedirectTo(PUBLIC_ROUTE), reason="no_session")
    request.state.principal = principal
    return principal


def require_route(path: str) -> Callable[..., Awaitable[Principal]]:
    """Build a guard for ``path`` from the route rule table."""
    allowed_roles = allowed_roles_for(path)

    async def _guard(
        request: Request,
        principal: Annotated[Principal | None, Depends(get_optional_principal)],
    ) -> Principal:
        if principal is None:
            raise _redirect(request, RedirectTo(PUBLIC_ROUTE), reason="no_session")
        decision = guard_route(principal, allowed_roles)
        if isinstance(decision, Allow):
            return principal
        if decision.target == path:
            # The role cannot reach the fallback route either; end the session instead of looping.
            raise _redirect(request, RedirectTo(PUBLIC_ROUTE), reason="no_reachable_route", clear_session=True)
        raise _redirect(request, decision, reason="role_not_allowed")

    return _guard


def get_board_registry(request: Request) -> BoardRegistry:
    return request.app.state.boards


def get_backend_client(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> BackendClient:
    """Resolve the backend adapter from configuration; unauthenticated until bound to a token."""
    if settings.backend_provider == "memory":
        return request.app.state.memory_backend
    return HttpBackendClient(settings.backend_base_url, timeout=settings.backend_timeout_seconds)


def get_principal_backend(
    principal: Annotated[Principal, Depends(require_shell_principal)],
    backend: Annotated[BackendClient, Depends(get_backend_client)],
) -> BackendClient:
    return backend.with_token(principal.token)


def get_board_service(
    principal: Annotated[Principal, Depends(require_shell_principal)],
    registry: Annotated[BoardRegistry, Depends(get_board_registry)],
    backend: Annotated[BackendClient, Depends(get_principal_backend)],
) -> BoardService:
    return BoardService(registry, backend, principal_id=principal.id)
