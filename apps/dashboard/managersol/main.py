"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse

from managersol.adapters.backend import BackendError, BackendUnauthorizedError, InMemoryBackendClient
from managersol.core.config import get_settings
from managersol.core.logging_safety import safe_log_identifier, safe_log_path
from managersol.domain.access import BOARD_ROUTE, PUBLIC_ROUTE
from managersol.errors import ApiError, RedirectRequired
from managersol.repositories.boards import BoardRegistry
from managersol.repositories.memory import InMemoryStore
from managersol.routes import auth_router, board_router, shell_router
from managersol.routes.dependencies import build_session_service
from managersol.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

_LOGIN_VALIDATION_PATHS = {("POST", "/auth/login")}
_BOARD_VALIDATION_PATHS = {
    ("POST", f"{BOARD_ROUTE}/drag/start"),
    ("POST", f"{BOARD_ROUTE}/drag/over"),
    ("POST", f"{BOARD_ROUTE}/drag/end"),
    ("POST", f"{BOARD_ROUTE}/items"),
}


def _end_session_redirect(request: Request, target: str) -> RedirectResponse:
    """Clear the persisted session on the way out; the same path ``/auth/logout`` takes."""
    session = build_session_service(request, get_settings())
    principal = session.get_principal()
    if principal is not None:
        request.app.state.boards.discard(principal.id)
    session.end_session()
    response = RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
    session.apply_to(response)
    return response


def create_app() -> FastAPI:
    app = FastAPI(title="ManagerSol Dashboard", version="1.0.0")
    app.state.boards = BoardRegistry()
    app.state.backend_store = InMemoryStore()
    app.state.memory_backend = InMemoryBackendClient(app.state.backend_store)

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        route = request.scope.get("route")
        route_path = getattr(route, "path", request.url.path)
        route_key = (request.method.upper(), route_path)
        if route_key in _LOGIN_VALIDATION_PATHS:
            payload = ErrorResponse(code="LOGIN_FAILED", message="Email and password are required")
            return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content=payload.model_dump(exclude_none=True))
        if route_key in _BOARD_VALIDATION_PATHS:
            payload = ErrorResponse(code="VALIDATION_ERROR", message="Invalid board payload")
            return JSONResponse(
                status_code=422,
                content=payload.model_dump(exclude_none=True),
            )
        return await request_validation_exception_handler(request, exc)

    @app.exception_handler(RedirectRequired)
    async def handle_redirect(request: Request, exc: RedirectRequired) -> RedirectResponse:
        if exc.clear_session:
            return _end_session_redirect(request, exc.target)
        return RedirectResponse(exc.target, status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(BackendUnauthorizedError)
    async def handle_backend_unauthorized(request: Request, _: BackendUnauthorizedError) -> RedirectResponse:
        logger.info(
            "session.expired method=%s path=%s",
            request.method,
            safe_log_path(request.url.path),
        )
        return _end_session_redirect(request, PUBLIC_ROUTE)

    @app.exception_handler(BackendError)
    async def handle_backend_error(request: Request, exc: BackendError) -> JSONResponse:
        principal = getattr(request.state, "principal", None)
        logger.warning(
            "backend.failed principal_id=%s method=%s path=%s status=%s",
            safe_log_identifier(getattr(principal, "id", None), prefix="pid"),
            request.method,
            safe_log_path(request.url.path),
            exc.status_code,
        )
        payload = ErrorResponse(code="BACKEND_ERROR", message=str(exc) or "Backend request failed")
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=payload.model_dump(exclude_none=True))

    app.include_router(auth_router)
    app.include_router(shell_router)
    app.include_router(board_router)

    return app


app = create_app()
