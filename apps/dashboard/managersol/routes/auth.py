"""Public routes: landing, splash, login and logout."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from managersol.adapters.backend import BackendClient
from managersol.domain.access import (
    DASHBOARD_ROUTE,
    PUBLIC_ROUTE,
    SPLASH_REDIRECT_DELAY_SECONDS,
    SPLASH_ROUTE,
    RedirectTo,
    resolve_landing_route,
    resolve_splash_target,
)
from managersol.repositories.boards import BoardRegistry
from managersol.routes.dependencies import (
    get_backend_client,
    get_board_registry,
    get_optional_principal,
    get_session_service,
)
from managersol.schemas.auth import LoginRequest, Principal
from managersol.schemas.error import ErrorResponse
from managersol.schemas.views import LoginView, SplashView
from managersol.services.session import SessionService

router = APIRouter(tags=["Auth"])


@router.get("/", response_model=LoginView, responses={303: {"description": "Session exists"}})
async def landing(
    principal: Annotated[Principal | None, Depends(get_optional_principal)],
):
    decision = resolve_landing_route(principal)
    if isinstance(decision, RedirectTo):
        return RedirectResponse(decision.target, status_code=status.HTTP_303_SEE_OTHER)
    return LoginView()


@router.get(SPLASH_ROUTE, response_model=SplashView)
async def splash(
    principal: Annotated[Principal | None, Depends(get_optional_principal)],
) -> SplashView:
    return SplashView(target=resolve_splash_target(principal), delay_seconds=SPLASH_REDIRECT_DELAY_SECONDS)


@router.get(f"{SPLASH_ROUTE}/skip", status_code=status.HTTP_303_SEE_OTHER)
async def skip_splash(
    principal: Annotated[Principal | None, Depends(get_optional_principal)],
) -> RedirectResponse:
    return RedirectResponse(resolve_splash_target(principal), status_code=status.HTTP_303_SEE_OTHER)


@router.post(
    "/auth/login",
    status_code=status.HTTP_303_SEE_OTHER,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def login(
    payload: LoginRequest,
    session: Annotated[SessionService, Depends(get_session_service)],
    backend: Annotated[BackendClient, Depends(get_backend_client)],
) -> RedirectResponse:
    await session.login(backend, email=payload.email, password=payload.password)
    response = RedirectResponse(DASHBOARD_ROUTE, status_code=status.HTTP_303_SEE_OTHER)
    session.apply_to(response)
    return response


@router.post("/auth/logout", status_code=status.HTTP_303_SEE_OTHER)
async def logout(
    session: Annotated[SessionService, Depends(get_session_service)],
    registry: Annotated[BoardRegistry, Depends(get_board_registry)],
) -> RedirectResponse:
    principal = session.get_principal()
    if principal is not None:
        registry.discard(principal.id)
    session.end_session()
    response = RedirectResponse(PUBLIC_ROUTE, status_code=status.HTTP_303_SEE_OTHER)
    session.apply_to(response)
    return response
