"""Protected shell routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from managersol.domain.access import DASHBOARD_ROUTE, PROFILE_ROUTE, dashboard_variant_for, sidebar_variant_for
from managersol.routes.dependencies import get_session_service, require_route, require_shell_principal
from managersol.schemas.auth import Principal, PrincipalProfile
from managersol.schemas.views import DashboardView, ShellView
from managersol.services.session import SessionService

router = APIRouter(tags=["Shell"], dependencies=[Depends(require_shell_principal)])


@router.get("/shell", response_model=ShellView)
async def get_shell(
    principal: Annotated[Principal, Depends(require_shell_principal)],
    session: Annotated[SessionService, Depends(get_session_service)],
) -> ShellView:
    return ShellView(
        principal=principal.to_profile(),
        sidebar=sidebar_variant_for(principal.role),
        company_id=session.get_company_id(),
    )


@router.get(DASHBOARD_ROUTE, response_model=DashboardView)
async def get_dashboard(
    principal: Annotated[Principal, Depends(require_route(DASHBOARD_ROUTE))],
) -> DashboardView:
    return DashboardView(view=dashboard_variant_for(principal.role))


@router.get(PROFILE_ROUTE, response_model=PrincipalProfile)
async def get_profile(
    principal: Annotated[Principal, Depends(require_route(PROFILE_ROUTE))],
) -> PrincipalProfile:
    return principal.to_profile()
