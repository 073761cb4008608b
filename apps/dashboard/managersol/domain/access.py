"""Route access rules and guard decisions.

Every guard returns one of two outcomes: allow, or redirect to a fixed
target. There is no forbidden page: a missing session always lands on ``/``
and a principal without the required role always lands on ``/dashboard``.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass

from managersol.schemas.auth import Principal, Role
from managersol.schemas.views import DashboardKind, SidebarKind

PUBLIC_ROUTE = "/"
DASHBOARD_ROUTE = "/dashboard"
PROFILE_ROUTE = "/profile"
BOARD_ROUTE = "/task-management/board"
SPLASH_ROUTE = "/splash"

SPLASH_REDIRECT_DELAY_SECONDS = 4


@dataclass(frozen=True, slots=True)
class Allow:
    pass


@dataclass(frozen=True, slots=True)
class RedirectTo:
    target: str


@dataclass(frozen=True, slots=True)
class RenderLogin:
    pass


GuardDecision = Allow | RedirectTo
LandingDecision = RedirectTo | RenderLogin

ROUTE_RULES: dict[str, frozenset[Role] | None] = {
    DASHBOARD_ROUTE: frozenset({Role.SUPER_ADMIN, Role.ADMIN}),
    PROFILE_ROUTE: None,
    BOARD_ROUTE: frozenset({Role.ADMIN}),
}

# USER has no admin-area screens; the explicit None keeps the table exhaustive.
_DASHBOARD_VARIANTS: dict[Role, DashboardKind | None] = {
    Role.SUPER_ADMIN: DashboardKind.SUPER_ADMIN_DASHBOARD,
    Role.ADMIN: DashboardKind.ADMIN_DASHBOARD,
    Role.USER: None,
}

_SIDEBAR_VARIANTS: dict[Role, SidebarKind | None] = {
    Role.SUPER_ADMIN: SidebarKind.SUPER_ADMIN_SIDEBAR,
    Role.ADMIN: SidebarKind.ADMIN_SIDEBAR,
    Role.USER: None,
}

_SPLASH_TARGETS: dict[Role, str] = {
    Role.SUPER_ADMIN: DASHBOARD_ROUTE,
    Role.ADMIN: DASHBOARD_ROUTE,
    Role.USER: PROFILE_ROUTE,
}


def guard_shell(principal: Principal | None) -> GuardDecision:
    """Gate the protected shell on the presence of a session."""
    if principal is None:
        return RedirectTo(PUBLIC_ROUTE)
    return Allow()


def guard_route(principal: Principal | None, allowed_roles: Collection[Role] | None) -> GuardDecision:
    """Gate a single route on session presence and role membership."""
    if principal is None:
        return RedirectTo(PUBLIC_ROUTE)
    if allowed_roles and principal.role not in allowed_roles:
        return RedirectTo(DASHBOARD_ROUTE)
    return Allow()


def resolve_landing_route(principal: Principal | None) -> LandingDecision:
    if principal is not None:
        return RedirectTo(DASHBOARD_ROUTE)
    return RenderLogin()


def resolve_splash_target(principal: Principal | None) -> str:
    """Where the splash screen sends the visitor, on its timer or on skip."""
    if principal is None:
        return PUBLIC_ROUTE
    return _SPLASH_TARGETS[principal.role]


def _parse_role(role: Role | str) -> Role | None:
    if isinstance(role, Role):
        return role
    try:
        return Role(role)
    except ValueError:
        return None


def dashboard_variant_for(role: Role | str) -> DashboardKind | None:
    """Return the dashboard to render for ``role``; ``None`` means nothing is rendered."""
    parsed = _parse_role(role)
    if parsed is None:
        return None
    return _DASHBOARD_VARIANTS[parsed]


def sidebar_variant_for(role: Role | str) -> SidebarKind | None:
    parsed = _parse_role(role)
    if parsed is None:
        return None
    return _SIDEBAR_VARIANTS[parsed]


def allowed_roles_for(path: str) -> frozenset[Role] | None:
    return ROUTE_RULES.get(path)
