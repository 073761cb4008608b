"""View descriptors returned by the dashboard routes."""

from enum import Enum

from pydantic import BaseModel

from managersol.schemas.auth import PrincipalProfile


class DashboardKind(str, Enum):
    SUPER_ADMIN_DASHBOARD = "SuperAdminDashboard"
    ADMIN_DASHBOARD = "AdminDashboard"


class SidebarKind(str, Enum):
    SUPER_ADMIN_SIDEBAR = "SuperAdminSidebar"
    ADMIN_SIDEBAR = "AdminSidebar"


class LoginView(BaseModel):
    view: str = "Login"


class DashboardView(BaseModel):
    view: DashboardKind | None


class ShellView(BaseModel):
    principal: PrincipalProfile
    sidebar: SidebarKind | None
    company_id: str | None = None


class SplashView(BaseModel):
    """Splash screen: redirect to ``target`` after ``delay_seconds``, or at once on skip."""

    view: str = "Splash"
    target: str
    delay_seconds: int
