"""Route guard and role mapping tests."""

from __future__ import annotations

import unittest

from managersol.domain.access import (
    BOARD_ROUTE,
    DASHBOARD_ROUTE,
    PROFILE_ROUTE,
    Allow,
    RedirectTo,
    RenderLogin,
    allowed_roles_for,
    dashboard_variant_for,
    guard_route,
    guard_shell,
    resolve_landing_route,
    resolve_splash_target,
    sidebar_variant_for,
)
from managersol.schemas.auth import Principal, Role
from managersol.schemas.views import DashboardKind, SidebarKind


def _principal(role: Role, principal_id: str = "user-1") -> Principal:
    return Principal(id=principal_id, role=role, token=f"token-{principal_id}")


class GuardShellTests(unittest.TestCase):
    def test_missing_session_redirects_to_public_route(self) -> None:
        self.assertEqual(guard_shell(None), RedirectTo("/"))

    def test_any_principal_is_allowed_into_the_shell(self) -> None:
        for role in Role:
            with self.subTest(role=role):
                self.assertEqual(guard_shell(_principal(role)), Allow())


class GuardRouteTests(unittest.TestCase):
    def test_missing_session_always_redirects_to_public_route(self) -> None:
        for allowed in (None, frozenset(), frozenset({Role.ADMIN})):
            with self.subTest(allowed=allowed):
                self.assertEqual(guard_route(None, allowed), RedirectTo("/"))

    def test_user_role_outside_allowed_set_redirects_to_dashboard(self) -> None:
        user = _principal(Role.USER)
        self.assertEqual(guard_route(user, {Role.ADMIN}), RedirectTo("/dashboard"))

    def test_absent_or_empty_role_set_allows_any_principal(self) -> None:
        user = _principal(Role.USER)
        self.assertEqual(guard_route(user, None), Allow())
        self.assertEqual(guard_route(user, set()), Allow())

    def test_member_role_is_allowed(self) -> None:
        for role in (Role.SUPER_ADMIN, Role.ADMIN):
            with self.subTest(role=role):
                self.assertEqual(guard_route(_principal(role), {Role.SUPER_ADMIN, Role.ADMIN}), Allow())

    def test_redirect_targets_are_limited_to_two_routes(self) -> None:
        targets = set()
        for principal in (None, *(_principal(role) for role in Role)):
            for allowed in (None, {Role.ADMIN}, {Role.SUPER_ADMIN}, {Role.USER}):
                decision = guard_route(principal, allowed)
                if isinstance(decision, RedirectTo):
                    targets.add(decision.target)
        self.assertEqual(targets, {"/", "/dashboard"})

    def test_route_rule_table(self) -> None:
        self.assertEqual(allowed_roles_for(DASHBOARD_ROUTE), frozenset({Role.SUPER_ADMIN, Role.ADMIN}))
        self.assertIsNone(allowed_roles_for(PROFILE_ROUTE))
        self.assertEqual(allowed_roles_for(BOARD_ROUTE), frozenset({Role.ADMIN}))
        self.assertIsNone(allowed_roles_for("/not-a-route"))


class LandingRouteTests(unittest.TestCase):
    def test_existing_session_bounces_to_dashboard(self) -> None:
        self.assertEqual(resolve_landing_route(_principal(Role.ADMIN)), RedirectTo("/dashboard"))

    def test_missing_session_renders_login(self) -> None:
        self.assertEqual(resolve_landing_route(None), RenderLogin())

    def test_landing_resolution_is_idempotent(self) -> None:
        for principal in (None, _principal(Role.SUPER_ADMIN)):
            with self.subTest(principal=principal):
                self.assertEqual(resolve_landing_route(principal), resolve_landing_route(principal))


class SplashTargetTests(unittest.TestCase):
    def test_targets_follow_role(self) -> None:
        self.assertEqual(resolve_splash_target(_principal(Role.SUPER_ADMIN)), "/dashboard")
        self.assertEqual(resolve_splash_target(_principal(Role.ADMIN)), "/dashboard")
        self.assertEqual(resolve_splash_target(_principal(Role.USER)), "/profile")

    def test_missing_session_targets_public_route(self) -> None:
        self.assertEqual(resolve_splash_target(None), "/")

    def test_every_role_has_a_target_the_guards_let_it_reach(self) -> None:
        for role in Role:
            with self.subTest(role=role):
                principal = _principal(role)
                target = resolve_splash_target(principal)
                self.assertEqual(guard_route(principal, allowed_roles_for(target)), Allow())


class VariantMappingTests(unittest.TestCase):
    def test_dashboard_variants_are_distinct_for_admin_roles(self) -> None:
        self.assertEqual(dashboard_variant_for(Role.SUPER_ADMIN), DashboardKind.SUPER_ADMIN_DASHBOARD)
        self.assertEqual(dashboard_variant_for("admin"), DashboardKind.ADMIN_DASHBOARD)
        self.assertNotEqual(dashboard_variant_for("superAdmin"), dashboard_variant_for("admin"))

    def test_user_and_unknown_roles_render_no_dashboard(self) -> None:
        for role in (Role.USER, "user", "owner", ""):
            with self.subTest(role=role):
                self.assertIsNone(dashboard_variant_for(role))

    def test_sidebar_variants(self) -> None:
        self.assertEqual(sidebar_variant_for(Role.SUPER_ADMIN), SidebarKind.SUPER_ADMIN_SIDEBAR)
        self.assertEqual(sidebar_variant_for(Role.ADMIN), SidebarKind.ADMIN_SIDEBAR)
        self.assertIsNone(sidebar_variant_for(Role.USER))
        self.assertIsNone(sidebar_variant_for("guest"))


if __name__ == "__main__":
    unittest.main()
