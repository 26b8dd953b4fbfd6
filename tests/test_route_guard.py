"""
Test route guard decisions
"""

import pytest

from app.core.route_guard import RouteAction, decide_route, is_public_route, should_guard


@pytest.mark.parametrize(
    "authenticated, path, action, location",
    [
        (False, "/", RouteAction.ALLOW, None),
        (True, "/", RouteAction.ALLOW, None),
        (False, "/sign-in", RouteAction.ALLOW, None),
        (False, "/sign-up/verify", RouteAction.ALLOW, None),
        (True, "/sign-in", RouteAction.REDIRECT, "/dashboard"),
        (True, "/sign-up", RouteAction.REDIRECT, "/dashboard"),
        (True, "/dashboard", RouteAction.ALLOW, None),
        (False, "/dashboard", RouteAction.REDIRECT, "/sign-in"),
        (False, "/dashboard/starred", RouteAction.REDIRECT, "/sign-in"),
        (False, "/api/v1/files/", RouteAction.DENY, None),
        (False, "/trpc/files.list", RouteAction.DENY, None),
        (True, "/api/v1/files/", RouteAction.ALLOW, None),
        (False, "/health", RouteAction.ALLOW, None),
        (True, "/health", RouteAction.ALLOW, None),
        (False, "/api/v1/docs", RouteAction.ALLOW, None),
        (False, "/api/v1/openapi.json", RouteAction.ALLOW, None),
        (False, "/favicon.ico", RouteAction.ALLOW, None),
        (False, "/_next/static/chunk.js", RouteAction.ALLOW, None),
    ],
)
def test_decide_route(authenticated: bool, path: str, action: RouteAction, location: str | None):
    decision = decide_route(authenticated, path)

    assert decision.action == action
    assert decision.location == location


def test_public_routes():
    assert is_public_route("/")
    assert is_public_route("/sign-in/factor-one")
    assert not is_public_route("/signin")
    assert not is_public_route("/dashboard")


def test_static_assets_are_not_guarded():
    assert not should_guard("/logo.svg")
    assert not should_guard("/fonts/inter.woff2")
    # JSON is data, not a static asset
    assert should_guard("/data.json")
    assert should_guard("/api/v1/files/")
