"""
Route guard

Pure decision over (authenticated?, path):

    public route, signed in, path != "/"     -> redirect to AFTER_SIGN_IN_URL
    public route otherwise                    -> allow
    protected route, signed in                -> allow
    protected API route, anonymous            -> deny (401)
    protected page route, anonymous           -> redirect to SIGN_IN_URL

Health, docs and static assets are never guarded; other API routes always are.
"""

import re
from dataclasses import dataclass
from enum import Enum

from app.core.config import settings


class RouteAction(str, Enum):
    """Route guard outcome"""

    ALLOW = "allow"
    REDIRECT = "redirect"
    DENY = "deny"


@dataclass(frozen=True)
class RouteDecision:
    action: RouteAction
    location: str | None = None


PUBLIC_ROUTE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p)
    for p in (
        r"^/$",
        r"^/sign-in(.*)$",
        r"^/sign-up(.*)$",
    )
)

# Health and API docs: open to everyone, never redirected
OPEN_ROUTE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p)
    for p in (
        r"^/health$",
        r"^/api/latest/docs$",
        rf"^{re.escape(settings.API_V1_STR)}/(openapi\.json|docs|redoc)$",
    )
)

STATIC_ASSET_PATTERN = re.compile(
    r"^/_next/|\.(?:html?|css|js(?!on)|jpe?g|webp|png|gif|svg|ttf|woff2?|ico|csv|docx?|xlsx?|zip|webmanifest)$",
    re.IGNORECASE,
)

API_ROUTE_PATTERN = re.compile(r"^/(api|trpc)(/|$)")


def is_public_route(path: str) -> bool:
    return any(p.match(path) for p in PUBLIC_ROUTE_PATTERNS)


def is_api_route(path: str) -> bool:
    return API_ROUTE_PATTERN.match(path) is not None


def is_open_route(path: str) -> bool:
    return any(p.match(path) for p in OPEN_ROUTE_PATTERNS)


def should_guard(path: str) -> bool:
    """Open routes and static assets are never guarded; other API routes always are"""
    if is_open_route(path):
        return False
    if is_api_route(path):
        return True
    return STATIC_ASSET_PATTERN.search(path) is None


def decide_route(authenticated: bool, path: str) -> RouteDecision:
    """
    Decide whether a request may proceed

    Args:
        authenticated: Whether the identity provider vouched for the caller
        path: Request path (no query string)
    """
    if not should_guard(path):
        return RouteDecision(RouteAction.ALLOW)

    if is_public_route(path):
        if authenticated and path != "/":
            return RouteDecision(RouteAction.REDIRECT, settings.AFTER_SIGN_IN_URL)
        return RouteDecision(RouteAction.ALLOW)

    if authenticated:
        return RouteDecision(RouteAction.ALLOW)

    if is_api_route(path):
        return RouteDecision(RouteAction.DENY)
    return RouteDecision(RouteAction.REDIRECT, settings.SIGN_IN_URL)
