"""
Caller identity

Authentication is delegated to the identity provider. Its gateway forwards the
authenticated subject id in the OWNER_ID_HEADER header; that id becomes the
owner_id of every file tree operation. Optional API keys gate machine callers.
"""

from typing import Any

from fastapi import HTTPException, Request, status

from app.core.config import settings
from app.core.logger import get_logger

logger = get_logger(__name__)


def read_owner_id(request: Request) -> str | None:
    """Subject id forwarded by the identity provider, if any"""
    owner_id = request.headers.get(settings.OWNER_ID_HEADER, "").strip()
    return owner_id or None


def read_api_key(request: Request) -> str | None:
    api_key = request.headers.get("x-api-key")
    if not api_key:
        # Optional: support Authorization: Bearer <key>
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            api_key = auth_header.split(" ", 1)[1].strip()
    return api_key or None


def check_api_key(request: Request) -> tuple[bool, str | None]:
    """
    Validate the caller's API key when keys are configured

    Returns:
        (accepted, reason) - reason is set when the key is rejected
    """
    if not settings.api_keys:
        return True, None

    api_key = read_api_key(request)
    if not api_key or api_key not in settings.api_keys:
        return False, "Invalid or missing API key"

    key_info: dict[str, Any] = settings.api_keys[api_key]
    if not key_info["enabled"]:
        return False, "API key is disabled"

    # Store key info in request state for endpoint use (audit / admin checks)
    request.state.api_key_info = key_info
    return True, None


async def get_current_owner(request: Request) -> str:
    """
    Dependency for getting the owner id of the current request
    """
    owner_id = read_owner_id(request)
    if owner_id is None:
        logger.warning(f"Access denied: missing {settings.OWNER_ID_HEADER} header on {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return owner_id
