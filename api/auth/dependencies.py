"""
Auth hook points for place routes.

Nothing is enforced yet: every request runs as the anonymous principal.
Routers depend on these functions (never the services), so a real
implementation only has to replace the bodies below.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

from fastapi import Depends, Header

ANONYMOUS: dict[str, Any] = {"id": None, "roles": ()}


async def get_current_user(authorization: str | None = Header(default=None)) -> dict[str, Any]:
    # The Authorization header is accepted and ignored until tokens exist.
    return ANONYMOUS


def require_roles(*roles: str) -> Callable[..., Awaitable[dict[str, Any]]]:
    """
    Dependency factory for role-gated routes. Currently admits everyone.
    """

    async def _dependency(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
        # TODO: reject principals whose roles do not intersect `roles` once tokens carry roles.
        return current_user

    return _dependency
