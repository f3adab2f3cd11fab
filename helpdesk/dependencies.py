"""Common FastAPI dependency helpers for permissions and DB access.

Provides:
- require_roles(...)        (role gate built on `policy.require_role`)
- require_admin / require_tech_or_admin
- self_or_admin(...)        (path `{user_id}` must be the actor, unless admin)

Each guard runs as a dependency, so a denial is returned before the request
body is validated or any business rule is evaluated.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends

from helpdesk import models, policy
from helpdesk.auth import Actor, get_current_actor

Role = models.UserRole


def require_roles(*roles: Role, reason: str = "Access denied"):
    """Return a dependency that lets through only actors whose role is in `roles`."""

    def _guard(actor: Actor = Depends(get_current_actor)) -> Actor:
        return policy.require_role(actor, *roles, reason=reason)

    return _guard


require_admin = require_roles(Role.ADMIN, reason="Access denied: admin access required")
require_tech_or_admin = require_roles(Role.TECH, Role.ADMIN, reason="Access denied: technician or admin access required")


def self_or_admin(*roles: Role):
    """Dependency for `/{user_id}` routes: role must be in `roles` and the actor must own the id (or be admin).

    With no `roles` any authenticated role passes the role check.
    """

    def _guard(user_id: UUID, actor: Actor = Depends(get_current_actor)) -> Actor:
        if roles:
            policy.require_role(actor, *roles, reason="Access denied: this endpoint is not available for your role")
        return policy.require_self_or_admin(actor, str(user_id))

    return _guard


__all__ = [
    "require_roles",
    "require_admin",
    "require_tech_or_admin",
    "self_or_admin",
]
