"""Access policy predicates.

Plain functions over an `Actor` that raise `Forbidden` with a readable reason
when the actor may not perform an action. They never touch the database, so
they can be evaluated before any business rule runs.
"""

from __future__ import annotations

import logging

from helpdesk import models
from helpdesk.auth import Actor
from helpdesk.errors import Forbidden

logger = logging.getLogger(__name__)

Role = models.UserRole


def require_role(actor: Actor, *roles: Role, reason: str = "Access denied") -> Actor:
    if actor.role not in roles:
        logger.debug("require_role: denied for actor=%s role=%s allowed=%s", actor.id, actor.role.value, [r.value for r in roles])
        raise Forbidden(reason)
    return actor


def is_self_or_admin(actor: Actor, resource_id: str) -> bool:
    return actor.is_admin or actor.id == str(resource_id)


def require_self_or_admin(actor: Actor, resource_id: str, reason: str = "Access denied: you can only manage your own account") -> Actor:
    if not is_self_or_admin(actor, resource_id):
        logger.debug("require_self_or_admin: denied for actor=%s resource=%s", actor.id, resource_id)
        raise Forbidden(reason)
    return actor


def can_manage_ticket(actor: Actor, ticket: models.TicketModel) -> bool:
    """Admins manage every ticket; technicians only the ones assigned to them."""
    if actor.is_admin:
        return True
    return actor.role is Role.TECH and ticket.tech_id == actor.id


def require_ticket_manager(actor: Actor, ticket: models.TicketModel) -> Actor:
    if not can_manage_ticket(actor, ticket):
        logger.debug("require_ticket_manager: denied for actor=%s ticket=%s", actor.id, ticket.id)
        raise Forbidden("Access denied: only the assigned technician or an admin can change this ticket")
    return actor


__all__ = [
    "require_role",
    "is_self_or_admin",
    "require_self_or_admin",
    "can_manage_ticket",
    "require_ticket_manager",
]
