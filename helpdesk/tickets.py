"""Ticket lifecycle: creation, service additions, status changes and listings.

A ticket links one client, one technician and a set of catalog services. It
can only be opened for a technician who has an availability slot at the
current hour. Status moves freely between open, in_progress and closed; only
the assigned technician or an admin may change it or add services.

Each link stores the service price at the moment it was added, and ticket
totals are summed from those captured prices.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from helpdesk import catalog, models, policy
from helpdesk.auth import Actor
from helpdesk.errors import NotFound, TechnicianUnavailable, TicketNotFound

logger = logging.getLogger(__name__)


def current_slot(now: Optional[datetime] = None) -> str:
    """Local wall-clock hour as an availability slot, e.g. ``"14:00"``."""
    now = now or datetime.now()
    return f"{now.hour:02d}:00"


def format_price(value: Decimal) -> str:
    return f"{Decimal(value):.2f}"


def ticket_detail(ticket: models.TicketModel) -> dict:
    """Project a ticket with its linked services and summed total price."""
    links = sorted(ticket.links, key=lambda link: (link.service.title, link.service_id))
    total = sum((Decimal(link.unit_price) for link in links), Decimal("0"))
    return {
        "id": ticket.id,
        "client_id": ticket.client_id,
        "tech_id": ticket.tech_id,
        "status": ticket.status,
        "created_at": ticket.created_at,
        "updated_at": ticket.updated_at,
        "services": [
            {"id": link.service_id, "title": link.service.title, "price": format_price(link.unit_price)}
            for link in links
        ],
        "total_price": format_price(total),
    }


def get_ticket(db: Session, ticket_id: str) -> models.TicketModel:
    ticket = db.get(models.TicketModel, str(ticket_id))
    if not ticket:
        raise TicketNotFound()
    return ticket


def _tech_available(db: Session, tech_id: str, slot: str) -> bool:
    tech = db.get(models.UserModel, str(tech_id))
    if not tech or tech.role != models.UserRole.TECH.value:
        return False
    hit = (
        db.query(models.TechnicianAvailabilityModel.id)
        .filter(
            models.TechnicianAvailabilityModel.user_id == tech.id,
            models.TechnicianAvailabilityModel.time == slot,
        )
        .first()
    )
    return hit is not None


def create_ticket(db: Session, client_id: str, tech_id: str, service_ids: Iterable[str]) -> dict:
    slot = current_slot()
    if not _tech_available(db, tech_id, slot):
        raise TechnicianUnavailable(f"Technician does not exist or is not available at {slot}")

    services = catalog.resolve_active_services(db, service_ids)

    client = db.get(models.UserModel, str(client_id))
    if not client or client.role != models.UserRole.CLIENT.value:
        raise NotFound("Client not found")

    now = datetime.now(timezone.utc)
    ticket = models.TicketModel(
        id=str(uuid.uuid4()),
        client_id=client.id,
        tech_id=str(tech_id),
        status=models.TicketStatus.OPEN.value,
        created_at=now,
        updated_at=now,
    )
    ticket.links = [
        models.TicketServiceModel(service_id=s.id, service=s, unit_price=s.price) for s in services
    ]

    # ticket row and its links are committed together
    try:
        db.add(ticket)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Created ticket id=%s client=%s tech=%s services=%d", ticket.id, ticket.client_id, ticket.tech_id, len(services))
    return ticket_detail(ticket)


def add_services_to_ticket(db: Session, ticket_id: str, actor: Actor, service_ids: Iterable[str]) -> List[str]:
    """Link more services to a ticket; ids already linked are skipped.

    Returns every service id linked to the ticket after the call.
    """
    ticket = get_ticket(db, ticket_id)
    policy.require_ticket_manager(actor, ticket)
    services = catalog.resolve_active_services(db, service_ids)

    added = _link_missing(ticket, services)
    if added:
        try:
            db.commit()
        except IntegrityError:
            # another request linked some of these services first; rollback
            # reloads ticket.links, so only the still-missing ones are added
            db.rollback()
            added = _link_missing(ticket, services)
            if added:
                db.commit()
        if added:
            logger.info("Added %d service(s) to ticket id=%s", added, ticket.id)

    return sorted(link.service_id for link in ticket.links)


def _link_missing(ticket: models.TicketModel, services: List[models.ServiceModel]) -> int:
    linked = {link.service_id for link in ticket.links}
    added = 0
    for service in services:
        if service.id in linked:
            continue
        ticket.links.append(models.TicketServiceModel(service_id=service.id, service=service, unit_price=service.price))
        linked.add(service.id)
        added += 1
    if added:
        ticket.updated_at = datetime.now(timezone.utc)
    return added


def update_status(db: Session, ticket_id: str, actor: Actor, new_status: models.TicketStatus) -> models.TicketModel:
    """Overwrite the ticket status; any of the three values may follow any other."""
    ticket = get_ticket(db, ticket_id)
    policy.require_ticket_manager(actor, ticket)

    previous = ticket.status
    ticket.status = models.TicketStatus(new_status).value
    ticket.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(ticket)

    logger.info("Ticket id=%s status %s -> %s by %s", ticket.id, previous, ticket.status, actor.id)
    return ticket


def _ticket_query(db: Session):
    return db.query(models.TicketModel).options(
        selectinload(models.TicketModel.links).joinedload(models.TicketServiceModel.service)
    )


def show_client_history(db: Session, client_id: str) -> List[dict]:
    tickets = (
        _ticket_query(db)
        .filter(models.TicketModel.client_id == str(client_id))
        .order_by(models.TicketModel.created_at.desc(), models.TicketModel.id)
        .all()
    )
    return [ticket_detail(t) for t in tickets]


def list_tech_tickets(db: Session, tech_id: str) -> List[dict]:
    tickets = (
        _ticket_query(db)
        .filter(models.TicketModel.tech_id == str(tech_id))
        .order_by(models.TicketModel.created_at.asc(), models.TicketModel.id)
        .all()
    )
    return [ticket_detail(t) for t in tickets]


def list_all_tickets(db: Session) -> List[dict]:
    tickets = _ticket_query(db).order_by(models.TicketModel.created_at.asc(), models.TicketModel.id).all()
    return [ticket_detail(t) for t in tickets]


__all__ = [
    "current_slot",
    "format_price",
    "ticket_detail",
    "get_ticket",
    "create_ticket",
    "add_services_to_ticket",
    "update_status",
    "show_client_history",
    "list_tech_tickets",
    "list_all_tickets",
]
