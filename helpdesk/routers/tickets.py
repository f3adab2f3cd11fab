"""Ticket routes: creation, per-role listings, service additions and status changes."""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from helpdesk import schemas, tickets
from helpdesk.auth import Actor
from helpdesk.database import get_db
from helpdesk.dependencies import require_roles, require_tech_or_admin
from helpdesk.models import UserRole

router = APIRouter(prefix="/tickets", tags=["Tickets"])

_client_creates = require_roles(UserRole.CLIENT, reason="Access denied: only clients can open tickets")
_client_history = require_roles(UserRole.CLIENT, reason="Access denied: only clients can see their ticket history")
_tech_lists = require_roles(UserRole.TECH, reason="Access denied: only technicians can list their tickets")
_admin_lists = require_roles(UserRole.ADMIN, reason="Access denied: only admins can list every ticket")


@router.post("", response_model=schemas.TicketDetail, status_code=status.HTTP_201_CREATED)
async def create_ticket(payload: schemas.TicketCreate, db: Session = Depends(get_db), client: Actor = Depends(_client_creates)) -> schemas.TicketDetail:
    """Open a ticket for the authenticated client; the client id always comes from the token."""
    detail = tickets.create_ticket(db, client.id, str(payload.tech_id), [str(sid) for sid in payload.service_ids])
    return schemas.TicketDetail.model_validate(detail)


@router.get("/clientHistory", response_model=List[schemas.TicketDetail])
async def show_client_history(db: Session = Depends(get_db), client: Actor = Depends(_client_history)) -> List[schemas.TicketDetail]:
    """The client's own tickets, newest first."""
    return [schemas.TicketDetail.model_validate(t) for t in tickets.show_client_history(db, client.id)]


@router.get("/tech", response_model=List[schemas.TicketDetail])
async def list_tech_tickets(db: Session = Depends(get_db), tech: Actor = Depends(_tech_lists)) -> List[schemas.TicketDetail]:
    """Tickets assigned to the technician, oldest first."""
    return [schemas.TicketDetail.model_validate(t) for t in tickets.list_tech_tickets(db, tech.id)]


@router.get("/list", response_model=List[schemas.TicketDetail])
async def list_all_tickets(db: Session = Depends(get_db), _admin: Actor = Depends(_admin_lists)) -> List[schemas.TicketDetail]:
    return [schemas.TicketDetail.model_validate(t) for t in tickets.list_all_tickets(db)]


@router.put("/addServices/{ticket_id}", response_model=schemas.TicketServicesResponse)
async def add_services_to_ticket(
    ticket_id: UUID,
    payload: schemas.AddServicesRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_tech_or_admin),
) -> schemas.TicketServicesResponse:
    linked = tickets.add_services_to_ticket(db, str(ticket_id), actor, [str(sid) for sid in payload.service_ids])
    return schemas.TicketServicesResponse(ticket_id=str(ticket_id), service_ids=linked)


@router.put("/status/{ticket_id}", response_model=schemas.TicketResponse)
async def update_ticket_status(
    ticket_id: UUID,
    payload: schemas.StatusUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_tech_or_admin),
) -> schemas.TicketResponse:
    ticket = tickets.update_status(db, str(ticket_id), actor, payload.status)
    return schemas.TicketResponse.model_validate(ticket)
