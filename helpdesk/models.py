"""SQLAlchemy models for the help-desk backend.

Models implemented:
- UserModel (admins, technicians and clients)
- TechnicianAvailabilityModel
- ServiceModel
- TicketModel
- TicketServiceModel (ticket <-> service junction)

Uses SQLAlchemy 2.0 typing (Mapped, mapped_column) and the declarative Base from `helpdesk.database`.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum as PyEnum
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from helpdesk.database import Base


class UserRole(str, PyEnum):
    ADMIN = "admin"
    TECH = "tech"
    CLIENT = "client"


class TicketStatus(str, PyEnum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserModel(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), index=True, nullable=False)
    picture: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    # Relationships
    availabilities: Mapped[List["TechnicianAvailabilityModel"]] = relationship(
        "TechnicianAvailabilityModel",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TechnicianAvailabilityModel.time",
    )
    tickets_as_client: Mapped[List["TicketModel"]] = relationship(
        "TicketModel", back_populates="client", foreign_keys="TicketModel.client_id", cascade="all, delete-orphan", passive_deletes=True
    )
    tickets_as_tech: Mapped[List["TicketModel"]] = relationship(
        "TicketModel", back_populates="tech", foreign_keys="TicketModel.tech_id", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def slots(self) -> List[str]:
        return sorted(a.time for a in self.availabilities)

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"<User id={self.id} email={self.email} role={self.role}>"


class TechnicianAvailabilityModel(Base):
    __tablename__ = "technician_availability"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    time: Mapped[str] = mapped_column(String(5), nullable=False)

    user = relationship("UserModel", back_populates="availabilities")

    def __repr__(self) -> str:
        return f"<Availability user_id={self.user_id} time={self.time}>"


class ServiceModel(Base):
    __tablename__ = "services"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Service id={self.id} title={self.title} active={self.active}>"


class TicketModel(Base):
    __tablename__ = "tickets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    client_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    tech_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    status: Mapped[str] = mapped_column(String(32), default=TicketStatus.OPEN.value, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    # Relationships
    client = relationship("UserModel", back_populates="tickets_as_client", foreign_keys=[client_id])
    tech = relationship("UserModel", back_populates="tickets_as_tech", foreign_keys=[tech_id])
    links: Mapped[List["TicketServiceModel"]] = relationship(
        "TicketServiceModel",
        back_populates="ticket",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Ticket id={self.id} client_id={self.client_id} tech_id={self.tech_id} status={self.status}>"


class TicketServiceModel(Base):
    __tablename__ = "ticket_services"

    ticket_id: Mapped[str] = mapped_column(String(36), ForeignKey("tickets.id", ondelete="CASCADE"), primary_key=True)
    service_id: Mapped[str] = mapped_column(String(36), ForeignKey("services.id"), primary_key=True)
    # Price of the service when it was linked; ticket totals are computed from it.
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    ticket = relationship("TicketModel", back_populates="links")
    service = relationship("ServiceModel", lazy="joined")

    def __repr__(self) -> str:
        return f"<TicketService ticket_id={self.ticket_id} service_id={self.service_id}>"


__all__ = [
    "UserRole",
    "TicketStatus",
    "UserModel",
    "TechnicianAvailabilityModel",
    "ServiceModel",
    "TicketModel",
    "TicketServiceModel",
]
