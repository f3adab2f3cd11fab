"""Pydantic schemas for the help-desk API.

Request bodies are validated here before any directory, catalog or ticket
logic runs; response models project ORM rows into JSON.
"""

from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_serializer, field_validator

from helpdesk.models import TicketStatus, UserRole

SLOT_PATTERN = re.compile(r"^([01]\d|2[0-3]):00$")


# ----------------------------- Auth ----------------------------------
class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"


# ----------------------------- Users ---------------------------------
class AccountCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)


class AccountUpdate(BaseModel):
    new_name: str = Field(..., min_length=3, max_length=255)
    new_email: EmailStr
    new_password: str = Field(..., min_length=6)


class AvailabilityUpdate(BaseModel):
    new_availabilities: List[str] = Field(..., min_length=1)

    @field_validator("new_availabilities")
    def validate_slots(cls, v):
        for slot in v:
            if not SLOT_PATTERN.match(slot):
                raise ValueError(f"invalid time slot {slot!r}: use the HH:00 format (00-23)")
        return v


class UserResponse(BaseModel):
    id: str
    name: str
    email: EmailStr
    role: UserRole
    created_at: datetime

    model_config = {"from_attributes": True}


class TechResponse(UserResponse):
    availabilities: List[str] = Field(default_factory=list, validation_alias=AliasChoices("slots", "availabilities"))


class AvailabilityResponse(BaseModel):
    tech_id: str
    availabilities: List[str]


class PictureUploadResponse(BaseModel):
    access_url: str


class PictureResponse(BaseModel):
    user_picture: Optional[str]


# ----------------------------- Services ------------------------------
class ServiceIn(BaseModel):
    title: str = Field(..., min_length=3, max_length=255)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class ServiceResponse(BaseModel):
    id: str
    title: str
    price: Decimal
    active: bool

    model_config = {"from_attributes": True}

    @field_serializer("price")
    def serialize_price(self, v: Decimal) -> str:
        return f"{v:.2f}"


# ----------------------------- Tickets -------------------------------
class TicketCreate(BaseModel):
    tech_id: UUID
    service_ids: List[UUID] = Field(..., min_length=1)


class AddServicesRequest(BaseModel):
    service_ids: List[UUID] = Field(..., min_length=1)


class StatusUpdate(BaseModel):
    status: TicketStatus


class TicketServiceLine(BaseModel):
    id: str
    title: str
    price: str


class TicketResponse(BaseModel):
    id: str
    client_id: str
    tech_id: str
    status: TicketStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TicketDetail(TicketResponse):
    services: List[TicketServiceLine]
    total_price: str


class TicketServicesResponse(BaseModel):
    ticket_id: str
    service_ids: List[str]


__all__ = [
    "LoginRequest",
    "TokenResponse",
    "AccountCreate",
    "AccountUpdate",
    "AvailabilityUpdate",
    "UserResponse",
    "TechResponse",
    "AvailabilityResponse",
    "PictureUploadResponse",
    "PictureResponse",
    "ServiceIn",
    "ServiceResponse",
    "TicketCreate",
    "AddServicesRequest",
    "StatusUpdate",
    "TicketServiceLine",
    "TicketResponse",
    "TicketDetail",
    "TicketServicesResponse",
]
