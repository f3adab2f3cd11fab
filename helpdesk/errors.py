"""Centralized API error helpers and the domain error taxonomy.

Provides:
- api_error(...) -> HTTPException with JSON detail: {"error": {"code": str, "message": str, "details": ...}}
- make_validation_error_response(...) -> dict payload used by exception handler
- HelpdeskError and its subclasses, raised by the directory, catalog and ticket
  modules and translated to responses by the handler registered in `helpdesk.main`.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder


def api_error(status_code: int, code: str, message: str, details: Optional[Any] = None, headers: Optional[dict] = None) -> HTTPException:
    return HTTPException(status_code=status_code, detail=error_payload(code, message, details), headers=headers)


def error_payload(code: str, message: str, details: Optional[Any] = None) -> dict:
    payload: dict = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


def make_validation_error_response(errors: Any) -> dict:
    # jsonable_encoder converts the exception objects pydantic may put in `ctx`
    return jsonable_encoder(error_payload("validation_error", "Validation error", errors))


class HelpdeskError(Exception):
    """Base class for business-rule failures scoped to a single request."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "bad_request"
    default_message: str = "Request could not be processed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict:
        return error_payload(self.code, self.message)


class Unauthenticated(HelpdeskError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "not_authenticated"
    default_message = "Invalid or expired token"


class InvalidCredentials(HelpdeskError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_credentials"
    default_message = "Invalid credentials"


class Forbidden(HelpdeskError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "Access denied"


class NotFound(HelpdeskError):
    code = "not_found"
    default_message = "Resource not found"


class TicketNotFound(NotFound):
    code = "ticket_not_found"
    default_message = "Ticket does not exist"


class EmailInUse(HelpdeskError):
    code = "email_in_use"
    default_message = "Email already in use"


class TechnicianUnavailable(HelpdeskError):
    code = "technician_unavailable"
    default_message = "Technician does not exist or is not available at this hour"


class ServiceNotFound(HelpdeskError):
    code = "service_not_found"
    default_message = "Some of the informed services do not exist or are inactive"


__all__ = [
    "api_error",
    "error_payload",
    "make_validation_error_response",
    "HelpdeskError",
    "Unauthenticated",
    "InvalidCredentials",
    "Forbidden",
    "NotFound",
    "TicketNotFound",
    "EmailInUse",
    "TechnicianUnavailable",
    "ServiceNotFound",
]
