"""User directory: admin, technician and client accounts.

Covers account creation (technicians get the default business-hour
availability), full-overwrite updates, technician availability replacement,
profile pictures and client deletion. Functions take an open `Session`, raise
`helpdesk.errors` exceptions on business-rule failures and commit their own
work.
"""

from __future__ import annotations

import base64
import logging
import uuid
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from helpdesk import models
from helpdesk.auth import get_password_hash
from helpdesk.config import settings
from helpdesk.errors import EmailInUse, NotFound

logger = logging.getLogger(__name__)

Role = models.UserRole

DEFAULT_AVAILABILITY = ("08:00", "09:00", "10:00", "11:00", "14:00", "15:00", "16:00", "17:00")

_NOT_FOUND_MESSAGES = {
    Role.ADMIN: "Admin not found",
    Role.TECH: "Technician not found",
    Role.CLIENT: "Client not found",
}


def get_user(db: Session, user_id: str) -> Optional[models.UserModel]:
    return db.get(models.UserModel, str(user_id))


def get_user_with_role(db: Session, user_id: str, role: Role) -> models.UserModel:
    user = get_user(db, user_id)
    if not user or user.role != role.value:
        raise NotFound(_NOT_FOUND_MESSAGES[role])
    return user


def _ensure_email_free(db: Session, email: str, owner_id: Optional[str] = None) -> None:
    existing = db.query(models.UserModel).filter(models.UserModel.email == email).first()
    if existing and existing.id != owner_id:
        raise EmailInUse("Email already in use" if owner_id is None else "Email already in use by another account")


def _availability_rows(user_id: str, slots: Iterable[str]) -> List[models.TechnicianAvailabilityModel]:
    return [models.TechnicianAvailabilityModel(user_id=user_id, time=slot) for slot in sorted(set(slots))]


def _create_account(db: Session, name: str, email: str, password: str, role: Role, slots: Iterable[str] = ()) -> models.UserModel:
    _ensure_email_free(db, email)

    user = models.UserModel(
        id=str(uuid.uuid4()),
        name=name,
        email=email,
        password_hash=get_password_hash(password),
        role=role.value,
    )
    user.availabilities = _availability_rows(user.id, slots) if slots else []

    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        # lost a race against another signup with the same email
        db.rollback()
        raise EmailInUse()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)

    logger.info("Created %s account id=%s", role.value, user.id)
    return user


def create_tech_account(db: Session, name: str, email: str, password: str) -> models.UserModel:
    return _create_account(db, name, email, password, Role.TECH, slots=DEFAULT_AVAILABILITY)


def create_client_account(db: Session, name: str, email: str, password: str) -> models.UserModel:
    return _create_account(db, name, email, password, Role.CLIENT)


def create_admin_account(db: Session, name: str, email: str, password: str) -> models.UserModel:
    return _create_account(db, name, email, password, Role.ADMIN)


def update_account(db: Session, user_id: str, role: Role, new_name: str, new_email: str, new_password: str) -> models.UserModel:
    """Overwrite name, email and password of an account of the given role.

    All three fields are replaced; there is no partial update.
    """
    user = get_user_with_role(db, user_id, role)
    _ensure_email_free(db, new_email, owner_id=user.id)

    user.name = new_name
    user.email = new_email
    user.password_hash = get_password_hash(new_password)

    try:
        db.commit()
    except IntegrityError:
        # the email was taken between the check and the commit
        db.rollback()
        raise EmailInUse("Email already in use by another account")
    db.refresh(user)

    logger.info("Updated %s account id=%s", role.value, user.id)
    return user


def update_tech_availabilities(db: Session, tech_id: str, slots: Iterable[str]) -> List[str]:
    """Replace the whole availability set of a technician in one transaction."""
    tech = get_user_with_role(db, tech_id, Role.TECH)

    try:
        db.query(models.TechnicianAvailabilityModel).filter(
            models.TechnicianAvailabilityModel.user_id == tech.id
        ).delete(synchronize_session=False)
        db.add_all(_availability_rows(tech.id, slots))
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.expire(tech, ["availabilities"])
    logger.info("Replaced availabilities for tech id=%s", tech.id)
    return tech.slots


def picture_url(user_id: str) -> str:
    return f"{settings.public_base_url}/users/picture/{user_id}"


def update_user_picture(db: Session, user_id: str, content: bytes, content_type: Optional[str] = None) -> str:
    """Store `content` as a base64 data URL on the user and return its public URL."""
    user = get_user(db, user_id)
    if not user:
        raise NotFound("User not found")

    encoded = base64.b64encode(content).decode("ascii")
    user.picture = f"data:{content_type or 'application/octet-stream'};base64,{encoded}"
    db.commit()

    return picture_url(user.id)


def get_user_picture(db: Session, user_id: str) -> Optional[str]:
    user = get_user(db, user_id)
    if not user:
        raise NotFound("User not found")
    return user.picture


def delete_client_account(db: Session, client_id: str) -> None:
    client = get_user_with_role(db, client_id, Role.CLIENT)
    db.delete(client)
    db.commit()
    logger.info("Deleted client account id=%s", client_id)


def list_tech_accounts(db: Session) -> List[models.UserModel]:
    return (
        db.query(models.UserModel)
        .options(selectinload(models.UserModel.availabilities))
        .filter(models.UserModel.role == Role.TECH.value)
        .order_by(models.UserModel.created_at)
        .all()
    )


def list_client_accounts(db: Session) -> List[models.UserModel]:
    return (
        db.query(models.UserModel)
        .filter(models.UserModel.role == Role.CLIENT.value)
        .order_by(models.UserModel.created_at)
        .all()
    )


__all__ = [
    "DEFAULT_AVAILABILITY",
    "get_user",
    "get_user_with_role",
    "create_tech_account",
    "create_client_account",
    "create_admin_account",
    "update_account",
    "update_tech_availabilities",
    "picture_url",
    "update_user_picture",
    "get_user_picture",
    "delete_client_account",
    "list_tech_accounts",
    "list_client_accounts",
]
