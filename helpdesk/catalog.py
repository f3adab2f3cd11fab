"""Service catalog: billable offerings that tickets link to.

Services are never physically deleted; deactivation hides them from listings
and from new ticket operations while existing tickets keep their links.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import Iterable, List

from sqlalchemy.orm import Session

from helpdesk import models
from helpdesk.errors import NotFound, ServiceNotFound

logger = logging.getLogger(__name__)


def get_service(db: Session, service_id: str) -> models.ServiceModel:
    service = db.get(models.ServiceModel, str(service_id))
    if not service:
        raise NotFound("This service does not exist")
    return service


def create_service(db: Session, title: str, price: Decimal) -> models.ServiceModel:
    service = models.ServiceModel(id=str(uuid.uuid4()), title=title, price=price, active=True)
    db.add(service)
    db.commit()
    db.refresh(service)
    logger.info("Created service id=%s title=%s", service.id, service.title)
    return service


def update_service(db: Session, service_id: str, title: str, price: Decimal) -> models.ServiceModel:
    service = get_service(db, service_id)
    service.title = title
    service.price = price
    db.commit()
    db.refresh(service)
    return service


def deactivate_service(db: Session, service_id: str) -> models.ServiceModel:
    service = get_service(db, service_id)
    service.active = False
    db.commit()
    logger.info("Deactivated service id=%s", service.id)
    return service


def list_services(db: Session) -> List[models.ServiceModel]:
    return (
        db.query(models.ServiceModel)
        .filter(models.ServiceModel.active.is_(True))
        .order_by(models.ServiceModel.title)
        .all()
    )


def resolve_active_services(db: Session, service_ids: Iterable[str]) -> List[models.ServiceModel]:
    """Return the active services for `service_ids`, or raise if any id is unknown or inactive.

    Repeated ids in the request count once.
    """
    wanted = {str(sid) for sid in service_ids}
    if not wanted:
        return []
    found = (
        db.query(models.ServiceModel)
        .filter(models.ServiceModel.id.in_(wanted), models.ServiceModel.active.is_(True))
        .all()
    )
    if len(found) != len(wanted):
        raise ServiceNotFound()
    return found


__all__ = [
    "get_service",
    "create_service",
    "update_service",
    "deactivate_service",
    "list_services",
    "resolve_active_services",
]
