"""Seed utilities for creating demo data.

Contains `seed_database`, reused by the `/system/seed` route and the
`python -m helpdesk.seed` command.
"""
from __future__ import annotations

import logging
import uuid
from decimal import Decimal

from sqlalchemy.orm import Session

from helpdesk import models, users

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_ACCOUNTS = [
    (models.UserRole.ADMIN, "Admin", "admin@helpdesk.example.com"),
    (models.UserRole.TECH, "Tech One", "tech1@helpdesk.example.com"),
    (models.UserRole.TECH, "Tech Two", "tech2@helpdesk.example.com"),
    (models.UserRole.CLIENT, "Client One", "client1@helpdesk.example.com"),
    (models.UserRole.CLIENT, "Client Two", "client2@helpdesk.example.com"),
]

DEMO_SERVICES = [
    ("Hardware diagnosis", Decimal("80.00")),
    ("Software installation", Decimal("50.00")),
    ("Network setup", Decimal("120.00")),
    ("VPN", Decimal("50.00")),
    ("Data backup", Decimal("90.00")),
]

_CREATORS = {
    models.UserRole.ADMIN: users.create_admin_account,
    models.UserRole.TECH: users.create_tech_account,
    models.UserRole.CLIENT: users.create_client_account,
}


def seed_database(db: Session) -> dict:
    """Create demo data if tables are empty. Returns a dict describing counts created.

    This function is idempotent: it only creates records when the corresponding
    tables are empty.
    """
    created = {"users": 0, "services": 0}

    if db.query(models.UserModel).count() == 0:
        for role, name, email in DEMO_ACCOUNTS:
            _CREATORS[role](db, name, email, DEMO_PASSWORD)
        created["users"] = len(DEMO_ACCOUNTS)

    if db.query(models.ServiceModel).count() == 0:
        db.add_all(
            models.ServiceModel(id=str(uuid.uuid4()), title=title, price=price, active=True)
            for title, price in DEMO_SERVICES
        )
        db.commit()
        created["services"] = len(DEMO_SERVICES)

    logger.info("Seed completed: %s", created)
    return {"message": "Seed completed", "data": created}


if __name__ == "__main__":  # pragma: no cover - manual entry point
    from helpdesk.database import SessionLocal, init_db

    logging.basicConfig(level=logging.INFO)
    init_db()
    session = SessionLocal()
    try:
        print(seed_database(session))
    finally:
        session.close()
