"""System routes: health check and the development seed endpoint.

`/system/seed` creates demo accounts with a known password, so it answers 404
unless `ALLOW_SEED=true` is set.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from helpdesk.config import Settings, get_settings
from helpdesk.database import get_db
from helpdesk.errors import api_error
from helpdesk.seed import seed_database

router = APIRouter(tags=["System"])


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.post("/system/seed")
async def seed_data(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> dict:
    """Seed demo data for development (idempotent)."""
    if not settings.allow_seed:
        raise api_error(status.HTTP_404_NOT_FOUND, "not_found", "Not Found")
    return seed_database(db)
