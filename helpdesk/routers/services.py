"""Service catalog routes.

- POST   /services        (admin only)
- GET    /services/list   (authenticated; active services only)
- GET    /services/{id}   (authenticated; includes deactivated services)
- PUT    /services/{id}   (admin only)
- DELETE /services/{id}   (admin only; deactivates)
"""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from helpdesk import catalog, schemas
from helpdesk.auth import Actor, get_current_actor
from helpdesk.database import get_db
from helpdesk.dependencies import require_admin

router = APIRouter(prefix="/services", tags=["Services"])


@router.post("", response_model=schemas.ServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_service(payload: schemas.ServiceIn, db: Session = Depends(get_db), _admin: Actor = Depends(require_admin)) -> schemas.ServiceResponse:
    service = catalog.create_service(db, payload.title, payload.price)
    return schemas.ServiceResponse.model_validate(service)


@router.get("/list", response_model=List[schemas.ServiceResponse])
async def list_services(db: Session = Depends(get_db), _actor: Actor = Depends(get_current_actor)) -> List[schemas.ServiceResponse]:
    return [schemas.ServiceResponse.model_validate(s) for s in catalog.list_services(db)]


@router.get("/{service_id}", response_model=schemas.ServiceResponse)
async def get_service(service_id: UUID, db: Session = Depends(get_db), _actor: Actor = Depends(get_current_actor)) -> schemas.ServiceResponse:
    return schemas.ServiceResponse.model_validate(catalog.get_service(db, str(service_id)))


@router.put("/{service_id}", response_model=schemas.ServiceResponse)
async def update_service(service_id: UUID, payload: schemas.ServiceIn, db: Session = Depends(get_db), _admin: Actor = Depends(require_admin)) -> schemas.ServiceResponse:
    service = catalog.update_service(db, str(service_id), payload.title, payload.price)
    return schemas.ServiceResponse.model_validate(service)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_service(service_id: UUID, db: Session = Depends(get_db), _admin: Actor = Depends(require_admin)) -> Response:
    catalog.deactivate_service(db, str(service_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
