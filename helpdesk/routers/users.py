"""User routes: login, account management, technician availability and pictures.

Endpoints implemented:
- POST   /users/login                    (public)
- POST   /users/tech                     (admin only)
- POST   /users/client                   (public self-signup)
- GET    /users/techList, /users/clientList (admin only)
- PUT    /users/tech/{id}                (the technician themself or admin)
- PUT    /users/admin/{id}               (admin only)
- PUT    /users/client/{id}              (the client themself or admin)
- PUT    /users/techAvailabilities/{id}  (the technician themself or admin)
- PUT    /users/picture/{id}             (the user themself or admin, multipart)
- GET    /users/picture/{id}             (public)
- DELETE /users/client/{id}              (the client themself or admin)
"""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlalchemy.orm import Session

from helpdesk import auth, models, schemas, users
from helpdesk.auth import Actor
from helpdesk.config import Settings, get_settings
from helpdesk.database import get_db
from helpdesk.dependencies import require_admin, self_or_admin
from helpdesk.errors import api_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

Role = models.UserRole


@router.post("/login", response_model=schemas.TokenResponse)
async def login(credentials: schemas.LoginRequest, db: Session = Depends(get_db)) -> schemas.TokenResponse:
    """Authenticate with email and password and return a bearer token."""
    token = auth.authenticate(db, credentials.email, credentials.password)
    return schemas.TokenResponse(token=token)


# ----------------------------- Technicians -----------------------------
@router.post("/tech", response_model=schemas.TechResponse, status_code=status.HTTP_201_CREATED)
async def create_tech_account(payload: schemas.AccountCreate, db: Session = Depends(get_db), _admin: Actor = Depends(require_admin)) -> schemas.TechResponse:
    """Create a technician with the default business-hour availability."""
    user = users.create_tech_account(db, payload.name, payload.email, payload.password)
    return schemas.TechResponse.model_validate(user)


@router.get("/techList", response_model=List[schemas.TechResponse])
async def list_tech_accounts(db: Session = Depends(get_db), _admin: Actor = Depends(require_admin)) -> List[schemas.TechResponse]:
    return [schemas.TechResponse.model_validate(u) for u in users.list_tech_accounts(db)]


@router.put("/tech/{user_id}", response_model=schemas.UserResponse)
async def update_tech_account(
    user_id: UUID,
    payload: schemas.AccountUpdate,
    db: Session = Depends(get_db),
    _actor: Actor = Depends(self_or_admin(Role.TECH, Role.ADMIN)),
) -> schemas.UserResponse:
    user = users.update_account(db, str(user_id), Role.TECH, payload.new_name, payload.new_email, payload.new_password)
    return schemas.UserResponse.model_validate(user)


@router.put("/techAvailabilities/{user_id}", response_model=schemas.AvailabilityResponse)
async def update_tech_availabilities(
    user_id: UUID,
    payload: schemas.AvailabilityUpdate,
    db: Session = Depends(get_db),
    _actor: Actor = Depends(self_or_admin(Role.TECH, Role.ADMIN)),
) -> schemas.AvailabilityResponse:
    """Replace the technician's whole availability set."""
    slots = users.update_tech_availabilities(db, str(user_id), payload.new_availabilities)
    return schemas.AvailabilityResponse(tech_id=str(user_id), availabilities=slots)


# ------------------------------- Admins --------------------------------
@router.put("/admin/{user_id}", response_model=schemas.UserResponse)
async def update_admin_account(
    user_id: UUID,
    payload: schemas.AccountUpdate,
    db: Session = Depends(get_db),
    _actor: Actor = Depends(self_or_admin(Role.ADMIN)),
) -> schemas.UserResponse:
    user = users.update_account(db, str(user_id), Role.ADMIN, payload.new_name, payload.new_email, payload.new_password)
    return schemas.UserResponse.model_validate(user)


# ------------------------------- Clients -------------------------------
@router.post("/client", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
async def create_client_account(payload: schemas.AccountCreate, db: Session = Depends(get_db)) -> schemas.UserResponse:
    """Public self-signup for clients."""
    user = users.create_client_account(db, payload.name, payload.email, payload.password)
    return schemas.UserResponse.model_validate(user)


@router.get("/clientList", response_model=List[schemas.UserResponse])
async def list_client_accounts(db: Session = Depends(get_db), _admin: Actor = Depends(require_admin)) -> List[schemas.UserResponse]:
    return [schemas.UserResponse.model_validate(u) for u in users.list_client_accounts(db)]


@router.put("/client/{user_id}", response_model=schemas.UserResponse)
async def update_client_account(
    user_id: UUID,
    payload: schemas.AccountUpdate,
    db: Session = Depends(get_db),
    _actor: Actor = Depends(self_or_admin(Role.CLIENT, Role.ADMIN)),
) -> schemas.UserResponse:
    user = users.update_account(db, str(user_id), Role.CLIENT, payload.new_name, payload.new_email, payload.new_password)
    return schemas.UserResponse.model_validate(user)


@router.delete("/client/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client_account(
    user_id: UUID,
    db: Session = Depends(get_db),
    _actor: Actor = Depends(self_or_admin(Role.CLIENT, Role.ADMIN)),
) -> Response:
    users.delete_client_account(db, str(user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ------------------------------- Pictures ------------------------------
@router.put("/picture/{user_id}", response_model=schemas.PictureUploadResponse)
async def update_user_picture(
    user_id: UUID,
    profile_pic: Optional[UploadFile] = File(None, alias="profilePic"),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _actor: Actor = Depends(self_or_admin()),
) -> schemas.PictureUploadResponse:
    """Upload a profile picture (multipart field `profilePic`)."""
    if profile_pic is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, "missing_file", "No file uploaded: send the picture in the `profilePic` field")

    data = await profile_pic.read()
    if not data:
        raise api_error(status.HTTP_400_BAD_REQUEST, "missing_file", "Uploaded picture is empty")
    if len(data) > settings.max_picture_bytes:
        raise api_error(status.HTTP_400_BAD_REQUEST, "picture_too_large", f"Picture too large: max {settings.max_picture_bytes} bytes")

    url = users.update_user_picture(db, str(user_id), data, profile_pic.content_type)
    return schemas.PictureUploadResponse(access_url=url)


@router.get("/picture/{user_id}", response_model=schemas.PictureResponse)
async def get_user_picture(user_id: UUID, db: Session = Depends(get_db)) -> schemas.PictureResponse:
    return schemas.PictureResponse(user_picture=users.get_user_picture(db, str(user_id)))
