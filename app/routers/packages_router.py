"""Packages API: create, read, and uncapped roster join/leave."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.user import User
from app.routers.utils.dependencies import get_current_user
from app.schemas.roster import PackageCreate, PackageRead
from app.services.plan_service import PackageService
from app.services.roster_service import PackageRosterService

router = APIRouter(
    prefix="/packages",
    tags=["packages"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=PackageRead, status_code=201)
def create_package(
    data: PackageCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PackageRead:
    return PackageService(db).create_package(current_user.id, data)


@router.get("/{package_id}", response_model=PackageRead)
def get_package(
    package_id: UUID,
    _current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PackageRead:
    package = PackageService(db).get_package(package_id)
    if package is None:
        raise HTTPException(status_code=404, detail="Package not found")
    return package


@router.post("/{package_id}/join", response_model=PackageRead)
def join_package(
    package_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PackageRead:
    return PackageRosterService(db).join(package_id, current_user.id)


@router.delete("/{package_id}/join", response_model=PackageRead)
def leave_package(
    package_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PackageRead:
    return PackageRosterService(db).leave(package_id, current_user.id)
