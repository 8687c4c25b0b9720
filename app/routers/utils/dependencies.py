from typing import Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.user import User
from app.services.user_service import UserService

USER_ID_HEADER = "X-User-Id"


def get_current_user(
    x_user_id: Optional[str] = Header(None, alias=USER_ID_HEADER),
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency resolving the authenticated caller.

    Authentication happens upstream; the gateway forwards the caller's id in
    the X-User-Id header.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid caller identity")
    user = UserService(db).get_user(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown caller")
    return user


def get_user_by_id(
    user_id: UUID,
    db: Session = Depends(get_db),
) -> User:
    """FastAPI dependency to get a user by ID."""
    user = UserService(db).get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user
