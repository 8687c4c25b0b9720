"""Read access to users owned by the profile subsystem."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.user import User


class UserService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_user(self, user_id: UUID) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_users_with_location(self) -> List[User]:
        """Users that have both coordinates set, in a stable order."""
        query = self.db.query(User).filter(
            User.latitude.is_not(None), User.longitude.is_not(None)
        )
        return query.order_by(User.created_at, User.id).all()
