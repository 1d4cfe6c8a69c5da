"""Identity repository - Database operations for users and provider profiles"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import ProviderProfile, User


class IdentityRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        return (
            db.query(User)
            .options(joinedload(User.provider_profile))
            .filter(User.id == user_id)
            .first()
        )

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.strip().lower()).first()

    @staticmethod
    def create_user(db: Session, profile_data: Optional[dict] = None, **user_data) -> User:
        """Create a user, and its provider profile when profile_data is given"""
        user = User(**user_data)
        if profile_data is not None:
            user.provider_profile = ProviderProfile(**profile_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def save(db: Session, user: User) -> User:
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def list_users(
        db: Session, role: Optional[str] = None, offset: int = 0, limit: int = 10
    ) -> tuple[list[User], int]:
        query = db.query(User)
        if role:
            query = query.filter(User.role == role)
        total = query.count()
        users = query.order_by(User.created_at.desc(), User.id.desc()).offset(offset).limit(limit).all()
        return users, total

    @staticmethod
    def count_users(db: Session, role: Optional[str] = None) -> int:
        query = db.query(func.count(User.id))
        if role:
            query = query.filter(User.role == role)
        return query.scalar() or 0

    @staticmethod
    def recent_users(db: Session, role: str, since: datetime, limit: int = 5) -> list[User]:
        return (
            db.query(User)
            .options(joinedload(User.provider_profile))
            .filter(User.role == role, User.created_at >= since)
            .order_by(User.created_at.desc(), User.id.desc())
            .limit(limit)
            .all()
        )
