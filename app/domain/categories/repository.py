"""Category repository - Database operations for the category catalog"""

from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...enums import ProviderStatus, Role
from ...models import Category, ProviderProfile, User


class CategoryRepository:
    """Repository for category database operations"""

    @staticmethod
    def list_active(db: Session) -> list[Category]:
        return db.query(Category).filter(Category.is_active.is_(True)).order_by(Category.name).all()

    @staticmethod
    def list_by_slugs(db: Session, slugs: Iterable[str]) -> list[Category]:
        return db.query(Category).filter(Category.slug.in_(list(slugs))).all()

    @staticmethod
    def get_by_slug(db: Session, slug: str) -> Optional[Category]:
        return db.query(Category).filter(Category.slug == slug).first()

    @staticmethod
    def get_by_id(db: Session, category_id: int) -> Optional[Category]:
        return db.query(Category).filter(Category.id == category_id).first()

    @staticmethod
    def get_by_name(db: Session, name: str) -> Optional[Category]:
        return db.query(Category).filter(Category.name == name).first()

    @staticmethod
    def approved_provider_counts(db: Session, slugs: Optional[Iterable[str]] = None) -> dict[str, int]:
        """Count approved providers per service category in one grouped query"""
        query = (
            db.query(ProviderProfile.service_category, func.count(ProviderProfile.id))
            .join(User, User.id == ProviderProfile.user_id)
            .filter(
                User.role == Role.PROVIDER.value,
                ProviderProfile.status == ProviderStatus.APPROVED.value,
            )
        )
        if slugs is not None:
            query = query.filter(ProviderProfile.service_category.in_(list(slugs)))
        rows = query.group_by(ProviderProfile.service_category).all()
        return {slug: count for slug, count in rows}
