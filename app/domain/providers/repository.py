"""Provider repository - Read queries over approved provider profiles"""

from typing import Optional

from sqlalchemy.orm import Session, contains_eager

from ...enums import ProviderStatus, Role
from ...models import ProviderProfile, User

# sort key -> ORDER BY clauses
SORT_ORDERS = {
    "rating": (ProviderProfile.rating.desc(), ProviderProfile.completed_jobs.desc()),
    "jobs": (ProviderProfile.completed_jobs.desc(), ProviderProfile.rating.desc()),
    "rate": (ProviderProfile.hourly_rate.asc(),),
    "newest": (User.created_at.desc(),),
}


class ProviderRepository:
    """Repository for provider directory queries"""

    @staticmethod
    def _approved(db: Session):
        return (
            db.query(User)
            .join(ProviderProfile, ProviderProfile.user_id == User.id)
            .options(contains_eager(User.provider_profile))
            .filter(
                User.role == Role.PROVIDER.value,
                ProviderProfile.status == ProviderStatus.APPROVED.value,
            )
        )

    @staticmethod
    def find_approved(
        db: Session,
        category: Optional[str] = None,
        min_rating: Optional[float] = None,
        sort: str = "rating",
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[User], int]:
        query = ProviderRepository._approved(db)
        if category:
            query = query.filter(ProviderProfile.service_category == category)
        if min_rating is not None:
            query = query.filter(ProviderProfile.rating >= min_rating)

        total = query.count()
        providers = query.order_by(*SORT_ORDERS[sort], User.id).offset(offset).limit(limit).all()
        return providers, total

    @staticmethod
    def get_approved(db: Session, user_id: int) -> Optional[User]:
        return ProviderRepository._approved(db).filter(User.id == user_id).first()

    @staticmethod
    def find_applications(
        db: Session, status: Optional[str] = None, offset: int = 0, limit: int = 10
    ) -> tuple[list[User], int]:
        """Provider accounts of any approval status, newest first"""
        query = (
            db.query(User)
            .join(ProviderProfile, ProviderProfile.user_id == User.id)
            .options(contains_eager(User.provider_profile))
            .filter(User.role == Role.PROVIDER.value)
        )
        if status:
            query = query.filter(ProviderProfile.status == status)
        total = query.count()
        users = query.order_by(User.created_at.desc(), User.id.desc()).offset(offset).limit(limit).all()
        return users, total

    @staticmethod
    def count_by_status(db: Session, status: str) -> int:
        return (
            db.query(ProviderProfile)
            .join(User, User.id == ProviderProfile.user_id)
            .filter(User.role == Role.PROVIDER.value, ProviderProfile.status == status)
            .count()
        )
