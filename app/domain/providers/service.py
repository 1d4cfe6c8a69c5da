"""Provider service - public directory reads and provider self-service"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...enums import SERVICE_CATEGORIES
from ...errors import NotFoundError, ValidationError
from ...models import Category, User
from ...shared.pagination import PageRequest
from ..categories.service import CategoryService
from ..identity.principal import Provider
from ..identity.service import IdentityService
from .repository import SORT_ORDERS, ProviderRepository
from .schemas import ProviderProfileUpdate

logger = logging.getLogger(__name__)


class ProviderService:
    def __init__(self, db: Session, categories: Optional[CategoryService] = None):
        self.db = db
        self.repo = ProviderRepository()
        self.categories = categories or CategoryService(db)

    def list_providers(
        self,
        page: PageRequest,
        category: Optional[str] = None,
        min_rating: Optional[float] = None,
        sort: str = "rating",
    ) -> tuple[list[User], int]:
        if sort not in SORT_ORDERS:
            raise ValidationError(f"Sort must be one of: {', '.join(SORT_ORDERS)}")
        if category and category not in SERVICE_CATEGORIES:
            raise ValidationError(f"Invalid service category: {category}")
        return self.repo.find_approved(
            self.db, category=category, min_rating=min_rating, sort=sort, offset=page.offset, limit=page.limit
        )

    def get_provider(self, provider_id: int) -> tuple[User, Optional[Category]]:
        """An approved provider with its category; unapproved providers are not public"""
        user = self.repo.get_approved(self.db, provider_id)
        if not user:
            raise NotFoundError("Provider not found")
        category = self.categories.find_by_slug(user.provider_profile.service_category)
        return user, category

    def list_by_category(self, slug: str, page: PageRequest) -> tuple[Category, list[User], int]:
        category = self.categories.by_slug(slug)
        providers, total = self.repo.find_approved(
            self.db, category=category.slug, offset=page.offset, limit=page.limit
        )
        return category, providers, total

    def update_own_profile(self, provider: Provider, data: ProviderProfileUpdate) -> User:
        if data.serviceCategory is not None and data.serviceCategory not in SERVICE_CATEGORIES:
            raise ValidationError(f"Invalid service category: {data.serviceCategory}")
        identity = IdentityService(self.db, categories=self.categories)
        user = identity.update_provider_profile(
            identity.get_user(provider.id),
            hourly_rate=data.hourlyRate,
            service_category=data.serviceCategory,
            experience=data.experience,
            phone=data.phone,
        )
        logger.info(f"✅ Provider {user.email} updated their profile")
        return user
