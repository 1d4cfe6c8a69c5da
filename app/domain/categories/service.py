"""Category service - catalog reads with freshly derived provider counts"""

import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ...errors import NotFoundError
from ...models import Category
from .repository import CategoryRepository
from .seed import CATEGORY_SEED

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 8


class CategoryService:
    """
    Category registry.

    provider_count is derived from the identity tables, never maintained
    incrementally. Reads recompute it first; approval changes call
    recompute_counts explicitly. Between those points the stored value may be stale.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CategoryRepository()

    def _refresh(self, categories: list[Category]) -> list[Category]:
        if not categories:
            return categories
        counts = self.repo.approved_provider_counts(self.db, [c.slug for c in categories])
        changed = False
        for category in categories:
            fresh = counts.get(category.slug, 0)
            if category.provider_count != fresh:
                category.provider_count = fresh
                changed = True
        if changed:
            self.db.commit()
        return categories

    def recompute_counts(self, slugs: Optional[Iterable[str]] = None) -> dict[str, int]:
        """Recompute provider_count for the given slugs (all categories when None)"""
        if slugs is None:
            categories = self.repo.list_active(self.db)
        else:
            wanted = {s for s in slugs if s}
            if not wanted:
                return {}
            categories = self.repo.list_by_slugs(self.db, wanted)
        self._refresh(categories)
        result = {c.slug: c.provider_count for c in categories}
        logger.info(f"📊 Category provider counts recomputed: {result}")
        return result

    def list_active(self) -> list[Category]:
        return self._refresh(self.repo.list_active(self.db))

    def featured(self, limit: int = FEATURED_LIMIT) -> list[Category]:
        categories = self.list_active()
        return sorted(categories, key=lambda c: (-c.provider_count, c.name))[:limit]

    def find_by_slug(self, slug: str) -> Optional[Category]:
        category = self.repo.get_by_slug(self.db, slug)
        return self._refresh([category])[0] if category else None

    def by_slug(self, slug: str) -> Category:
        category = self.find_by_slug(slug)
        if not category:
            raise NotFoundError("Category not found")
        return category

    def by_id(self, category_id: int) -> Category:
        category = self.repo.get_by_id(self.db, category_id)
        if not category:
            raise NotFoundError("Category not found")
        return self._refresh([category])[0]

    def seed(self) -> int:
        """Upsert the seed catalog by name; returns the number of categories inserted"""
        created = 0
        for data in CATEGORY_SEED:
            category = self.repo.get_by_name(self.db, data["name"])
            if category is None:
                self.db.add(Category(**data))
                created += 1
            else:
                for key, value in data.items():
                    setattr(category, key, value)
        self.db.commit()
        if created:
            logger.info(f"🌱 Seeded {created} categories")
        return created
