"""Category schemas"""

from typing import Optional

from pydantic import BaseModel


class CategoryResponse(BaseModel):
    id: int
    name: str
    slug: str
    description: str
    icon: Optional[str] = None
    isActive: bool
    averageRating: Optional[float] = None
    startingPrice: Optional[float] = None
    providerCount: int


def category_to_response(category) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,
        name=category.name,
        slug=category.slug,
        description=category.description,
        icon=category.icon,
        isActive=category.is_active,
        averageRating=category.average_rating,
        startingPrice=category.starting_price,
        providerCount=category.provider_count,
    )
