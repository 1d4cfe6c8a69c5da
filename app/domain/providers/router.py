"""Provider router - public directory and provider self-service"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_provider
from ...database import get_db
from ...shared.pagination import PageRequest, page_params
from ..categories.schemas import category_to_response
from ..identity.principal import Provider
from ..identity.schemas import AuthResponse, user_to_response
from .schemas import (
    CategoryProvidersResponse,
    ProviderDetailResponse,
    ProviderListResponse,
    ProviderProfileUpdate,
    provider_to_summary,
)
from .service import ProviderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/providers", tags=["Providers"])


def get_provider_service(db: Session = Depends(get_db)) -> ProviderService:
    """Dependency injection for ProviderService"""
    return ProviderService(db)


@router.get("", response_model=ProviderListResponse)
@router.get("/", response_model=ProviderListResponse, include_in_schema=False)
async def list_providers(
    category: Optional[str] = None,
    minRating: Optional[float] = Query(None, ge=1, le=5),
    sort: str = "rating",
    page: PageRequest = Depends(page_params),
    service: ProviderService = Depends(get_provider_service),
):
    """Approved providers, optionally filtered by category and minimum rating"""
    providers, total = service.list_providers(page, category, minRating, sort)
    return ProviderListResponse(
        providers=[provider_to_summary(p) for p in providers],
        pagination=page.meta(total),
    )


@router.get("/category/{slug}", response_model=CategoryProvidersResponse)
async def list_providers_by_category(
    slug: str,
    page: PageRequest = Depends(page_params),
    service: ProviderService = Depends(get_provider_service),
):
    category, providers, total = service.list_by_category(slug, page)
    return CategoryProvidersResponse(
        category=category_to_response(category),
        providers=[provider_to_summary(p) for p in providers],
        pagination=page.meta(total),
    )


@router.patch("/me", response_model=AuthResponse)
async def update_my_profile(
    data: ProviderProfileUpdate,
    provider: Provider = Depends(require_provider),
    service: ProviderService = Depends(get_provider_service),
):
    """Update rate, category, experience or phone; existing bookings keep their snapshotted rate"""
    user = service.update_own_profile(provider, data)
    return AuthResponse(message="Profile updated", user=user_to_response(user))


@router.get("/{provider_id}", response_model=ProviderDetailResponse)
async def get_provider(provider_id: int, service: ProviderService = Depends(get_provider_service)):
    user, category = service.get_provider(provider_id)
    return ProviderDetailResponse(
        provider=provider_to_summary(user),
        category=category_to_response(category) if category else None,
    )
