"""Category router - public catalog endpoints"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import CategoryResponse, category_to_response
from .service import CategoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/categories", tags=["Categories"])


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    """Dependency injection for CategoryService"""
    return CategoryService(db)


@router.get("/featured", response_model=list[CategoryResponse])
async def get_featured_categories(service: CategoryService = Depends(get_category_service)):
    """Top categories by number of approved providers"""
    return [category_to_response(c) for c in service.featured()]


@router.get("", response_model=list[CategoryResponse])
@router.get("/", response_model=list[CategoryResponse], include_in_schema=False)
async def get_all_categories(service: CategoryService = Depends(get_category_service)):
    """All active categories with fresh provider counts"""
    return [category_to_response(c) for c in service.list_active()]


@router.get("/slug/{slug}", response_model=CategoryResponse)
async def get_category_by_slug(slug: str, service: CategoryService = Depends(get_category_service)):
    return category_to_response(service.by_slug(slug))


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category_by_id(category_id: int, service: CategoryService = Depends(get_category_service)):
    return category_to_response(service.by_id(category_id))
