"""Provider directory schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_phone
from ..appointments.schemas import Pagination
from ..categories.schemas import CategoryResponse


class ProviderSummary(BaseModel):
    id: int
    name: str
    serviceCategory: str
    hourlyRate: float
    rating: float
    reviewCount: int
    completedJobs: int
    experience: Optional[str] = None
    formattedAddress: str
    joinedAt: Optional[datetime] = None


class ProviderListResponse(BaseModel):
    success: bool = True
    providers: list[ProviderSummary]
    pagination: Pagination


class ProviderDetailResponse(BaseModel):
    success: bool = True
    provider: ProviderSummary
    category: Optional[CategoryResponse] = None


class CategoryProvidersResponse(ProviderListResponse):
    category: CategoryResponse


class ProviderProfileUpdate(BaseModel):
    """Fields a provider may change on their own profile"""

    hourlyRate: Optional[float] = None
    serviceCategory: Optional[str] = None
    experience: Optional[str] = Field(default=None, min_length=1, max_length=255)
    phone: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone_format(cls, v):
        return validate_phone(v) if v is not None else v


def provider_to_summary(user) -> ProviderSummary:
    profile = user.provider_profile
    return ProviderSummary(
        id=user.id,
        name=user.name,
        serviceCategory=profile.service_category,
        hourlyRate=profile.hourly_rate,
        rating=profile.rating,
        reviewCount=profile.review_count,
        completedJobs=profile.completed_jobs,
        experience=profile.experience,
        formattedAddress=profile.formatted_address,
        joinedAt=user.created_at,
    )
