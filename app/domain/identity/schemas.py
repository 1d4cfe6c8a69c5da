"""Identity schemas - Pydantic models for registration and login"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_email, validate_phone


class RegisterRequest(BaseModel):
    """Customer registration"""

    name: str = Field(min_length=1, max_length=255)
    email: str
    password: str = Field(min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)


class AddressIn(BaseModel):
    district: str
    otherDistrict: Optional[str] = None
    fullAddress: str = Field(min_length=1)


class ProviderRegisterRequest(RegisterRequest):
    """Service provider registration - the profile starts out pending review"""

    phone: str
    address: AddressIn
    age: int = Field(ge=18)
    experience: str = Field(min_length=1)
    serviceCategory: str
    hourlyRate: float

    @field_validator("phone")
    @classmethod
    def validate_phone_format(cls, v):
        return validate_phone(v)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class RefreshRequest(BaseModel):
    refreshToken: str


class ProviderProfileResponse(BaseModel):
    status: str
    serviceCategory: str
    hourlyRate: float
    rating: float
    reviewCount: int
    completedJobs: int
    experience: Optional[str] = None
    age: Optional[int] = None
    phone: Optional[str] = None
    formattedAddress: str
    rejectionReason: Optional[str] = None
    approvedAt: Optional[datetime] = None
    approvedBy: Optional[int] = None


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    isVerified: bool
    createdAt: Optional[datetime] = None
    providerProfile: Optional[ProviderProfileResponse] = None


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    user: UserResponse


class TokenResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    accessToken: str
    refreshToken: Optional[str] = None
    tokenType: str = "bearer"
    user: Optional[UserResponse] = None


def profile_to_response(profile) -> ProviderProfileResponse:
    return ProviderProfileResponse(
        status=profile.status,
        serviceCategory=profile.service_category,
        hourlyRate=profile.hourly_rate,
        rating=profile.rating,
        reviewCount=profile.review_count,
        completedJobs=profile.completed_jobs,
        experience=profile.experience,
        age=profile.age,
        phone=profile.phone,
        formattedAddress=profile.formatted_address,
        rejectionReason=profile.rejection_reason,
        approvedAt=profile.approved_at,
        approvedBy=profile.approved_by_id,
    )


def user_to_response(user) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        isVerified=user.is_verified,
        createdAt=user.created_at,
        providerProfile=profile_to_response(user.provider_profile) if user.provider_profile else None,
    )
