"""Identity service - registration, login and provider profile writes"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...enums import SERVICE_CATEGORIES, ProviderStatus, Role
from ...errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ...models import User, check_hourly_rate
from ...security_utils import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password_bcrypt,
    verify_password_bcrypt,
)
from ..categories.service import CategoryService
from .repository import IdentityRepository
from .schemas import ProviderRegisterRequest, RegisterRequest

logger = logging.getLogger(__name__)


class IdentityService:
    """Service layer for principals"""

    def __init__(self, db: Session, categories: Optional[CategoryService] = None):
        self.db = db
        self.repo = IdentityRepository()
        self.categories = categories or CategoryService(db)

    def get_user(self, user_id: int) -> User:
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def find_by_email(self, email: str) -> Optional[User]:
        return self.repo.get_user_by_email(self.db, email)

    def _ensure_email_free(self, email: str) -> None:
        if self.repo.get_user_by_email(self.db, email):
            raise ConflictError("Email already registered")

    def _create(self, profile_data: Optional[dict] = None, **user_data) -> User:
        try:
            return self.repo.create_user(self.db, profile_data=profile_data, **user_data)
        except IntegrityError as e:
            # Email taken between the check and the insert
            self.db.rollback()
            logger.warning(f"⚠️ Duplicate registration for {user_data.get('email')}: {e}")
            raise ConflictError("Email already registered") from e

    def register_customer(self, data: RegisterRequest) -> User:
        self._ensure_email_free(data.email)
        user = self._create(
            email=data.email,
            name=data.name.strip(),
            password_hash=hash_password_bcrypt(data.password),
            role=Role.CUSTOMER,
        )
        logger.info(f"🆕 Customer registered: {user.email}")
        return user

    def register_provider(self, data: ProviderRegisterRequest) -> User:
        """Create a provider whose application waits for admin review"""
        if data.serviceCategory not in SERVICE_CATEGORIES:
            raise ValidationError(f"Invalid service category: {data.serviceCategory}")
        check_hourly_rate(data.hourlyRate)
        if data.address.district == "other" and not data.address.otherDistrict:
            raise ValidationError("Other district details are required")

        self._ensure_email_free(data.email)
        user = self._create(
            profile_data={
                "status": ProviderStatus.PENDING,
                "service_category": data.serviceCategory,
                "hourly_rate": data.hourlyRate,
                "experience": data.experience,
                "age": data.age,
                "phone": data.phone,
                "district": data.address.district,
                "other_district": data.address.otherDistrict,
                "full_address": data.address.fullAddress,
            },
            email=data.email,
            name=data.name.strip(),
            password_hash=hash_password_bcrypt(data.password),
            role=Role.PROVIDER,
            phone=data.phone,
        )
        logger.info(f"🆕 Provider application submitted: {user.email} ({data.serviceCategory})")
        return user

    def create_admin(self, email: str, name: str, password: str) -> User:
        self._ensure_email_free(email)
        user = self._create(
            email=email,
            name=name,
            password_hash=hash_password_bcrypt(password),
            role=Role.ADMIN,
            is_verified=True,
        )
        logger.info(f"🆕 Admin created: {user.email}")
        return user

    def login(self, email: str, password: str) -> tuple[User, str, str]:
        user = self.repo.get_user_by_email(self.db, email)
        if not user or not verify_password_bcrypt(password, user.password_hash):
            logger.info(f"ℹ️ Failed login for {email}")
            raise AuthenticationError("Invalid email or password")
        return user, create_access_token(user.id, user.role), create_refresh_token(user.id)

    def refresh(self, refresh_token: str) -> tuple[User, str]:
        user_id = decode_token(refresh_token, REFRESH_TOKEN_TYPE)
        if user_id is None:
            raise AuthenticationError("Invalid refresh token")
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user:
            raise AuthenticationError("Invalid refresh token")
        return user, create_access_token(user.id, user.role)

    def update_provider_profile(
        self,
        user: User,
        hourly_rate: Optional[float] = None,
        service_category: Optional[str] = None,
        experience: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> User:
        """
        Last-writer-wins update of a provider's own profile fields.

        Rate changes never touch existing appointments, which keep the rate
        snapshotted at booking time.
        """
        profile = user.provider_profile
        if profile is None:
            raise NotFoundError("Provider profile not found")

        previous_category = profile.service_category
        if hourly_rate is not None:
            profile.hourly_rate = hourly_rate
        if service_category is not None:
            profile.service_category = service_category
        if experience is not None:
            profile.experience = experience
        if phone is not None:
            profile.phone = phone
            user.phone = phone

        self.repo.save(self.db, user)

        if profile.status == ProviderStatus.APPROVED.value and previous_category != profile.service_category:
            self.categories.recompute_counts([previous_category, profile.service_category])
        return user
