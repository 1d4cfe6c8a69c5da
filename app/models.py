from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import func

from .database import Base
from .enums import (
    DEFAULT_RATING,
    DISTRICTS,
    MAX_ESTIMATED_HOURS,
    MAX_HOURLY_RATE,
    MAX_RATING,
    MIN_ESTIMATED_HOURS,
    MIN_HOURLY_RATE,
    MIN_RATING,
    SERVICE_CATEGORIES,
    AppointmentStatus,
    ProviderStatus,
    Role,
)
from .errors import PreconditionError, ValidationError


def check_hourly_rate(value) -> None:
    """Raise ValidationError unless value is a number within the bookable rate range"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("Hourly rate must be a number")
    if value < MIN_HOURLY_RATE or value > MAX_HOURLY_RATE:
        raise ValidationError(
            f"Hourly rate must be between {MIN_HOURLY_RATE} and {MAX_HOURLY_RATE}"
        )


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default=Role.CUSTOMER.value, nullable=False, index=True)
    is_verified = Column(Boolean, default=False, nullable=False)  # Email verification status
    phone = Column(String(50), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    provider_profile = relationship(
        "ProviderProfile",
        back_populates="user",
        uselist=False,
        foreign_keys="ProviderProfile.user_id",
        cascade="all, delete-orphan",
    )

    @validates("role")
    def validate_role(self, _key, value):
        value = value.value if isinstance(value, Role) else value
        if not Role.has_value(value):
            raise ValidationError(f"Invalid role: {value}")
        return value

    @validates("email")
    def validate_email(self, _key, value):
        if not value or "@" not in value:
            raise ValidationError("Valid email is required")
        return value.strip().lower()


class ProviderProfile(Base):
    """Provider-only attributes; exists only for users with role=provider"""

    __tablename__ = "provider_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    status = Column(String(20), default=ProviderStatus.UNAPPROVED.value, nullable=False)
    service_category = Column(String(50), nullable=False)
    hourly_rate = Column(Float, nullable=False)
    rating = Column(Float, default=DEFAULT_RATING, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)
    completed_jobs = Column(Integer, default=0, nullable=False)
    experience = Column(String(255), nullable=True)  # e.g. "3 years"
    age = Column(Integer, nullable=True)
    phone = Column(String(50), nullable=True)
    district = Column(String(50), nullable=True)
    other_district = Column(String(255), nullable=True)  # Only when district == "other"
    full_address = Column(String(500), nullable=True)
    # Approval metadata - mutually exclusive depending on status, written only by apply_status
    rejection_reason = Column(Text, nullable=True)
    approved_at = Column(DateTime, nullable=True)
    approved_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="provider_profile", foreign_keys=[user_id])
    approved_by = relationship("User", foreign_keys=[approved_by_id])

    __table_args__ = (
        Index("ix_provider_profiles_status_category", "status", "service_category"),
    )

    @validates("status")
    def validate_status(self, _key, value):
        value = value.value if isinstance(value, ProviderStatus) else value
        if not ProviderStatus.has_value(value):
            raise ValidationError(f"Invalid provider status: {value}")
        return value

    @validates("service_category")
    def validate_service_category(self, _key, value):
        if value not in SERVICE_CATEGORIES:
            raise ValidationError(f"Invalid service category: {value}")
        return value

    @validates("hourly_rate")
    def validate_hourly_rate(self, _key, value):
        check_hourly_rate(value)
        return value

    @validates("rating")
    def validate_rating(self, _key, value):
        if value is None or value < MIN_RATING or value > MAX_RATING:
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
        return value

    @validates("district")
    def validate_district(self, _key, value):
        if value is not None and value not in DISTRICTS:
            raise ValidationError(f"Invalid district: {value}")
        return value

    @property
    def formatted_address(self) -> str:
        if not self.district:
            return "Location not specified"
        primary = self.other_district if self.district == "other" else self.district
        if self.full_address:
            return f"{self.full_address}, {primary}"
        return primary

    def apply_status(
        self,
        status: ProviderStatus,
        actor_id: Optional[int],
        now: datetime,
        rejection_reason: Optional[str] = None,
    ) -> None:
        """
        Move the profile to a new approval status.

        Rejection reason is kept only under `rejected`, approved_at/approved_by
        only under `approved`. Approval requires a category and an in-range rate.
        """
        status = ProviderStatus(status)
        if status == ProviderStatus.APPROVED:
            if not self.service_category:
                raise PreconditionError("Provider cannot be approved without a service category")
            if self.hourly_rate is None:
                raise PreconditionError("Provider cannot be approved without an hourly rate")
            check_hourly_rate(self.hourly_rate)

        self.status = status.value
        if status == ProviderStatus.APPROVED:
            self.approved_at = now
            self.approved_by_id = actor_id
            self.rejection_reason = None
        elif status == ProviderStatus.REJECTED:
            self.approved_at = None
            self.approved_by_id = None
            self.rejection_reason = rejection_reason or None
        else:
            self.approved_at = None
            self.approved_by_id = None
            self.rejection_reason = None


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=False)
    icon = Column(String(20), default="🔧")
    is_active = Column(Boolean, default=True, nullable=False)
    average_rating = Column(Float, default=DEFAULT_RATING)
    starting_price = Column(Float, default=300)
    # Derived: approved providers offering this slug. Refreshed by CategoryService, may be stale between refreshes
    provider_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(String(40), unique=True, nullable=False)  # Human-readable, e.g. APP-LX3K9Q2A-7F3KD
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    # Snapshotted from the provider profile at creation, never recomputed
    service_category = Column(String(50), nullable=False)
    hourly_rate = Column(Float, nullable=False)
    price = Column(Float, nullable=False)
    service_description = Column(Text, nullable=False)
    appointment_date = Column(Date, nullable=False)
    appointment_time = Column(String(50), nullable=False)  # Opaque slot label
    estimated_hours = Column(Integer, nullable=False)
    status = Column(String(30), default=AppointmentStatus.PENDING.value, nullable=False)
    location_address = Column(String(500), nullable=True)
    location_district = Column(String(100), nullable=True)
    location_lat = Column(Float, nullable=True)
    location_lng = Column(Float, nullable=True)
    customer_notes = Column(Text, nullable=True)
    admin_notes = Column(Text, nullable=True)
    provider_notes = Column(Text, nullable=True)
    # Lifecycle stamps - set once by the matching transition
    admin_approved_at = Column(DateTime, nullable=True)
    provider_accepted_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    customer = relationship("User", foreign_keys=[customer_id])
    provider = relationship("User", foreign_keys=[provider_id])

    __table_args__ = (
        Index("ix_appointments_customer_created", "customer_id", "created_at"),
        Index("ix_appointments_provider_created", "provider_id", "created_at"),
        Index("ix_appointments_status", "status"),
        Index("ix_appointments_date", "appointment_date"),
    )

    @validates("status")
    def validate_status(self, _key, value):
        value = value.value if isinstance(value, AppointmentStatus) else value
        if not AppointmentStatus.has_value(value):
            raise ValidationError(f"Invalid appointment status: {value}")
        return value

    @validates("estimated_hours")
    def validate_estimated_hours(self, _key, value):
        if value is None or value < MIN_ESTIMATED_HOURS or value > MAX_ESTIMATED_HOURS:
            raise ValidationError(
                f"Estimated hours must be between {MIN_ESTIMATED_HOURS} and {MAX_ESTIMATED_HOURS} hours"
            )
        return value
