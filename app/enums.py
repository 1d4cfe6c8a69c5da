"""Enum definitions for application constants."""

from enum import Enum


class Role(str, Enum):
    """Principal roles. A provider additionally owns a ProviderProfile."""

    CUSTOMER = "customer"
    PROVIDER = "provider"
    ADMIN = "admin"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_


class ProviderStatus(str, Enum):
    """
    Provider approval sub-state.

    unapproved → pending (application submitted) → approved / rejected
    """

    UNAPPROVED = "unapproved"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_


class AppointmentStatus(str, Enum):
    """
    Appointment lifecycle status.

        pending → admin_approved → provider_accepted → completed
        pending → admin_rejected
        admin_approved → provider_rejected
        any non-terminal → cancelled
    """

    PENDING = "pending"
    ADMIN_APPROVED = "admin_approved"
    ADMIN_REJECTED = "admin_rejected"
    PROVIDER_ACCEPTED = "provider_accepted"
    PROVIDER_REJECTED = "provider_rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_


# Fixed set of service category slugs a provider may offer
SERVICE_CATEGORIES = (
    "plumbing",
    "electrical",
    "cleaning",
    "carpentry",
    "painting",
    "ac-repair",
    "appliance-repair",
    "computer-repair",
    "mobile-repair",
    "beauty-services",
    "tutoring",
    "driving",
    "other",
)

DISTRICTS = (
    "birtamode",
    "damak",
    "mechinagar",
    "bhadrapur",
    "arjundhara",
    "kankai",
    "gauradaha",
    "other",
)

MIN_HOURLY_RATE = 100
MAX_HOURLY_RATE = 5000
MIN_ESTIMATED_HOURS = 1
MAX_ESTIMATED_HOURS = 24
MIN_RATING = 1
MAX_RATING = 5
DEFAULT_RATING = 4.5
