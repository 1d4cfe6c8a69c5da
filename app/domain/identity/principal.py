"""Principal variants - who is acting on a request"""

from dataclasses import dataclass
from typing import Optional, Union

from ...enums import ProviderStatus, Role
from ...models import User


@dataclass(frozen=True)
class Customer:
    id: int
    email: str
    name: str

    role = Role.CUSTOMER


@dataclass(frozen=True)
class Provider:
    id: int
    email: str
    name: str
    status: ProviderStatus
    service_category: str
    hourly_rate: float

    role = Role.PROVIDER


@dataclass(frozen=True)
class Admin:
    id: int
    email: str
    name: str

    role = Role.ADMIN


Principal = Union[Customer, Provider, Admin]


def to_principal(user: User) -> Optional[Principal]:
    """Build the principal variant for a user row; None for a provider row without a profile"""
    if user.role == Role.ADMIN.value:
        return Admin(id=user.id, email=user.email, name=user.name)
    if user.role == Role.PROVIDER.value:
        profile = user.provider_profile
        if profile is None:
            return None
        return Provider(
            id=user.id,
            email=user.email,
            name=user.name,
            status=ProviderStatus(profile.status),
            service_category=profile.service_category,
            hourly_rate=profile.hourly_rate,
        )
    return Customer(id=user.id, email=user.email, name=user.name)
