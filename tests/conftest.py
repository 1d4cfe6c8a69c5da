"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, recreated for every test, with the category catalog seeded
- A fixed clock (today = 2025-06-10) so booking-window rules are deterministic
- A recording notification sender instead of SMTP/Resend
- HTTPX AsyncClient wired to the app through dependency overrides
- Factories for customers, providers and admins plus bearer headers per principal
"""

import os
from datetime import date, datetime
from typing import AsyncGenerator, Generator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

# Must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["NOTIFICATION_QUEUE_ENABLED"] = "false"
os.environ["ADMIN_EMAIL"] = "ops@sewabooking.test"

from app.database import Base, SessionLocal, engine, get_db  # noqa: E402
from app.domain.admin.router import get_provider_decision_notifier  # noqa: E402
from app.domain.appointments.dependencies import (  # noqa: E402
    get_clock,
    get_notification_dispatcher,
)
from app.domain.appointments.schemas import AppointmentCreate  # noqa: E402
from app.domain.categories.service import CategoryService  # noqa: E402
from app.domain.identity.principal import to_principal  # noqa: E402
from app.domain.identity.repository import IdentityRepository  # noqa: E402
from app.enums import ProviderStatus, Role  # noqa: E402
from app.main import app  # noqa: E402
from app.models import User  # noqa: E402
from app.security_utils import create_access_token, hash_password_bcrypt  # noqa: E402
from app.services.notification_service import NotificationDispatcher  # noqa: E402
from app.shared.clock import FixedClock  # noqa: E402

TODAY = date(2025, 6, 10)
NOW = datetime(2025, 6, 10, 9, 30)
ADMIN_EMAIL = "ops@sewabooking.test"
PASSWORD = "secret123"

_password_hash = None


def password_hash() -> str:
    """bcrypt is slow; hash the shared test password once"""
    global _password_hash
    if _password_hash is None:
        _password_hash = hash_password_bcrypt(PASSWORD)
    return _password_hash


# =============================================================================
# Infrastructure fixtures
# =============================================================================


class RecordingSender:
    """Notification sender that records messages; addresses in fail_for raise"""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    async def send(self, recipient: str, subject: str, mjml_content: str) -> None:
        if recipient in self.fail_for:
            raise RuntimeError(f"mail relay refused {recipient}")
        self.sent.append({"to": recipient, "subject": subject, "body": mjml_content})

    def recipients(self) -> list[str]:
        return [m["to"] for m in self.sent]


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW, today=TODAY)


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    CategoryService(session).seed()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def provider_decisions() -> list:
    return []


@pytest.fixture
async def client(
    db: Session, clock: FixedClock, sender: RecordingSender, provider_decisions: list
) -> AsyncGenerator[AsyncClient, None]:
    def override_get_db():
        yield db

    async def record_decision(to, name, status, reason=None):
        provider_decisions.append({"to": to, "name": name, "status": status, "reason": reason})

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_notification_dispatcher] = lambda: NotificationDispatcher(
        sender, admin_email=ADMIN_EMAIL
    )
    app.dependency_overrides[get_provider_decision_notifier] = lambda: record_decision

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


# =============================================================================
# Factories
# =============================================================================


def make_customer(db: Session, email: str = "asha@example.com", name: str = "Asha Customer") -> User:
    return IdentityRepository.create_user(
        db, email=email, name=name, password_hash=password_hash(), role=Role.CUSTOMER
    )


def make_admin(db: Session, email: str = "admin@example.com", name: str = "Admin One") -> User:
    return IdentityRepository.create_user(
        db, email=email, name=name, password_hash=password_hash(), role=Role.ADMIN, is_verified=True
    )


def make_provider(
    db: Session,
    email: str = "ram@example.com",
    name: str = "Ram Plumber",
    category: str = "plumbing",
    rate: float = 500,
    status: ProviderStatus = ProviderStatus.APPROVED,
    rating: float = 4.5,
) -> User:
    user = IdentityRepository.create_user(
        db,
        profile_data={
            "status": ProviderStatus.PENDING,
            "service_category": category,
            "hourly_rate": rate,
            "rating": rating,
            "experience": "5 years",
            "age": 30,
            "phone": "9800000000",
            "district": "birtamode",
            "full_address": "Ward 4",
        },
        email=email,
        name=name,
        password_hash=password_hash(),
        role=Role.PROVIDER,
    )
    if status != ProviderStatus.PENDING:
        user.provider_profile.apply_status(status, None, NOW)
        db.commit()
        db.refresh(user)
    return user


def principal(user: User):
    return to_principal(user)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


def booking(provider: User, **overrides) -> AppointmentCreate:
    data = {
        "providerId": provider.id,
        "serviceDescription": "Kitchen sink is leaking",
        "appointmentDate": date(2025, 6, 12),
        "appointmentTime": "10:00 AM",
        "estimatedHours": 2,
        "customerNotes": "Please bring spare washers",
        "location": {"address": "Ward 4, Main Road", "district": "birtamode"},
    }
    data.update(overrides)
    return AppointmentCreate(**data)


def booking_json(provider: User, **overrides) -> dict:
    return booking(provider, **overrides).model_dump(mode="json")
