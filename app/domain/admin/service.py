"""Admin service - provider approval workflow, user listing and dashboard numbers"""

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...email_service import send_provider_approved_email, send_provider_rejected_email
from ...enums import ProviderStatus, Role
from ...errors import NotFoundError, ValidationError
from ...models import User
from ...shared.clock import Clock, default_clock
from ...shared.pagination import PageRequest
from ..categories.service import CategoryService
from ..identity.principal import Admin
from ..identity.repository import IdentityRepository
from ..providers.repository import ProviderRepository

logger = logging.getLogger(__name__)

# Statuses an admin may put a provider application into
ADMIN_PROVIDER_STATUSES = (ProviderStatus.APPROVED, ProviderStatus.REJECTED, ProviderStatus.PENDING)

RECENT_APPLICATIONS_DAYS = 7
RECENT_APPLICATIONS_LIMIT = 5


class AdminService:
    def __init__(self, db: Session, clock: Optional[Clock] = None, categories: Optional[CategoryService] = None):
        self.db = db
        self.clock = clock or default_clock
        self.users = IdentityRepository()
        self.providers = ProviderRepository()
        self.categories = categories or CategoryService(db)

    def list_applications(self, page: PageRequest, status: Optional[str] = None) -> tuple[list[User], int]:
        if status and status != "all":
            if not ProviderStatus.has_value(status):
                raise ValidationError(f"Invalid provider status: {status}")
        else:
            status = None
        return self.providers.find_applications(self.db, status=status, offset=page.offset, limit=page.limit)

    def get_application(self, user_id: int) -> User:
        user = self.users.get_user_by_id(self.db, user_id)
        if not user or user.role != Role.PROVIDER.value or user.provider_profile is None:
            raise NotFoundError("Provider not found")
        return user

    def update_provider_status(
        self, admin: Admin, user_id: int, status: str, rejection_reason: Optional[str] = None
    ) -> User:
        """
        Approve, reject or reopen a provider application.

        The affected category's provider count is recomputed after the commit so
        the catalog reflects the change on the next read.
        """
        if status not in {s.value for s in ADMIN_PROVIDER_STATUSES}:
            allowed = ", ".join(s.value for s in ADMIN_PROVIDER_STATUSES)
            raise ValidationError(f"Status must be one of: {allowed}")

        user = self.get_application(user_id)
        profile = user.provider_profile
        previous = profile.status
        profile.apply_status(ProviderStatus(status), admin.id, self.clock.now(), rejection_reason)
        user = self.users.save(self.db, user)

        self.categories.recompute_counts([user.provider_profile.service_category])
        logger.info(f"✅ Provider {user.email}: {previous} → {status} by admin {admin.email}")
        return user

    def list_users(self, page: PageRequest, role: Optional[str] = None) -> tuple[list[User], int]:
        if role and role != "all":
            if not Role.has_value(role):
                raise ValidationError(f"Invalid role: {role}")
        else:
            role = None
        return self.users.list_users(self.db, role=role, offset=page.offset, limit=page.limit)

    def dashboard_stats(self) -> tuple[dict, list[User]]:
        stats = {
            "totalCustomers": self.users.count_users(self.db, Role.CUSTOMER.value),
            "totalProviders": self.users.count_users(self.db, Role.PROVIDER.value),
            "pendingProviders": self.providers.count_by_status(self.db, ProviderStatus.PENDING.value),
            "approvedProviders": self.providers.count_by_status(self.db, ProviderStatus.APPROVED.value),
        }
        since = self.clock.now() - timedelta(days=RECENT_APPLICATIONS_DAYS)
        recent = self.users.recent_users(self.db, Role.PROVIDER.value, since, RECENT_APPLICATIONS_LIMIT)
        return stats, recent


async def send_provider_decision_email(
    to: str, provider_name: str, status: str, rejection_reason: Optional[str] = None
) -> None:
    """Fire-and-forget email for an approval decision; failures are logged only"""
    try:
        if status == ProviderStatus.APPROVED.value:
            await send_provider_approved_email(to, provider_name)
        elif status == ProviderStatus.REJECTED.value:
            await send_provider_rejected_email(to, provider_name, rejection_reason)
    except Exception as e:
        logger.error(f"❌ Failed to send provider {status} email to {to}: {e}")
