"""Admin router - provider applications, users and dashboard"""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...shared.pagination import PageRequest, page_params
from ..appointments.dependencies import get_clock
from ..identity.principal import Admin
from ..identity.schemas import user_to_response
from .schemas import (
    DashboardResponse,
    ProviderApplicationResponse,
    ProviderStatusChange,
    UserListResponse,
)
from .service import AdminService, send_provider_decision_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


def get_admin_service(db: Session = Depends(get_db), clock=Depends(get_clock)) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db, clock=clock)


def get_provider_decision_notifier():
    return send_provider_decision_email


@router.get("/providers", response_model=UserListResponse)
async def list_provider_applications(
    status: Optional[str] = None,
    page: PageRequest = Depends(page_params),
    service: AdminService = Depends(get_admin_service),
):
    users, total = service.list_applications(page, status)
    return UserListResponse(users=[user_to_response(u) for u in users], pagination=page.meta(total))


@router.get("/providers/{user_id}", response_model=ProviderApplicationResponse)
async def get_provider_application(user_id: int, service: AdminService = Depends(get_admin_service)):
    return ProviderApplicationResponse(provider=user_to_response(service.get_application(user_id)))


@router.put("/providers/{user_id}/status", response_model=ProviderApplicationResponse)
async def update_provider_status(
    user_id: int,
    data: ProviderStatusChange,
    background_tasks: BackgroundTasks,
    admin: Admin = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
    notify=Depends(get_provider_decision_notifier),
):
    """Approve, reject or reopen a provider application"""
    user = service.update_provider_status(admin, user_id, data.status, data.rejectionReason)
    background_tasks.add_task(notify, user.email, user.name, data.status, data.rejectionReason)
    return ProviderApplicationResponse(
        message=f"Provider status updated to {data.status}",
        provider=user_to_response(user),
    )


@router.get("/users", response_model=UserListResponse)
async def list_users(
    role: Optional[str] = None,
    page: PageRequest = Depends(page_params),
    service: AdminService = Depends(get_admin_service),
):
    users, total = service.list_users(page, role)
    return UserListResponse(users=[user_to_response(u) for u in users], pagination=page.meta(total))


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(service: AdminService = Depends(get_admin_service)):
    stats, recent = service.dashboard_stats()
    return DashboardResponse(stats=stats, recentApplications=[user_to_response(u) for u in recent])
