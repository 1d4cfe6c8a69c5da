"""Admin schemas"""

from typing import Optional

from pydantic import BaseModel, Field

from ..appointments.schemas import Pagination
from ..identity.schemas import UserResponse


class ProviderStatusChange(BaseModel):
    status: str
    rejectionReason: Optional[str] = Field(default=None, max_length=2000)


class UserListResponse(BaseModel):
    success: bool = True
    users: list[UserResponse]
    pagination: Pagination


class ProviderApplicationResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    provider: UserResponse


class DashboardStats(BaseModel):
    totalCustomers: int
    totalProviders: int
    pendingProviders: int
    approvedProviders: int


class DashboardResponse(BaseModel):
    success: bool = True
    stats: DashboardStats
    recentApplications: list[UserResponse]
