"""Auth router - registration, login and token refresh"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...security_utils import create_access_token, create_refresh_token
from .schemas import (
    AuthResponse,
    LoginRequest,
    ProviderRegisterRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    user_to_response,
)
from .service import IdentityService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def get_identity_service(db: Session = Depends(get_db)) -> IdentityService:
    """Dependency injection for IdentityService"""
    return IdentityService(db)


def _tokens_for(user: User, message: str) -> TokenResponse:
    return TokenResponse(
        message=message,
        accessToken=create_access_token(user.id, user.role),
        refreshToken=create_refresh_token(user.id),
        user=user_to_response(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(data: RegisterRequest, service: IdentityService = Depends(get_identity_service)):
    """Register a customer account"""
    user = service.register_customer(data)
    return _tokens_for(user, "Registration successful")


@router.post("/register-provider", response_model=TokenResponse, status_code=201)
async def register_provider(
    data: ProviderRegisterRequest, service: IdentityService = Depends(get_identity_service)
):
    """Submit a provider application; the account is bookable only after admin approval"""
    user = service.register_provider(data)
    return _tokens_for(user, "Application submitted. An admin will review your profile.")


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, service: IdentityService = Depends(get_identity_service)):
    user, access_token, refresh_token = service.login(data.email, data.password)
    logger.info(f"✅ Login: {user.email} ({user.role})")
    return TokenResponse(
        message="Login successful",
        accessToken=access_token,
        refreshToken=refresh_token,
        user=user_to_response(user),
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh(data: RefreshRequest, service: IdentityService = Depends(get_identity_service)):
    user, access_token = service.refresh(data.refreshToken)
    return TokenResponse(accessToken=access_token, user=user_to_response(user))


@router.get("/me", response_model=AuthResponse)
async def me(user: User = Depends(get_current_user)):
    return AuthResponse(message="Authenticated", user=user_to_response(user))
