import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session, joinedload

from .database import get_db
from .domain.identity.principal import Admin, Customer, Principal, Provider, to_principal
from .errors import AuthenticationError, ForbiddenError
from .models import User
from .security_utils import ACCESS_TOKEN_TYPE, decode_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the bearer access token"""

    if not credentials:
        raise AuthenticationError(
            "Not authenticated. Please provide a valid Bearer token in the Authorization header."
        )

    token = credentials.credentials

    # Basic token format validation before processing
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, token length: {len(token)}")
        raise AuthenticationError("Invalid token format. Expected a valid JWT token.")

    user_id = decode_token(token, ACCESS_TOKEN_TYPE)
    if user_id is None:
        raise AuthenticationError("Token is invalid or has expired. Please sign in again.")

    user = (
        db.query(User)
        .filter(User.id == user_id)
        .options(joinedload(User.provider_profile))
        .first()
    )
    if not user:
        logger.warning(f"⚠️ Token for unknown user id {user_id}")
        raise AuthenticationError("Authentication failed")

    logger.debug(f"✅ User authenticated: {user.email}")
    return user


async def get_current_principal(user: User = Depends(get_current_user)) -> Principal:
    principal = to_principal(user)
    if principal is None:
        logger.error(f"❌ Provider {user.email} has no provider profile")
        raise ForbiddenError("Provider profile missing")
    return principal


async def require_customer(principal: Principal = Depends(get_current_principal)) -> Customer:
    if not isinstance(principal, Customer):
        raise ForbiddenError("Only customers can perform this action")
    return principal


async def require_provider(principal: Principal = Depends(get_current_principal)) -> Provider:
    if not isinstance(principal, Provider):
        raise ForbiddenError("Only service providers can perform this action")
    return principal


async def require_admin(principal: Principal = Depends(get_current_principal)) -> Admin:
    if not isinstance(principal, Admin):
        logger.warning(f"⚠️ Non-admin {principal.email} attempted an admin action")
        raise ForbiddenError("Admin access required")
    return principal
