"""
Listing Shield Authentication
Bearer token handling and identity resolution against Supabase Auth
"""

import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession
from supabase import Client, create_client

from listing_shield.core.config import settings
from listing_shield.core.database import get_db
from listing_shield.core.exceptions import AuthorizationError
from listing_shield.services.profile_service import get_profile

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


@dataclass
class AuthUser:
    """Identity resolved from an access token"""
    id: str
    email: Optional[str] = None


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token part of an `Authorization: Bearer <token>` header"""
    if not authorization:
        return None
    token = authorization.replace("Bearer ", "", 1).strip()
    return token or None


@lru_cache(maxsize=2)
def get_supabase_client(service_role: bool = False) -> Client:
    """Supabase client built with the anon key, or the service role key when elevated"""
    key = settings.SUPABASE_SERVICE_ROLE_KEY if service_role else settings.SUPABASE_ANON_KEY
    return create_client(settings.SUPABASE_URL, key)


async def get_user_from_token(token: str, service_role: bool = False) -> Optional[AuthUser]:
    """
    Resolve the user owning an access token.

    Returns None when the token is rejected by Supabase Auth.
    The Supabase client is synchronous, so the call runs in a worker thread.
    """
    client = get_supabase_client(service_role)
    try:
        response = await asyncio.to_thread(client.auth.get_user, token)
    except Exception as e:
        logger.warning(f"Token rejected by Supabase Auth: {e}")
        return None

    user = getattr(response, "user", None) if response else None
    if user is None:
        return None
    return AuthUser(id=str(user.id), email=getattr(user, "email", None))


# ============================================================================
# FastAPI dependencies
# ============================================================================


async def get_current_user(
    authorization: Optional[str] = Header(None),
) -> AuthUser:
    """Require a valid bearer token (401 otherwise)"""
    token = extract_bearer_token(authorization)
    if not token:
        raise AuthorizationError("Missing Authorization header", status_code=401)

    user = await get_user_from_token(token)
    if user is None:
        raise AuthorizationError("Invalid token", status_code=401)
    return user


async def require_admin(
    user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AuthUser:
    """Require the caller's profile role to be admin (403 otherwise)"""
    profile = await get_profile(db, user.id)
    if profile is None or profile.role != ADMIN_ROLE:
        raise AuthorizationError("Forbidden: Caller is not an admin")
    return user
