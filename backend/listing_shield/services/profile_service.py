"""
Profile data access used by the authorization gates
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select, text
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from listing_shield.models.profile import Profile

logger = logging.getLogger(__name__)


async def get_profile(db: AsyncSession, user_id: str) -> Optional[Profile]:
    """Caller's own profile row, or None"""
    result = await db.execute(select(Profile).where(Profile.id == UUID(str(user_id))))
    return result.scalar_one_or_none()


async def find_user_id_by_email(db: AsyncSession, email: str) -> Optional[str]:
    """
    Look up an auth user by email.

    Reads auth.users directly, which requires the service-level database
    connection this backend runs with.
    """
    result = await db.execute(
        text("SELECT id FROM auth.users WHERE lower(email) = lower(:email) LIMIT 1"),
        {"email": email.strip()},
    )
    row = result.fetchone()
    return str(row.id) if row else None


async def upsert_profile_role(db: AsyncSession, user_id: str, role: str) -> None:
    """Create or update a profile row with the given role"""
    stmt = insert(Profile).values(id=UUID(str(user_id)), role=role)
    stmt = stmt.on_conflict_do_update(
        index_elements=[Profile.id],
        set_={"role": role},
    )
    await db.execute(stmt)
    await db.commit()
    logger.info(f"Profile {user_id} role set to {role}")
