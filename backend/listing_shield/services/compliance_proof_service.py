"""
Compliance Proof Service
Shareable certificates for listings that passed a compliance check
"""

import logging
from datetime import datetime, timedelta, UTC
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listing_shield.core.config import settings
from listing_shield.core.exceptions import ServerError, ValidationError
from listing_shield.models.proof import ComplianceProof
from listing_shield.schemas.compliance import ComplianceStatus
from listing_shield.schemas.proof import ListingCheck
from listing_shield.utils.tokens import generate_secure_token

logger = logging.getLogger(__name__)


async def generate_compliance_proof(
    db: AsyncSession,
    user_id: str,
    listing_check: ListingCheck,
) -> ComplianceProof:
    """
    Archive a passed check under a fresh public token.

    Raises:
        ValidationError: the check did not pass
        ServerError: the proof could not be stored
    """
    if listing_check.status != ComplianceStatus.PASS:
        raise ValidationError("Only passed compliance checks can generate certificates")

    now = datetime.now(UTC)
    proof = ComplianceProof(
        user_id=UUID(str(user_id)),
        listing_check_id=listing_check.id,
        public_token=generate_secure_token(),
        archived_title=listing_check.title,
        archived_description=listing_check.description,
        compliance_status=listing_check.status.value,
        flagged_terms=listing_check.flagged_terms,
        suggestions=listing_check.suggestions,
        generated_at=now,
        expires_at=now + timedelta(days=settings.PROOF_TTL_DAYS),
        is_active=True,
    )

    try:
        db.add(proof)
        await db.commit()
        await db.refresh(proof)
    except SQLAlchemyError as e:
        logger.error(f"Error creating compliance proof: {e}")
        await db.rollback()
        raise ServerError("Failed to generate compliance certificate") from e

    logger.info(f"Compliance proof created for listing check {listing_check.id}")
    return proof


async def get_compliance_proof_by_token(db: AsyncSession, token: str) -> Optional[ComplianceProof]:
    """Active, unexpired proof for a public token"""
    try:
        result = await db.execute(
            select(ComplianceProof)
            .where(ComplianceProof.public_token == token)
            .where(ComplianceProof.is_active.is_(True))
            .where(ComplianceProof.expires_at > datetime.now(UTC))
        )
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching compliance proof: {e}")
        return None


async def get_user_compliance_proofs(db: AsyncSession, user_id: str) -> list[ComplianceProof]:
    """Active proofs of a user, newest first"""
    try:
        result = await db.execute(
            select(ComplianceProof)
            .where(ComplianceProof.user_id == UUID(str(user_id)))
            .where(ComplianceProof.is_active.is_(True))
            .order_by(ComplianceProof.created_at.desc())
        )
        return list(result.scalars().all())
    except SQLAlchemyError as e:
        logger.error(f"Error fetching user compliance proofs: {e}")
        return []
