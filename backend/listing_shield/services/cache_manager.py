"""
Compliance Cache Manager
Thin accessors over the compliance_cache table

No eviction policy beyond the expires_at timestamp: expired rows are
removed by the cleanup_expired_cache stored procedure, or everything
is removed by clear_all_cache.
"""

import logging
from datetime import datetime, UTC
from uuid import UUID

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listing_shield.models.cache import ComplianceCache
from listing_shield.schemas.cache import CacheStats

logger = logging.getLogger(__name__)

# Lower bound of the UUID space; "id >= NIL_UUID" matches every row
NIL_UUID = UUID(int=0)


def aggregate_cache_stats(rows, now: datetime | None = None) -> CacheStats:
    """
    Aggregate (hit_count, confidence, expires_at) rows.

    avg_confidence is the mean over all rows, expired ones included.
    """
    now = now or datetime.now(UTC)
    rows = list(rows)
    if not rows:
        return CacheStats()

    expired = sum(1 for row in rows if row.expires_at is not None and row.expires_at < now)
    total_hits = sum(row.hit_count or 0 for row in rows)
    avg_confidence = sum(float(row.confidence or 0) for row in rows) / len(rows)

    return CacheStats(
        total_entries=len(rows),
        expired_entries=expired,
        hit_count=total_hits,
        avg_confidence=round(avg_confidence, 2),
    )


async def cleanup_expired_cache(db: AsyncSession) -> None:
    """Run the cleanup_expired_cache stored procedure; errors are logged only"""
    try:
        await db.execute(text("SELECT cleanup_expired_cache()"))
        await db.commit()
        logger.info("Successfully cleaned up expired cache entries")
    except SQLAlchemyError as e:
        logger.error(f"Failed to cleanup expired cache: {e}")
        await db.rollback()


async def get_cache_stats(db: AsyncSession) -> CacheStats:
    """Cache statistics; zeros when the table cannot be read"""
    try:
        result = await db.execute(
            select(
                ComplianceCache.hit_count,
                ComplianceCache.confidence,
                ComplianceCache.expires_at,
            )
        )
        return aggregate_cache_stats(result.fetchall())
    except SQLAlchemyError as e:
        logger.error(f"Error fetching cache stats: {e}")
        await db.rollback()
        return CacheStats()


async def clear_all_cache(db: AsyncSession) -> bool:
    """Delete every cache row (admin use)"""
    try:
        await db.execute(delete(ComplianceCache).where(ComplianceCache.id >= NIL_UUID))
        await db.commit()
        logger.info("Successfully cleared all cache entries")
        return True
    except SQLAlchemyError as e:
        logger.error(f"Error clearing cache: {e}")
        await db.rollback()
        return False
