"""
Compliance Analytics
Activity report built from cached verdicts and issued proofs

- total_analyses: cache hits plus proofs issued
- cache_hit_rate: share of analyses served from the cache
- compliance_rate: share of analyses whose verdict passed
- avg_confidence / confidence_distribution: cached verdicts only
- daily_analyses: rows created per UTC day over the last 30 days
"""

import logging
from collections import Counter
from datetime import date, datetime, timedelta, UTC
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listing_shield.core.exceptions import ServerError
from listing_shield.models.cache import ComplianceCache
from listing_shield.models.proof import ComplianceProof
from listing_shield.schemas.analytics import (
    ComplianceAnalytics,
    ConfidenceBucket,
    DailyCount,
    StatusCount,
    TermCount,
)
from listing_shield.schemas.compliance import ComplianceStatus

logger = logging.getLogger(__name__)

TOP_TERMS_LIMIT = 10
DAILY_WINDOW_DAYS = 30

# (label, lower bound); each bucket runs up to the next bound, the last one includes 1.0
CONFIDENCE_BUCKETS = [
    ("0-0.2", 0.0),
    ("0.2-0.4", 0.2),
    ("0.4-0.6", 0.4),
    ("0.6-0.8", 0.6),
    ("0.8-1.0", 0.8),
]


def _percent(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole else 0.0


def _bucket_label(confidence: float) -> Optional[str]:
    if confidence < 0 or confidence > 1:
        return None
    label = CONFIDENCE_BUCKETS[0][0]
    for bucket_label, lower in CONFIDENCE_BUCKETS:
        if confidence >= lower:
            label = bucket_label
    return label


def _day(value) -> Optional[date]:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.date()


def aggregate_compliance_analytics(cache_rows, proof_rows, today: Optional[date] = None) -> ComplianceAnalytics:
    """
    Build the report from (hit_count, confidence, status, flagged_terms, created_at)
    cache rows and (compliance_status, flagged_terms, generated_at) proof rows.
    """
    today = today or datetime.now(UTC).date()
    cache_rows = list(cache_rows)
    proof_rows = list(proof_rows)

    cache_hits = sum(row.hit_count or 0 for row in cache_rows)
    total_analyses = cache_hits + len(proof_rows)

    statuses = [row.status for row in cache_rows] + [row.compliance_status for row in proof_rows]
    status_counts = Counter(statuses)

    term_counts = Counter()
    for row in cache_rows:
        term_counts.update(row.flagged_terms or [])
    for row in proof_rows:
        term_counts.update(row.flagged_terms or [])

    confidences = [float(row.confidence or 0) for row in cache_rows]
    bucket_counts = Counter(_bucket_label(c) for c in confidences)

    window = [today - timedelta(days=offset) for offset in range(DAILY_WINDOW_DAYS - 1, -1, -1)]
    day_counts = Counter(_day(row.created_at) for row in cache_rows)
    day_counts.update(_day(row.generated_at) for row in proof_rows)

    return ComplianceAnalytics(
        total_analyses=total_analyses,
        cache_hit_rate=_percent(cache_hits, total_analyses),
        avg_confidence=round(sum(confidences) / len(confidences), 2) if confidences else 0.0,
        compliance_rate=_percent(status_counts[ComplianceStatus.PASS.value], total_analyses),
        top_flagged_terms=[
            TermCount(term=term, count=count)
            for term, count in term_counts.most_common(TOP_TERMS_LIMIT)
        ],
        status_distribution=[
            StatusCount(status=status, count=count) for status, count in status_counts.items()
        ],
        confidence_distribution=[
            ConfidenceBucket(range=label, count=bucket_counts[label]) for label, _ in CONFIDENCE_BUCKETS
        ],
        daily_analyses=[DailyCount(date=day, count=day_counts[day]) for day in window],
    )


async def get_compliance_analytics(db: AsyncSession) -> ComplianceAnalytics:
    """
    Compliance activity report.

    Raises:
        ServerError: either table could not be read
    """
    try:
        cache_result = await db.execute(
            select(
                ComplianceCache.hit_count,
                ComplianceCache.confidence,
                ComplianceCache.status,
                ComplianceCache.flagged_terms,
                ComplianceCache.created_at,
            )
        )
        proof_result = await db.execute(
            select(
                ComplianceProof.compliance_status,
                ComplianceProof.flagged_terms,
                ComplianceProof.generated_at,
            )
        )
        cache_rows = cache_result.fetchall()
        proof_rows = proof_result.fetchall()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching compliance analytics: {e}")
        await db.rollback()
        raise ServerError("Failed to load compliance analytics") from e

    return aggregate_compliance_analytics(cache_rows, proof_rows)
