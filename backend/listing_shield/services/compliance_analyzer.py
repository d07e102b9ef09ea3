"""
Database Compliance Analyzer

Scans listing text against the active compliance rules:
- Lower-cased title + description, case-insensitive substring match per rule
- Status: no match → pass, only warning-level matches → warning, any high → fail
- Verdicts cached by content hash (compliance_cache) with a TTL

The analyzer never raises to its caller. A rule fetch failure degrades to
pass (confidence 0.5) and any other fault degrades to warning
(confidence 0.1) so listing submission is never blocked.

Substring matching is intentionally naive: a short term embedded in an
unrelated word is flagged too.
"""

import hashlib
import logging
from datetime import datetime, timedelta, UTC
from typing import Iterable, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listing_shield.core.config import settings
from listing_shield.models.cache import ComplianceCache
from listing_shield.models.rule import ComplianceRule, RiskLevel
from listing_shield.schemas.compliance import (
    ComplianceResult,
    ComplianceStatus,
    RuleMatch,
)

logger = logging.getLogger(__name__)

CONFIDENCE_PASS = 0.95
CONFIDENCE_WARNING = 0.75
CONFIDENCE_FAIL = 0.85
CONFIDENCE_RULES_UNAVAILABLE = 0.5
CONFIDENCE_ERROR = 0.1

RETRY_MESSAGE = "Unable to complete compliance check. Please try again."


def generate_content_hash(title: str, description: str) -> str:
    """SHA-256 of the normalized listing content, used as the cache key"""
    content = f"{title.strip().lower()}|{description.strip().lower()}"
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def build_suggestion(match: RuleMatch) -> str:
    return f'{match.reason}: Remove or replace "{match.term}"'


def evaluate_rules(text: str, rules: Iterable[ComplianceRule]) -> ComplianceResult:
    """
    Classify text against a rule set.

    Each matching rule is reported once, however often its term occurs.
    """
    full_text = text.lower()
    matches: list[RuleMatch] = []

    for rule in rules:
        if not rule.term:
            continue
        if rule.term.lower() in full_text:
            matches.append(
                RuleMatch(term=rule.term, risk_level=rule.risk_level, reason=rule.reason)
            )

    if not matches:
        status, confidence = ComplianceStatus.PASS, CONFIDENCE_PASS
    elif any(m.risk_level == RiskLevel.HIGH.value for m in matches):
        status, confidence = ComplianceStatus.FAIL, CONFIDENCE_FAIL
    else:
        status, confidence = ComplianceStatus.WARNING, CONFIDENCE_WARNING

    return ComplianceResult(
        status=status,
        flagged_terms=[m.term for m in matches],
        suggestions=[build_suggestion(m) for m in matches],
        confidence=confidence,
        rule_matches=matches,
    )


def _rules_unavailable_result() -> ComplianceResult:
    return ComplianceResult(status=ComplianceStatus.PASS, confidence=CONFIDENCE_RULES_UNAVAILABLE)


def _error_result() -> ComplianceResult:
    return ComplianceResult(
        status=ComplianceStatus.WARNING,
        suggestions=[RETRY_MESSAGE],
        confidence=CONFIDENCE_ERROR,
    )


# ============================================================================
# Store access
# ============================================================================


async def _fetch_active_rules(db: AsyncSession) -> list[ComplianceRule]:
    result = await db.execute(select(ComplianceRule).where(ComplianceRule.is_active.is_(True)))
    return list(result.scalars().all())


async def _get_cached_result(db: AsyncSession, content_hash: str) -> Optional[ComplianceResult]:
    """Non-expired cached verdict for a content hash; bumps its hit counter"""
    try:
        result = await db.execute(
            select(ComplianceCache)
            .where(ComplianceCache.content_hash == content_hash)
            .where(ComplianceCache.expires_at > datetime.now(UTC))
            .limit(1)
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            return None

        cached = ComplianceResult(
            status=ComplianceStatus(entry.status),
            flagged_terms=list(entry.flagged_terms or []),
            suggestions=list(entry.suggestions or []),
            confidence=float(entry.confidence),
            rule_matches=[RuleMatch(**m) for m in (entry.rule_matches or [])],
        )

        await db.execute(
            update(ComplianceCache)
            .where(ComplianceCache.id == entry.id)
            .values(hit_count=ComplianceCache.hit_count + 1)
        )
        await db.commit()
        return cached
    except (SQLAlchemyError, ValueError, TypeError) as e:
        logger.warning(f"Compliance cache lookup failed, analyzing fresh: {e}")
        await db.rollback()
        return None


async def _store_result(
    db: AsyncSession,
    content_hash: str,
    title: str,
    description: str,
    result: ComplianceResult,
) -> None:
    """Cache a fresh verdict; failure never fails the analysis"""
    try:
        db.add(
            ComplianceCache(
                content_hash=content_hash,
                title=title.strip(),
                description=description.strip(),
                status=result.status.value,
                flagged_terms=result.flagged_terms,
                suggestions=result.suggestions,
                confidence=result.confidence,
                rule_matches=[m.model_dump() for m in result.rule_matches],
                hit_count=0,
                expires_at=datetime.now(UTC) + timedelta(hours=settings.CACHE_TTL_HOURS),
            )
        )
        await db.commit()
    except SQLAlchemyError as e:
        logger.warning(f"Failed to cache compliance result: {e}")
        await db.rollback()


# ============================================================================
# Public API
# ============================================================================


async def analyze_listing(db: AsyncSession, title: str, description: str) -> ComplianceResult:
    """Check listing text against the active compliance rules"""
    title = title or ""
    description = description or ""

    try:
        content_hash = generate_content_hash(title, description)

        cached = await _get_cached_result(db, content_hash)
        if cached is not None:
            logger.info("Cache hit for compliance analysis")
            return cached

        logger.info("Cache miss - performing fresh analysis")

        try:
            rules = await _fetch_active_rules(db)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching compliance rules: {e}")
            await db.rollback()
            return _rules_unavailable_result()

        result = evaluate_rules(f"{title} {description}", rules)
        await _store_result(db, content_hash, title, description, result)
        return result

    except Exception as e:
        logger.error(f"Database compliance analysis failed: {e}", exc_info=True)
        return _error_result()
