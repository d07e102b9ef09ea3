"""
Policy Analysis Job Creation
Logic behind the start-policy-analysis function

1. Refuse to start while the caller has a pending/running job
2. Count policies in the source feed for progress tracking
3. Insert a pending job
4. Hand the job to the process-policies-ai function

If the hand-off fails the job is marked failed right away.
"""

import logging
from datetime import datetime, UTC
from typing import Optional
from uuid import UUID

import httpx
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from listing_shield.core.config import settings
from listing_shield.core.exceptions import ListingShieldError, NetworkError, ValidationError
from listing_shield.models.job import ACTIVE_JOB_STATUSES, JobStatus, PolicyAnalysisJob
from listing_shield.services.supabase_functions import invoke_function
from listing_shield.utils.json_repair import parse_json_lenient

logger = logging.getLogger(__name__)

PROCESS_FUNCTION = "process-policies-ai"
QUEUED_MESSAGE = "Job queued for processing"
HANDOFF_FAILED_MESSAGE = "Failed to start background processing"


async def find_active_job(db: AsyncSession, user_id: str) -> Optional[PolicyAnalysisJob]:
    """Most recent pending/running job of a user"""
    result = await db.execute(
        select(PolicyAnalysisJob)
        .where(PolicyAnalysisJob.user_id == UUID(str(user_id)))
        .where(PolicyAnalysisJob.status.in_(ACTIVE_JOB_STATUSES))
        .order_by(PolicyAnalysisJob.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


def count_policies(payload) -> int:
    """Policy feed is either a list or {"policies": [...]}"""
    if isinstance(payload, list):
        return len(payload)
    if isinstance(payload, dict):
        policies = payload.get("policies") or []
        return len(policies) if isinstance(policies, list) else 0
    return 0


async def fetch_policy_count() -> int:
    """Number of policies in the source feed"""
    try:
        async with httpx.AsyncClient(timeout=settings.FUNCTIONS_TIMEOUT_SECONDS) as client:
            response = await client.get(settings.POLICIES_SOURCE_URL)
            response.raise_for_status()
    except httpx.HTTPError as e:
        raise NetworkError(f"Failed to fetch policy source: {e}") from e

    try:
        payload = parse_json_lenient(response.text)
    except ValueError as e:
        raise ValidationError(f"Policy source is not valid JSON: {e}") from e
    return count_policies(payload)


async def create_pending_job(db: AsyncSession, user_id: str, total_policies: int) -> PolicyAnalysisJob:
    job = PolicyAnalysisJob(
        user_id=UUID(str(user_id)),
        status=JobStatus.PENDING.value,
        progress_message=QUEUED_MESSAGE,
        total_policies=total_policies,
    )
    db.add(job)
    await db.commit()
    await db.refresh(job)
    logger.info(f"Created analysis job: {job.id}")
    return job


async def mark_job_failed(db: AsyncSession, job_id, message: str) -> None:
    await db.execute(
        update(PolicyAnalysisJob)
        .where(PolicyAnalysisJob.id == job_id)
        .values(
            status=JobStatus.FAILED.value,
            error_message=message,
            completed_at=datetime.now(UTC),
        )
    )
    await db.commit()


async def trigger_processing(db: AsyncSession, job: PolicyAnalysisJob) -> bool:
    """Invoke the background processor; marks the job failed when that errors"""
    try:
        response = await invoke_function(PROCESS_FUNCTION, {"jobId": str(job.id)})
        triggered = response.is_success
        if not triggered:
            logger.error(
                f"Error triggering background processing: HTTP {response.status_code} {response.text[:200]}"
            )
    except ListingShieldError as e:
        logger.error(f"Error triggering background function: {e.message}")
        triggered = False

    if not triggered:
        await mark_job_failed(db, job.id, HANDOFF_FAILED_MESSAGE)
    return triggered
