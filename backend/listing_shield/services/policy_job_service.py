"""
Policy Job Service
Starts policy analysis jobs and reads their status from policy_analysis_jobs

Actual processing happens in the start-policy-analysis / process-policies-ai
functions. This service never deduplicates locally and has no polling
loop; callers poll get_job_status.

All reads return None / [] on store faults, so None means "not found or
transient fetch failure".
"""

import logging
from typing import Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listing_shield.core.exceptions import ListingShieldError
from listing_shield.models.job import PolicyAnalysisJob
from listing_shield.schemas.job import StartJobResult
from listing_shield.services.supabase_functions import invoke_function, response_json

logger = logging.getLogger(__name__)

START_FUNCTION = "start-policy-analysis"
DEFAULT_JOB_LIMIT = 10


class PolicyJobService:
    """Accessor over policy analysis jobs"""

    async def start_analysis(self, access_token: Optional[str] = None) -> StartJobResult:
        """Invoke start-policy-analysis with an empty body"""
        try:
            response = await invoke_function(START_FUNCTION, {}, access_token=access_token)
        except ListingShieldError as e:
            logger.error(f"Error starting policy analysis: {e.message}")
            return StartJobResult(success=False, message=f"Failed to start analysis: {e.message}")

        data = response_json(response)

        if not response.is_success:
            error = data.get("error") or response.text or f"HTTP {response.status_code}"
            logger.error(f"Error starting policy analysis: {error}")
            return StartJobResult(
                success=False,
                message=f"Failed to start analysis: {error}",
                error=error,
                existing_job_id=data.get("existingJobId"),
            )

        try:
            return StartJobResult.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Unexpected start-policy-analysis response: {e}")
            return StartJobResult(
                success=False,
                message="Failed to start analysis: unexpected response",
                error=str(e),
            )

    async def get_job_status(self, db: AsyncSession, job_id: str) -> Optional[PolicyAnalysisJob]:
        try:
            result = await db.execute(
                select(PolicyAnalysisJob).where(PolicyAnalysisJob.id == UUID(str(job_id)))
            )
            return result.scalar_one_or_none()
        except (SQLAlchemyError, ValueError) as e:
            logger.error(f"Error fetching job status: {e}")
            return None

    async def list_recent_jobs(
        self,
        db: AsyncSession,
        user_id: Optional[str] = None,
        limit: int = DEFAULT_JOB_LIMIT,
    ) -> list[PolicyAnalysisJob]:
        """Most recent jobs first"""
        try:
            query = select(PolicyAnalysisJob)
            if user_id:
                query = query.where(PolicyAnalysisJob.user_id == UUID(str(user_id)))
            query = query.order_by(PolicyAnalysisJob.created_at.desc()).limit(limit)

            result = await db.execute(query)
            return list(result.scalars().all())
        except (SQLAlchemyError, ValueError) as e:
            logger.error(f"Error fetching user jobs: {e}")
            return []

    async def get_latest_job(
        self,
        db: AsyncSession,
        user_id: Optional[str] = None,
    ) -> Optional[PolicyAnalysisJob]:
        jobs = await self.list_recent_jobs(db, user_id=user_id, limit=1)
        return jobs[0] if jobs else None


# Global instance
policy_job_service = PolicyJobService()
