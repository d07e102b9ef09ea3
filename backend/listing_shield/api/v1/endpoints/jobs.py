"""
Listing Shield Jobs API Endpoints
Policy analysis job start and status polling

Endpoints:
- POST /jobs/policy-analysis  - Start a policy analysis job
- GET  /jobs                  - Caller's recent jobs
- GET  /jobs/latest           - Caller's latest job
- GET  /jobs/{job_id}         - Job status
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from listing_shield.core.auth import AuthUser, extract_bearer_token, get_current_user
from listing_shield.core.database import get_db
from listing_shield.schemas.job import (
    JobListResponse,
    PolicyAnalysisJobResponse,
    StartJobResult,
)
from listing_shield.services.policy_job_service import policy_job_service

router = APIRouter()


@router.post("/policy-analysis", response_model=StartJobResult)
async def start_policy_analysis(
    authorization: Optional[str] = Header(None),
    _user: AuthUser = Depends(get_current_user),
):
    """
    Start a policy analysis job

    Duplicate refusal happens in start-policy-analysis; a refused start
    comes back with success=false and existingJobId.
    """
    return await policy_job_service.start_analysis(extract_bearer_token(authorization))


@router.get("", response_model=JobListResponse)
async def list_jobs(
    limit: int = Query(10, ge=1, le=100),
    user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Recent jobs of the caller"""
    jobs = await policy_job_service.list_recent_jobs(db, user_id=user.id, limit=limit)
    return JobListResponse(
        total=len(jobs),
        items=[PolicyAnalysisJobResponse.model_validate(job) for job in jobs],
    )


@router.get("/latest", response_model=PolicyAnalysisJobResponse)
async def get_latest_job(
    user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    job = await policy_job_service.get_latest_job(db, user_id=user.id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return PolicyAnalysisJobResponse.model_validate(job)


@router.get("/{job_id}", response_model=PolicyAnalysisJobResponse)
async def get_job_status(
    job_id: str,
    user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Job status; another user's job reads as not found"""
    job = await policy_job_service.get_job_status(db, job_id)
    if job is None or str(job.user_id) != user.id:
        raise HTTPException(status_code=404, detail="Job not found")
    return PolicyAnalysisJobResponse.model_validate(job)
