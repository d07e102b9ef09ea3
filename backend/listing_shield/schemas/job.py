"""
Listing Shield Job Schemas
Policy analysis job Pydantic schemas
"""

from datetime import datetime
from uuid import UUID
from typing import Optional
from pydantic import BaseModel, Field


class PolicyAnalysisJobResponse(BaseModel):
    """Policy analysis job as read by polling"""

    id: UUID
    user_id: UUID
    status: str
    progress_message: Optional[str] = None
    policies_processed: int = 0
    sections_created: int = 0
    keywords_extracted: int = 0
    total_policies: int = 0
    error_message: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobListResponse(BaseModel):
    """Recent jobs"""

    total: int
    items: list[PolicyAnalysisJobResponse]


class StartJobResult(BaseModel):
    """
    Outcome of start-policy-analysis

    Field aliases follow the function's JSON contract (camelCase).
    """

    success: bool
    job_id: Optional[str] = Field(None, alias="jobId")
    message: str = ""
    error: Optional[str] = None
    existing_job_id: Optional[str] = Field(None, alias="existingJobId")

    class Config:
        populate_by_name = True
