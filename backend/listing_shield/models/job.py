"""
Listing Shield Policy Analysis Job Model
Long-running policy analysis tracked asynchronously (policy_analysis_jobs table)
"""

import enum

from sqlalchemy import Column, String, Integer, Text, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from listing_shield.core.database import Base


class JobStatus(str, enum.Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


ACTIVE_JOB_STATUSES = (JobStatus.PENDING.value, JobStatus.RUNNING.value)
TERMINAL_JOB_STATUSES = (JobStatus.COMPLETED.value, JobStatus.FAILED.value)


class PolicyAnalysisJob(Base):
    """
    Policy analysis job

    Created by the start-policy-analysis function and mutated by the
    background processor; this service only reads it.
    """

    __tablename__ = "policy_analysis_jobs"

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid())
    user_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=JobStatus.PENDING.value)
    progress_message = Column(Text, nullable=True)
    policies_processed = Column(Integer, nullable=False, default=0)
    sections_created = Column(Integer, nullable=False, default=0)
    keywords_extracted = Column(Integer, nullable=False, default=0)
    total_policies = Column(Integer, nullable=False, default=0)
    error_message = Column(Text, nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_JOB_STATUSES
