"""
Listing Shield Analytics Schemas
"""

import datetime
from pydantic import BaseModel, Field


class TermCount(BaseModel):
    term: str
    count: int


class StatusCount(BaseModel):
    status: str
    count: int


class ConfidenceBucket(BaseModel):
    range: str
    count: int


class DailyCount(BaseModel):
    date: datetime.date
    count: int


class ComplianceAnalytics(BaseModel):
    """
    Compliance activity report over compliance_cache and compliance_proofs

    Rates are percentages rounded to 2 decimals.
    """

    total_analyses: int = 0
    cache_hit_rate: float = 0
    avg_confidence: float = 0
    compliance_rate: float = 0
    top_flagged_terms: list[TermCount] = Field(default_factory=list)
    status_distribution: list[StatusCount] = Field(default_factory=list)
    confidence_distribution: list[ConfidenceBucket] = Field(default_factory=list)
    daily_analyses: list[DailyCount] = Field(default_factory=list)
