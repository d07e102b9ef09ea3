"""
Listing Shield Compliance Schemas
Compliance check request/verdict Pydantic schemas
"""

from enum import Enum
from pydantic import BaseModel, Field


class ComplianceStatus(str, Enum):
    PASS = "pass"
    WARNING = "warning"
    FAIL = "fail"


# Request Schemas
class ComplianceCheckRequest(BaseModel):
    """Listing text to check"""

    title: str = Field(..., description="Listing title")
    description: str = Field("", description="Listing description")


# Response Schemas
class RuleMatch(BaseModel):
    """A compliance rule found in the listing text"""

    term: str
    risk_level: str
    reason: str


class ComplianceResult(BaseModel):
    """Compliance verdict for a listing"""

    status: ComplianceStatus
    flagged_terms: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    confidence: float = Field(..., ge=0, le=1)
    rule_matches: list[RuleMatch] = Field(default_factory=list)
