"""
Listing Shield Compliance Proof Schemas
"""

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field

from listing_shield.schemas.compliance import ComplianceStatus


# Request Schemas
class ListingCheck(BaseModel):
    """A completed compliance check to certify"""

    id: str = Field(..., description="Listing check ID")
    title: str
    description: str = ""
    status: ComplianceStatus
    flagged_terms: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


# Response Schemas
class ComplianceProofResponse(BaseModel):
    """Compliance proof (public certificate)"""

    id: UUID
    listing_check_id: str
    public_token: str
    archived_title: str
    archived_description: str
    compliance_status: ComplianceStatus
    flagged_terms: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    generated_at: datetime
    expires_at: datetime
    is_active: bool

    class Config:
        from_attributes = True
