# SQLAlchemy Models

from listing_shield.models.rule import ComplianceRule, RiskLevel
from listing_shield.models.cache import ComplianceCache
from listing_shield.models.job import PolicyAnalysisJob, JobStatus
from listing_shield.models.profile import Profile
from listing_shield.models.proof import ComplianceProof

__all__ = [
    "ComplianceRule",
    "ComplianceCache",
    "PolicyAnalysisJob",
    "Profile",
    "ComplianceProof",
    # Enums
    "RiskLevel",
    "JobStatus",
]
