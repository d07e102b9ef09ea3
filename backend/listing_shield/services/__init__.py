# Business Logic Services

from listing_shield.services.compliance_analyzer import (
    analyze_listing,
    evaluate_rules,
    generate_content_hash,
)
from listing_shield.services.cache_manager import (
    cleanup_expired_cache,
    get_cache_stats,
    clear_all_cache,
)
from listing_shield.services.policy_job_service import (
    PolicyJobService,
    policy_job_service,
)
from listing_shield.services.analytics_service import get_compliance_analytics
from listing_shield.services.compliance_proof_service import (
    generate_compliance_proof,
    get_compliance_proof_by_token,
    get_user_compliance_proofs,
)

__all__ = [
    # Compliance Analyzer
    "analyze_listing",
    "evaluate_rules",
    "generate_content_hash",
    # Cache
    "cleanup_expired_cache",
    "get_cache_stats",
    "clear_all_cache",
    # Jobs
    "PolicyJobService",
    "policy_job_service",
    # Proofs
    "generate_compliance_proof",
    "get_compliance_proof_by_token",
    "get_user_compliance_proofs",
    # Analytics
    "get_compliance_analytics",
]
