"""
Listing Shield API v1 Router
Aggregates all API endpoints
"""

from fastapi import APIRouter
from listing_shield.api.v1.endpoints import analytics, cache, compliance, jobs, proofs

# Create main API router
api_router = APIRouter()

# Include endpoint routers
api_router.include_router(compliance.router, prefix="/compliance", tags=["compliance"])
api_router.include_router(cache.router, prefix="/cache", tags=["cache"])
api_router.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
api_router.include_router(proofs.router, prefix="/proofs", tags=["proofs"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
