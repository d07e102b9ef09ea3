"""
Listing Shield Compliance API Endpoints

Endpoints:
- POST /compliance/check - Check listing text against active compliance rules
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from listing_shield.core.database import get_db
from listing_shield.schemas.compliance import ComplianceCheckRequest, ComplianceResult
from listing_shield.services.compliance_analyzer import analyze_listing

router = APIRouter()


@router.post("/check", response_model=ComplianceResult)
async def check_listing(
    request: ComplianceCheckRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Listing compliance check

    Degrades instead of failing: when the rule store is unreachable the
    verdict is pass with confidence 0.5, on other faults warning with
    confidence 0.1.
    """
    return await analyze_listing(db, request.title, request.description)
