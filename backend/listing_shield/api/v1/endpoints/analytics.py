"""
Listing Shield Analytics API Endpoints

Endpoints:
- GET /analytics - Compliance activity report (admin)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from listing_shield.core.auth import AuthUser, require_admin
from listing_shield.core.database import get_db
from listing_shield.schemas.analytics import ComplianceAnalytics
from listing_shield.services import analytics_service

router = APIRouter()


@router.get("", response_model=ComplianceAnalytics)
async def get_compliance_analytics(
    db: AsyncSession = Depends(get_db),
    _admin: AuthUser = Depends(require_admin),
):
    return await analytics_service.get_compliance_analytics(db)
