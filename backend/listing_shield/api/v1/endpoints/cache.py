"""
Listing Shield Compliance Cache API Endpoints

Endpoints:
- GET    /cache/stats    - Cache statistics
- POST   /cache/cleanup  - Remove expired entries (admin)
- DELETE /cache          - Remove all entries (admin)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from listing_shield.core.auth import AuthUser, require_admin
from listing_shield.core.database import get_db
from listing_shield.schemas.cache import CacheActionResponse, CacheStats
from listing_shield.services import cache_manager

router = APIRouter()


@router.get("/stats", response_model=CacheStats)
async def get_cache_stats(db: AsyncSession = Depends(get_db)):
    """Cache statistics"""
    return await cache_manager.get_cache_stats(db)


@router.post("/cleanup", response_model=CacheActionResponse)
async def cleanup_expired_cache(
    db: AsyncSession = Depends(get_db),
    _admin: AuthUser = Depends(require_admin),
):
    """Expired cache sweep (fire-and-forget; failures are only logged)"""
    await cache_manager.cleanup_expired_cache(db)
    return CacheActionResponse(success=True, message="Expired cache cleanup requested")


@router.delete("", response_model=CacheActionResponse)
async def clear_all_cache(
    db: AsyncSession = Depends(get_db),
    _admin: AuthUser = Depends(require_admin),
):
    cleared = await cache_manager.clear_all_cache(db)
    return CacheActionResponse(
        success=cleared,
        message="All cache entries cleared" if cleared else "Failed to clear cache",
    )
