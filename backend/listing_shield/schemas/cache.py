"""
Listing Shield Cache Schemas
"""

from pydantic import BaseModel


class CacheStats(BaseModel):
    """Aggregated compliance cache statistics"""

    total_entries: int = 0
    expired_entries: int = 0
    hit_count: int = 0
    avg_confidence: float = 0


class CacheActionResponse(BaseModel):
    """Result of a cache maintenance action"""

    success: bool
    message: str
