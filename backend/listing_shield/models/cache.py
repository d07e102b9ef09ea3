"""
Listing Shield Compliance Cache Model
Prior verdicts keyed by content hash, with hit counter and TTL
"""

from datetime import datetime, UTC

from sqlalchemy import Column, String, Text, Integer, Numeric, DateTime, ARRAY
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func

from listing_shield.core.database import Base


class ComplianceCache(Base):
    """
    Cached compliance verdict (compliance_cache table)

    Rows are removed only by the expiry sweep (cleanup_expired_cache)
    or a full clear. There is no size bound and no LRU eviction.
    """

    __tablename__ = "compliance_cache"

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid())
    content_hash = Column(String(64), nullable=False, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(20), nullable=False)
    flagged_terms = Column(ARRAY(Text), nullable=False, default=[])
    suggestions = Column(ARRAY(Text), nullable=False, default=[])
    confidence = Column(Numeric(4, 2), nullable=False)
    rule_matches = Column(JSONB, nullable=False, default=[])
    hit_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=False)

    @property
    def is_expired(self) -> bool:
        """Whether the entry is past its TTL"""
        if self.expires_at is None:
            return True
        return datetime.now(UTC) > self.expires_at
