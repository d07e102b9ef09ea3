"""
Listing Shield Compliance Proof Model
Shareable certificates for listings that passed a compliance check
"""

from sqlalchemy import Column, String, Text, Boolean, DateTime, ARRAY
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from listing_shield.core.database import Base


class ComplianceProof(Base):
    """Compliance proof (compliance_proofs table)"""

    __tablename__ = "compliance_proofs"

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid())
    user_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    listing_check_id = Column(String(64), nullable=False)
    public_token = Column(String(128), nullable=False, unique=True)
    archived_title = Column(Text, nullable=False)
    archived_description = Column(Text, nullable=False)
    compliance_status = Column(String(20), nullable=False)
    flagged_terms = Column(ARRAY(Text), nullable=False, default=[])
    suggestions = Column(ARRAY(Text), nullable=False, default=[])
    generated_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
