"""
Listing Shield Compliance Proof API Endpoints

Endpoints:
- POST /proofs          - Create a proof for a passed check
- GET  /proofs          - Caller's active proofs
- GET  /proofs/{token}  - Public proof lookup
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from listing_shield.core.auth import AuthUser, get_current_user
from listing_shield.core.database import get_db
from listing_shield.models.proof import ComplianceProof
from listing_shield.schemas.proof import ComplianceProofResponse, ListingCheck
from listing_shield.services.compliance_proof_service import (
    generate_compliance_proof,
    get_compliance_proof_by_token,
    get_user_compliance_proofs,
)

router = APIRouter()


def proof_to_response(proof: ComplianceProof) -> ComplianceProofResponse:
    """Convert a ComplianceProof row to the response schema"""
    return ComplianceProofResponse(
        id=proof.id,
        listing_check_id=proof.listing_check_id,
        public_token=proof.public_token,
        archived_title=proof.archived_title,
        archived_description=proof.archived_description,
        compliance_status=proof.compliance_status,
        flagged_terms=list(proof.flagged_terms or []),
        suggestions=list(proof.suggestions or []),
        generated_at=proof.generated_at,
        expires_at=proof.expires_at,
        is_active=proof.is_active,
    )


@router.post("", response_model=ComplianceProofResponse, status_code=201)
async def create_proof(
    listing_check: ListingCheck,
    user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Only passed checks can be certified (400 otherwise)"""
    proof = await generate_compliance_proof(db, user.id, listing_check)
    return proof_to_response(proof)


@router.get("", response_model=list[ComplianceProofResponse])
async def list_my_proofs(
    user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    proofs = await get_user_compliance_proofs(db, user.id)
    return [proof_to_response(p) for p in proofs]


@router.get("/{token}", response_model=ComplianceProofResponse)
async def get_proof(token: str, db: AsyncSession = Depends(get_db)):
    proof = await get_compliance_proof_by_token(db, token)
    if proof is None:
        raise HTTPException(status_code=404, detail="Compliance proof not found or expired")
    return proof_to_response(proof)
