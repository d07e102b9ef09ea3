"""
Listing Shield Profile Schemas
"""

from uuid import UUID
from pydantic import BaseModel, Field


class ProfileResponse(BaseModel):
    """Profile returned by get-user-profile"""

    id: UUID
    role: str

    class Config:
        from_attributes = True


class MakeAdminRequest(BaseModel):
    """Request body of make-admin"""

    email: str = Field(..., description="Email of the user to promote")


class MakeAdminResponse(BaseModel):
    message: str
