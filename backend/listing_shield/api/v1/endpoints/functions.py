"""
Listing Shield Edge Functions
Privileged operations served under /functions/v1

Endpoints:
- ANY  /functions/v1/get-user-profile       - Caller's own profile
- POST /functions/v1/make-admin             - Promote a user to admin (admin only)
- POST /functions/v1/start-policy-analysis  - Create a policy analysis job

Each handler is a linear pipeline of gates that stops at the first
failure: Unauthenticated → Authenticated → Authorized → Mutated|Rejected.
No fault escapes a handler; every failure becomes a response.

get-user-profile answers 500 for every failure kind (configuration,
token, missing profile). That is the established contract of this
function and clients rely only on the message text.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listing_shield.core.auth import (
    ADMIN_ROLE,
    extract_bearer_token,
    get_user_from_token,
)
from listing_shield.core.config import settings
from listing_shield.core.database import get_db
from listing_shield.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    ServerError,
    classify,
)
from listing_shield.schemas.profile import ProfileResponse
from listing_shield.services import policy_analysis
from listing_shield.services.profile_service import (
    find_user_id_by_email,
    get_profile,
    upsert_profile_role,
)

logger = logging.getLogger(__name__)
router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS",
}

ANY_METHOD = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _preflight() -> PlainTextResponse:
    return PlainTextResponse("ok", headers=CORS_HEADERS)


def _json_error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status_code, headers=CORS_HEADERS)


async def _read_email(request: Request) -> Optional[str]:
    """email from the JSON body; None when absent or the body is malformed"""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(body, dict):
        return None
    email = body.get("email")
    if not isinstance(email, str) or not email.strip():
        return None
    return email.strip()


# ============================================================================
# get-user-profile
# ============================================================================


@router.api_route("/get-user-profile", methods=ANY_METHOD)
async def get_user_profile(request: Request, db: AsyncSession = Depends(get_db)):
    """Return the caller's {id, role}; 500 with a plain-text message on any failure"""
    if request.method == "OPTIONS":
        return _preflight()

    try:
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            raise ServerError("Server misconfigured: missing Supabase URL or service role key.")

        token = extract_bearer_token(request.headers.get("Authorization"))
        if not token:
            raise AuthorizationError("Not authorized: Missing Authorization header.", status_code=401)

        user = await get_user_from_token(token, service_role=True)
        if user is None:
            raise AuthorizationError("Not authorized: Invalid token.", status_code=401)

        profile = await get_profile(db, user.id)
        if profile is None:
            raise NotFoundError("Profile not found.")

        body = ProfileResponse.model_validate(profile).model_dump(mode="json")
        return JSONResponse(body, status_code=200, headers=CORS_HEADERS)

    except Exception as e:
        error = classify(e)
        logger.error(f"get-user-profile failed ({error.kind.value}): {e}")
        return PlainTextResponse(error.message, status_code=500, headers=CORS_HEADERS)


# ============================================================================
# make-admin
# ============================================================================


@router.api_route("/make-admin", methods=ANY_METHOD)
async def make_admin(request: Request, db: AsyncSession = Depends(get_db)):
    """Promote the user with the given email to admin; caller must be admin"""
    if request.method == "OPTIONS":
        return _preflight()
    if request.method != "POST":
        return PlainTextResponse("Method Not Allowed", status_code=405, headers=CORS_HEADERS)

    try:
        # 1. Authenticate the caller
        token = extract_bearer_token(request.headers.get("Authorization"))
        caller = await get_user_from_token(token) if token else None
        if caller is None:
            return _json_error(401, "Authentication failed")

        # 2. Authorize: only an existing admin may promote
        try:
            caller_profile = await get_profile(db, caller.id)
        except SQLAlchemyError as e:
            logger.error(f"make-admin could not load caller profile {caller.id}: {e}")
            await db.rollback()
            caller_profile = None
        if caller_profile is None or caller_profile.role != ADMIN_ROLE:
            logger.warning(f"make-admin rejected: caller {caller.id} is not an admin")
            return _json_error(403, "Forbidden: Caller is not an admin")

        # 3. Validate input
        email = await _read_email(request)
        if not email:
            return _json_error(400, "Email is required")

        # 4. Resolve target with service-level access
        target_id = await find_user_id_by_email(db, email)
        if target_id is None:
            return _json_error(404, "User not found with that email")

        # 5. Mutate
        await upsert_profile_role(db, target_id, ADMIN_ROLE)
        logger.info(f"User {email} promoted to admin by {caller.id}")
        return JSONResponse(
            {"message": f"User {email} has been made an admin."},
            status_code=200,
            headers=CORS_HEADERS,
        )

    except Exception as e:
        error = classify(e)
        logger.error(f"make-admin failed ({error.kind.value}): {e}")
        return _json_error(500, error.message)


# ============================================================================
# start-policy-analysis
# ============================================================================


@router.api_route("/start-policy-analysis", methods=["POST", "OPTIONS"])
async def start_policy_analysis(request: Request, db: AsyncSession = Depends(get_db)):
    """Create a pending policy analysis job unless one is already active"""
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    try:
        token = extract_bearer_token(request.headers.get("Authorization"))
        if not token:
            return _json_error(401, "Authorization required")

        user = await get_user_from_token(token, service_role=True)
        if user is None:
            return _json_error(401, "Invalid authorization")

        logger.info(f"Starting policy analysis job for user: {user.id}")

        existing = await policy_analysis.find_active_job(db, user.id)
        if existing is not None:
            return _json_error(
                409,
                "A policy analysis job is already running",
                existingJobId=str(existing.id),
            )

        total_policies = await policy_analysis.fetch_policy_count()
        job = await policy_analysis.create_pending_job(db, user.id, total_policies)
        await policy_analysis.trigger_processing(db, job)

        return JSONResponse(
            {
                "success": True,
                "jobId": str(job.id),
                "message": "Policy analysis job started successfully",
            },
            headers=CORS_HEADERS,
        )

    except Exception as e:
        error = classify(e)
        logger.error(f"Error in start-policy-analysis function ({error.kind.value}): {e}")
        return _json_error(500, error.message, success=False)
