"""
Supabase Edge Function invocation over HTTP
"""

import logging
from typing import Any, Optional

import httpx

from listing_shield.core.config import settings
from listing_shield.core.exceptions import NetworkError, ValidationError

logger = logging.getLogger(__name__)


def function_url(name: str) -> str:
    return f"{settings.functions_base_url}/{name}"


async def invoke_function(
    name: str,
    body: Optional[dict[str, Any]] = None,
    access_token: Optional[str] = None,
) -> httpx.Response:
    """
    POST a JSON body to an edge function.

    The caller's access token is forwarded when given, otherwise the
    service role key is used. Non-2xx responses are returned as-is;
    only transport failures raise.
    """
    if not settings.SUPABASE_URL:
        raise ValidationError("SUPABASE_URL is not configured")

    token = access_token or settings.SUPABASE_SERVICE_ROLE_KEY
    headers = {
        "Authorization": f"Bearer {token}",
        "apikey": settings.SUPABASE_ANON_KEY or settings.SUPABASE_SERVICE_ROLE_KEY,
        "Content-Type": "application/json",
    }

    try:
        async with httpx.AsyncClient(timeout=settings.FUNCTIONS_TIMEOUT_SECONDS) as client:
            response = await client.post(function_url(name), json=body or {}, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"Edge function {name} invocation failed: {e}")
        raise NetworkError(f"Edge function {name} unreachable: {e}") from e

    logger.info(f"Edge function {name} responded {response.status_code}")
    return response


def response_json(response: httpx.Response) -> dict:
    """Response body as a dict; empty when it is not a JSON object"""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
