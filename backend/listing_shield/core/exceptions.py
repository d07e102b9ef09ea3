"""
Listing Shield Exception Classes

Error taxonomy shared by services, functions and API endpoints.
Every error carries a machine-readable kind alongside the human message.
"""

from enum import Enum
from typing import Optional

import httpx
from sqlalchemy.exc import SQLAlchemyError

DATABASE_ERROR_MESSAGE = "Database operation failed"


class ErrorKind(str, Enum):
    """Error kind for taxonomy"""
    VALIDATION = "validation"       # Missing/malformed input (absent email, token)
    NETWORK = "network"             # Remote call failed or timed out
    AUTHORIZATION = "authorization" # Identity missing/invalid or insufficient privilege
    NOT_FOUND = "not_found"         # Requested row does not exist
    SERVER = "server"               # Store or platform fault
    UNKNOWN = "unknown"             # Unclassified errors


class ListingShieldError(Exception):
    """Base exception for Listing Shield errors"""

    kind: ErrorKind = ErrorKind.UNKNOWN
    status_code: int = 500

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        self.message = message
        if kind is not None:
            self.kind = kind
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/API response"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "kind": self.kind.value,
        }


class ValidationError(ListingShieldError):
    """Raised when required input is missing or malformed"""

    kind = ErrorKind.VALIDATION
    status_code = 400


class NetworkError(ListingShieldError):
    """Raised when a remote call (function invocation, HTTP fetch) fails"""

    kind = ErrorKind.NETWORK
    status_code = 502


class AuthorizationError(ListingShieldError):
    """
    Raised when the caller cannot be identified or lacks privilege.

    status_code distinguishes an unauthenticated caller (401) from an
    authenticated caller without the required role (403).
    """

    kind = ErrorKind.AUTHORIZATION
    status_code = 403

    def __init__(self, message: str, status_code: int = 403):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(ListingShieldError):
    """Raised when a requested row does not exist"""

    kind = ErrorKind.NOT_FOUND
    status_code = 404


class ServerError(ListingShieldError):
    """Raised on unexpected store or platform faults"""

    kind = ErrorKind.SERVER
    status_code = 500


def classify(exc: Exception) -> ListingShieldError:
    """Map an arbitrary exception onto the taxonomy"""
    if isinstance(exc, ListingShieldError):
        return exc
    if isinstance(exc, (httpx.TransportError, httpx.HTTPStatusError)):
        return NetworkError(str(exc))
    if isinstance(exc, SQLAlchemyError):
        # Driver messages carry SQL text; keep them out of responses
        return ServerError(DATABASE_ERROR_MESSAGE)
    return ListingShieldError(str(exc) or exc.__class__.__name__)
