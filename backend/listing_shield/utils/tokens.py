"""
Secure token generation for compliance proofs
"""

import base64
import secrets
import time


def generate_secure_token() -> str:
    """
    Public proof token: proof_<epoch ms>_<256 random bits, base64url without padding>
    """
    raw = secrets.token_bytes(32)
    encoded = base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")
    return f"proof_{int(time.time() * 1000)}_{encoded}"
