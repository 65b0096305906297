"""Caller identity verification for API requests."""

import base64
import hashlib
import hmac
from dataclasses import dataclass

from fastapi import HTTPException, Request, status

from core.config import settings

MAX_USER_ID_LENGTH = 64


@dataclass(frozen=True)
class CallerContext:
    """Identity of the authenticated caller, passed explicitly into every service call."""

    user_id: str


def _b64u_encode(data: bytes) -> str:
    """Base64-URL encode without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def sign_request(user_id: str, body: bytes) -> str:
    """
    Compute the gateway signature for a request.

    Args:
        user_id: Caller identifier asserted by the gateway
        body: Raw request body bytes (empty for GET/DELETE)

    Returns:
        Base64-URL encoded HMAC-SHA256 signature
    """
    message = user_id.encode() + b"\n" + body
    mac = hmac.new(settings.gateway_secret.encode(), message, hashlib.sha256).digest()
    return _b64u_encode(mac)


def verify_signature(user_id: str, body: bytes, signature: str) -> bool:
    """Check a gateway signature in constant time."""
    return hmac.compare_digest(sign_request(user_id, body), signature or "")


async def caller_context(request: Request) -> CallerContext:
    """
    Authenticate gateway->API requests using an HMAC signature.

    Expects headers:
    - X-User-Id: stable identifier of the user making the request
    - X-Auth-Signature: HMAC-SHA256 over "<user id>\\n" + request body

    Args:
        request: FastAPI request object

    Returns:
        CallerContext for the verified user

    Raises:
        HTTPException: If authentication fails
    """
    user_id = request.headers.get("X-User-Id")
    signature = request.headers.get("X-Auth-Signature")

    if not user_id or not signature:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing auth headers (X-User-Id, X-Auth-Signature)"
        )

    if len(user_id) > MAX_USER_ID_LENGTH:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid X-User-Id format")

    # Starlette caches the body on the request, so FastAPI can still parse it afterwards
    body = await request.body()

    if not verify_signature(user_id, body, signature):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid signature")

    return CallerContext(user_id=user_id)
