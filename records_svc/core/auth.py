"""
Authentication module for the Medical Records Service.

Callers authenticate with a bearer JWT whose ``sub`` claim is their user id.
Tokens are issued elsewhere; this service only verifies them and exposes the
caller's id to endpoints for ownership checks.
"""
import logging
from typing import Optional

from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from core.config import JWT_ALGORITHM, JWT_SECRET
from core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(
    auto_error=False,  # Missing tokens are answered with our own 401 body
    description="Bearer token issued by the authentication service.",
)


def decode_user_id(token: str) -> str:
    """
    Verify ``token`` and return the user id it was issued for.

    Raises:
        AuthenticationError: If the signature, expiry or ``sub`` claim is invalid.
    """
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise AuthenticationError()

    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        logger.warning("Bearer token without subject")
        raise AuthenticationError()
    return user_id


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> str:
    """
    Resolve the authenticated caller's user id.

    Raises:
        AuthenticationError: 401 if the token is missing or invalid.
    """
    if credentials is None:
        logger.warning("API request without bearer token")
        raise AuthenticationError("Token não informado")
    return decode_user_id(credentials.credentials)
