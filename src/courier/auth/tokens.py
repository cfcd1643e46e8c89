"""Signed session tokens for self-issued credentials."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, NotRequired, TypedDict

import jwt
from jwt.exceptions import InvalidTokenError

from ..errors import AuthenticationError
from ..logging import get_logger

if TYPE_CHECKING:
    from ..dbmodels import Users

logger = get_logger(__name__)

SESSION_EXPIRED_MESSAGE = "Your session expired. Sign in again."


class Me(TypedDict):
    """Identity claim carried inside a session token."""

    id: int
    email: str
    username: str
    role: str | None
    exp: NotRequired[int]


async def get_me(token: str | None, secret: str | None, algorithm: str = "HS256") -> Me | None:
    """Verify a session token and return its identity claim.

    Returns None for a missing token (anonymous caller). Any verification
    failure (bad signature, expiry, malformed token) raises AuthenticationError
    with a fixed message; the underlying reason is only logged.
    """
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"verify_exp": True},
        )
    except InvalidTokenError as e:
        logger.warning("Session token validation failed", error=str(e))
        raise AuthenticationError(SESSION_EXPIRED_MESSAGE) from e

    return payload  # type: ignore[return-value]


def create_token(
    user: Users,
    secret: str,
    expires_in: timedelta,
    algorithm: str = "HS256",
) -> str:
    """Sign a session token for a stored user."""
    payload = {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "role": user.role,
        "exp": datetime.now(UTC) + expires_in,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)
