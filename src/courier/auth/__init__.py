"""Authentication for Courier."""

from .passwords import hash_password, verify_password
from .tokens import SESSION_EXPIRED_MESSAGE, Me, create_token, get_me

__all__ = [
    "Me",
    "SESSION_EXPIRED_MESSAGE",
    "create_token",
    "get_me",
    "hash_password",
    "verify_password",
]
