"""
Per-operation GraphQL context.

Subscriptions arrive over a WebSocket and get a ``SubscriptionContext``, which
has no identity. Queries and mutations arrive over HTTP and get a
``RequestContext`` carrying the verified token claim (or None) and the signing
secret. Both carry the shared session factory and a freshly built ``Loaders``.
"""

from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.requests import HTTPConnection
from starlette.websockets import WebSocket
from strawberry.fastapi import BaseContext

from ..auth.tokens import Me, get_me
from ..config import get_secret, settings
from ..database.connection import get_session_factory
from ..errors import AuthenticationError
from ..logging import bind_user_id, get_logger
from .loaders import Loaders

logger = get_logger(__name__)


class CourierContext(BaseContext):
    """Fields shared by every operation kind."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        loaders: Loaders,
    ):
        super().__init__()
        self.session_factory = session_factory
        self.loaders = loaders


class SubscriptionContext(CourierContext):
    """Context for subscription operations; carries no identity."""


class RequestContext(CourierContext):
    """Context for query and mutation operations."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        loaders: Loaders,
        me: Me | None,
        secret: str | None,
    ):
        super().__init__(session_factory, loaders)
        self.me = me
        self.secret = secret


def build_subscription_context(
    session_factory: async_sessionmaker[AsyncSession],
) -> SubscriptionContext:
    return SubscriptionContext(session_factory=session_factory, loaders=Loaders(session_factory))


async def build_request_context(
    token: str | None,
    session_factory: async_sessionmaker[AsyncSession],
    secret: str | None,
) -> RequestContext:
    """Verify the inbound token and assemble the request context.

    Raises:
        AuthenticationError: If a token is present but invalid or expired
    """
    me = await get_me(token, secret, algorithm=settings.jwt_algorithm)
    return RequestContext(
        session_factory=session_factory,
        loaders=Loaders(session_factory),
        me=me,
        secret=secret,
    )


async def get_context(connection: HTTPConnection) -> CourierContext:
    """Strawberry context getter for both HTTP and WebSocket operations."""
    session_factory = get_session_factory()

    if isinstance(connection, WebSocket):
        return build_subscription_context(session_factory)

    token = connection.headers.get(settings.token_header)
    # An anonymous request never needs the secret; signing in resolves it itself
    secret = get_secret() if token else settings.secret
    try:
        context = await build_request_context(token, session_factory, secret)
    except AuthenticationError as e:
        logger.warning("Authentication failed", error=str(e))
        raise HTTPException(status_code=401, detail=e.message) from e

    if context.me is not None:
        bind_user_id(context.me.get("id"))

    return context
