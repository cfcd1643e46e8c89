"""
Tests for per-operation context construction
"""

from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException
from starlette.requests import Request
from starlette.websockets import WebSocket

from courier.auth.tokens import SESSION_EXPIRED_MESSAGE
from courier.config import settings
from courier.errors import AuthenticationError
from courier.graphql.context import (
    RequestContext,
    SubscriptionContext,
    build_request_context,
    build_subscription_context,
    get_context,
)
from courier.graphql.loaders import Loaders


def make_request(headers: dict[str, str] | None = None) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/graphql",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
    }
    return Request(scope)


def make_websocket() -> WebSocket:
    async def receive():
        return {"type": "websocket.connect"}

    async def send(message):
        pass

    scope = {"type": "websocket", "path": "/graphql", "headers": []}
    return WebSocket(scope, receive=receive, send=send)


@pytest.fixture
def factory():
    return MagicMock(name="session_factory")


class TestBuildRequestContext:
    @pytest.mark.asyncio
    async def test_anonymous_without_token(self, factory, secret):
        context = await build_request_context(None, factory, secret)

        assert isinstance(context, RequestContext)
        assert context.me is None
        assert context.secret == secret
        assert context.session_factory is factory
        assert isinstance(context.loaders, Loaders)

    @pytest.mark.asyncio
    async def test_valid_token_attaches_identity(self, factory, secret, make_token):
        context = await build_request_context(make_token({"id": 2}), factory, secret)

        assert context.me is not None
        assert context.me["id"] == 2
        assert context.me["username"] == "rwieruch"

    @pytest.mark.asyncio
    async def test_expired_token_fails(self, factory, secret, make_token):
        token = make_token(expires_in=timedelta(seconds=-10))

        with pytest.raises(AuthenticationError, match="Your session expired"):
            await build_request_context(token, factory, secret)

    @pytest.mark.asyncio
    async def test_each_operation_gets_a_fresh_loader(self, factory, secret):
        first = await build_request_context(None, factory, secret)
        second = await build_request_context(None, factory, secret)

        assert first.loaders is not second.loaders
        assert first.loaders.user_loader is not second.loaders.user_loader


class TestBuildSubscriptionContext:
    @pytest.mark.asyncio
    async def test_has_no_identity_field(self, factory):
        context = build_subscription_context(factory)

        assert isinstance(context, SubscriptionContext)
        assert not hasattr(context, "me")
        assert not hasattr(context, "secret")
        assert context.session_factory is factory
        assert isinstance(context.loaders, Loaders)

    @pytest.mark.asyncio
    async def test_fresh_loader_per_call(self, factory):
        assert build_subscription_context(factory).loaders is not (
            build_subscription_context(factory).loaders
        )


class TestGetContext:
    @pytest.mark.asyncio
    async def test_anonymous_request_needs_no_secret(self, factory, monkeypatch):
        monkeypatch.setattr(settings, "secret", None)

        with patch("courier.graphql.context.get_session_factory", return_value=factory):
            context = await get_context(make_request())

        assert isinstance(context, RequestContext)
        assert context.me is None
        assert context.secret is None

    @pytest.mark.asyncio
    async def test_http_request_without_header(self, factory, secret):
        with patch("courier.graphql.context.get_session_factory", return_value=factory):
            context = await get_context(make_request())

        assert isinstance(context, RequestContext)
        assert context.me is None

    @pytest.mark.asyncio
    async def test_http_request_reads_token_header(self, factory, secret, make_token):
        request = make_request({"x-token": make_token({"id": 5})})

        with patch("courier.graphql.context.get_session_factory", return_value=factory):
            context = await get_context(request)

        assert isinstance(context, RequestContext)
        assert context.me["id"] == 5

    @pytest.mark.asyncio
    async def test_invalid_token_is_401_with_sanitized_detail(self, factory, secret):
        request = make_request({"x-token": "garbage"})

        with patch("courier.graphql.context.get_session_factory", return_value=factory):
            with pytest.raises(HTTPException) as exc_info:
                await get_context(request)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == SESSION_EXPIRED_MESSAGE

    @pytest.mark.asyncio
    async def test_websocket_gets_subscription_context(self, factory, secret, make_token):
        with patch("courier.graphql.context.get_session_factory", return_value=factory):
            context = await get_context(make_websocket())

        assert isinstance(context, SubscriptionContext)
        assert not hasattr(context, "me")
