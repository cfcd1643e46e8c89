"""
Tests for request logging helpers
"""

from courier.logging import (
    RequestContextFilter,
    bind_user_id,
    clear_request_context,
    generate_request_id,
    set_request_context,
)
from courier.middleware import operation_name_from_query, sanitize_query_params


def test_sensitive_params_redacted():
    params = {"x-token": "abc", "password": "pw", "limit": "10"}

    assert sanitize_query_params(params) == {
        "x-token": "[REDACTED]",
        "password": "[REDACTED]",
        "limit": "10",
    }


def test_operation_names():
    assert operation_name_from_query("query Feed { messages { edges { id } } }") == "Feed"
    assert operation_name_from_query("mutation Post { createMessage(text: \"x\") { id } }") == (
        "mutation:Post"
    )
    assert operation_name_from_query("{ users { id } }") == "unnamed_operation"
    assert operation_name_from_query("query IntrospectionQuery { __schema { types { name } } }") == (
        "__introspection"
    )


class TestRequestContextFilter:
    def teardown_method(self):
        clear_request_context()

    def test_attaches_request_operation_and_user(self):
        set_request_context(request_id="req-1", operation="mutation:Post")
        bind_user_id(7)

        event = RequestContextFilter()(None, "info", {"event": "Message created"})

        assert event == {
            "event": "Message created",
            "request_id": "req-1",
            "graphql_operation": "mutation:Post",
            "user_id": "7",
        }

    def test_anonymous_request_has_no_user(self):
        set_request_context(request_id="req-2", operation="Feed")

        event = RequestContextFilter()(None, "info", {"event": "Request started"})

        assert event["graphql_operation"] == "Feed"
        assert "user_id" not in event

    def test_new_request_drops_previous_user(self):
        set_request_context(request_id="req-3")
        bind_user_id(7)
        set_request_context(request_id="req-4")

        event = RequestContextFilter()(None, "info", {"event": "x"})

        assert event == {"event": "x", "request_id": "req-4"}

    def test_explicit_fields_are_kept(self):
        set_request_context(request_id="req-5")

        event = RequestContextFilter()(None, "info", {"event": "x", "request_id": "other"})

        assert event["request_id"] == "other"

    def test_cleared_context_adds_nothing(self):
        set_request_context(request_id="req-6", operation="Feed")
        clear_request_context()

        assert RequestContextFilter()(None, "info", {"event": "x"}) == {"event": "x"}


def test_request_ids_are_compact_and_unique():
    ids = {generate_request_id() for _ in range(20)}

    assert len(ids) == 20
    assert all(len(request_id) == 14 for request_id in ids)
