"""
Client-facing error formatting.

Persistence validation errors carry internal prefixes such as
``"Validation error: "``; only the text after them is meant for clients.
"""

from collections.abc import Iterator

from graphql import GraphQLError
from strawberry.extensions import SchemaExtension

INTERNAL_ERROR_PREFIXES = (
    "SequelizeValidationError: ",
    "ValidationError: ",
    "Validation error: ",
)


def sanitize_message(message: str) -> str:
    """Strip internal persistence-layer prefixes from an error message."""
    for prefix in INTERNAL_ERROR_PREFIXES:
        message = message.replace(prefix, "")
    return message


def format_error(error: GraphQLError) -> GraphQLError:
    """Return ``error`` with a cleaned message; every other field is kept."""
    message = sanitize_message(error.message)
    if message == error.message:
        return error

    return GraphQLError(
        message,
        nodes=error.nodes,
        source=error.source,
        positions=error.positions,
        path=error.path,
        original_error=error.original_error,
        extensions=error.extensions,
    )


class SanitizeErrors(SchemaExtension):
    """Apply ``format_error`` to every error in an operation's result."""

    def on_operation(self) -> Iterator[None]:
        yield
        result = self.execution_context.result
        if result is not None and getattr(result, "errors", None):
            result.errors = [format_error(error) for error in result.errors]
