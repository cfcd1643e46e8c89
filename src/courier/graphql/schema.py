"""
Main GraphQL schema definition using Strawberry
"""

import strawberry
from graphql import get_introspection_query, graphql_sync
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter
from strawberry.subscriptions import GRAPHQL_TRANSPORT_WS_PROTOCOL, GRAPHQL_WS_PROTOCOL

from ..logging import get_logger
from .context import CourierContext, get_context
from .errors import SanitizeErrors
from .mutations.root import Mutation
from .queries.root import Query
from .subscriptions.root import Subscription

logger = get_logger(__name__)

schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    subscription=Subscription,
    extensions=[SanitizeErrors],
)


class SchemaValidationError(RuntimeError):
    """The assembled schema is inconsistent and the server must not start."""


def validate_schema() -> None:
    """Fail fast on a broken schema.

    Runs graphql-core's structural validation and then a full introspection
    query, which resolves every lazy type reference in the Courier types.

    Raises:
        SchemaValidationError: If either step reports errors
    """
    graphql_schema = schema._schema

    problems = [str(e) for e in gql_validate_schema(graphql_schema)]
    if not problems:
        result = graphql_sync(graphql_schema, get_introspection_query())
        problems = [str(e) for e in result.errors or []]

    if problems:
        logger.error("GraphQL schema validation failed", errors=problems)
        raise SchemaValidationError("; ".join(problems))

    logger.info(
        "GraphQL schema validation successful",
        types=len(graphql_schema.type_map),
        subscriptions=bool(graphql_schema.subscription_type),
    )


def create_graphql_router() -> GraphQLRouter[CourierContext, None]:
    """Create a GraphQL router for FastAPI serving queries, mutations and subscriptions."""
    return GraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql",
        context_getter=get_context,
        subscription_protocols=[
            GRAPHQL_TRANSPORT_WS_PROTOCOL,
            GRAPHQL_WS_PROTOCOL,
        ],
    )
