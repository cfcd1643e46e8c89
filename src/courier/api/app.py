"""
Main FastAPI application for Courier
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import is_test_mode, settings
from ..database import dispose_database, init_database
from ..database.connection import test_database_connection
from ..database.seed_data import bootstrap
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware

configure_logging(debug=settings.debug)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Courier API...")
    if not settings.secret:
        logger.warning("COURIER_SECRET is not set; tokens can be neither issued nor verified")

    init_database()

    ok, error = await test_database_connection()
    if not ok:
        logger.error("Database connection check failed", error=error)
        raise RuntimeError(error)

    await bootstrap()
    logger.info("Database ready", test_mode=is_test_mode())
    logger.info(f"Server on http://{settings.api_host}:{settings.api_port}/graphql")

    yield

    logger.info("Shutting down Courier API...")
    await dispose_database()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Courier API",
        description="GraphQL API server for users and their messages",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    from ..graphql.schema import create_graphql_router, validate_schema

    logger.info("Validating GraphQL schema...")
    validate_schema()

    app.include_router(create_graphql_router(), prefix="")
    logger.info("GraphQL endpoint initialized successfully", endpoint="/graphql")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "courier.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
