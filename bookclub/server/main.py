"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers exception handlers and includes all API routers.
It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookclub.core.database import engine, init_db
from bookclub.core.logging_config import get_logger, setup_logging
from bookclub.core.monitoring import initialize_logfire

from .api.v1 import books, chapters, health, tokens, user_books, users
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware
from .services.auth import get_current_user

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Handles startup and shutdown events for the FastAPI application.
    """
    # Startup
    logger.info(f"Starting up {constant.PROJECT_NAME} ({settings.environment})...")
    try:
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info(f"Shutting down {constant.PROJECT_NAME}...")
    await engine.dispose()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    BookClub API

    Backend for a book club: a public book catalogue with chapters, reader
    comments on chapters, and a personal shelf that tracks reading status and
    progress. Authenticate with `POST /tokens/authentication` and send the
    token as `Authorization: Bearer <token>`.
    """,
    version=constant.API_VERSION,
    contact={"name": "BookClub maintainers"},
    license_info={"name": "MIT"},
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(RequestLoggingMiddleware)

setup_exception_handlers(app)
initialize_logfire(app=app, engine=engine)

# Every router except health resolves the caller, public routes included
authenticated = [Depends(get_current_user)]

app.include_router(health.router, tags=["health"])
for resource in (users, tokens, books, chapters, user_books):
    app.include_router(resource.router, dependencies=authenticated)
