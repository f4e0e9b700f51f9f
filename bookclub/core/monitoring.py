"""
Monitoring and Tracing Configuration Module.

This module provides optional integration with Pydantic Logfire for monitoring
the BookClub API, including:
- FastAPI endpoint tracing
- SQLAlchemy query tracing
- Request metrics (method, path, status, latency)

Logfire is only configured when ``LOGFIRE_ENABLED`` is true and a
``LOGFIRE_TOKEN`` is present. Otherwise the helpers here only emit debug logs.
"""

import logging
import os
from typing import Optional

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

# Logfire configuration from environment
LOGFIRE_ENABLED = os.getenv("LOGFIRE_ENABLED", "false").lower() in ("true", "1", "yes")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "bookclub-api")
LOGFIRE_SERVICE_VERSION = os.getenv("LOGFIRE_SERVICE_VERSION", "0.0.0")

# Feature flags
LOGFIRE_TRACE_SQLALCHEMY = os.getenv("LOGFIRE_TRACE_SQLALCHEMY", "true").lower() in ("true", "1", "yes")
LOGFIRE_TRACE_FASTAPI = os.getenv("LOGFIRE_TRACE_FASTAPI", "true").lower() in ("true", "1", "yes")

_logfire_active = False


def is_logfire_active() -> bool:
    return _logfire_active


def initialize_logfire(app: Optional[FastAPI] = None, engine: Optional[AsyncEngine] = None) -> None:
    """
    Initialize Logfire for monitoring and tracing.

    Args:
        app: FastAPI application instance to instrument (optional).
        engine: Async SQLAlchemy engine to instrument (optional).

    The initialization is conditional based on LOGFIRE_ENABLED environment variable.
    """
    global _logfire_active

    if not LOGFIRE_ENABLED:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return

    if not LOGFIRE_TOKEN:
        logger.warning(
            "Logfire is enabled but LOGFIRE_TOKEN is not set. "
            "Monitoring will not work. Set LOGFIRE_TOKEN to enable Logfire."
        )
        return

    logfire.configure(
        token=LOGFIRE_TOKEN,
        service_name=LOGFIRE_SERVICE_NAME,
        service_version=LOGFIRE_SERVICE_VERSION,
        environment=LOGFIRE_ENVIRONMENT,
    )

    if LOGFIRE_TRACE_SQLALCHEMY and engine is not None:
        logfire.instrument_sqlalchemy(engine=engine.sync_engine)
        logger.info("Logfire: SQLAlchemy instrumentation enabled")

    if LOGFIRE_TRACE_FASTAPI and app is not None:
        logfire.instrument_fastapi(app=app)
        logger.info("Logfire: FastAPI instrumentation enabled")

    _logfire_active = True
    logger.info(f"Logfire monitoring initialized: environment={LOGFIRE_ENVIRONMENT}, service={LOGFIRE_SERVICE_NAME}")


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Log an API request with performance metrics.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
    """
    logger.debug(f"{method} {path} -> {status_code} ({duration_ms:.2f}ms)")
    if not _logfire_active:
        return
    logfire.info(
        "API request completed",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=duration_ms,
    )
