"""
Core utilities and configuration for the BookClub API.

This package provides core functionality including logging configuration,
security primitives, database setup, and other shared utilities.
"""

from bookclub.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
