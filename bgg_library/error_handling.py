"""
Error types and common error handling utilities for the BGG Library package.
"""

import logging
from typing import Any, Callable
from functools import wraps

logger = logging.getLogger(__name__)


class BGGLibraryError(Exception):
    """Base class for package errors."""


class TransientCallError(BGGLibraryError):
    """The external knowledge service call failed; the same request may succeed later."""


class ConfigurationError(BGGLibraryError):
    """Missing credentials or invalid settings, detected before any run starts."""


class StorageError(BGGLibraryError):
    """The catalog database could not be read or written."""


def handle_errors(default_return: Any = None, log_error: bool = True):
    """
    Decorator to handle common exceptions and provide consistent error logging.

    Only for best-effort reads (statistics, listings for display); the
    backfill path reports its failures explicitly instead.

    Args:
        default_return: Value to return on error
        log_error: Whether to log the error
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if log_error:
                    logger.error(f"Error in {func.__name__}: {e}")
                return default_return
        return wrapper
    return decorator


def describe_service_error(error: Exception) -> str:
    """
    Turn an enrichment service failure into a message fit for end users.

    Args:
        error: Exception raised by the client or at client construction

    Returns:
        Human-readable message
    """
    if isinstance(error, ConfigurationError):
        return "AI service is not configured. Please contact the administrator."

    message = str(error).lower()
    if any(marker in message for marker in ("quota", "rate limit", "rate_limit", "429")):
        return "AI service is temporarily unavailable. Please try again later."
    if "safety" in message:
        return "The image could not be processed. Please try a different image."
    return "Failed to analyze the image. Please try again."
