"""
Error handling utilities for the GitHub exporter.

This module provides utility functions for consistent error reporting
across the codebase.
"""

import logging
from typing import Optional


def log_error(
    logger: logging.Logger,
    message: str,
    exception: Optional[Exception] = None,
    level: str = "error",
    traceback: bool = True,
    **context
) -> None:
    """Log errors with consistent format and context.

    Use this function for error logging so that every message carries the
    component, operation and target that produced it.

    Args:
        logger: Logger to use
        message: Error message
        exception: Optional exception that caused the error
        level: Log level (critical, error, warning, info)
        traceback: Whether to attach the exception traceback
        **context: Additional context to include (component, operation, etc.)

    Example:
        log_error(logger, "Failed to fetch repos", exception=e,
                  component="RepoCollector", operation="collect", target=name)
    """
    context_str = ""
    if context:
        context_str = " Context: " + ", ".join(f"{k}={v}" for k, v in context.items())

    if exception is not None and not traceback:
        context_str += f" Error: {exception.__class__.__name__}: {exception}"

    full_message = f"{message}{context_str}"

    exc_info = exception is not None and traceback

    if level == "critical":
        logger.critical(full_message, exc_info=exc_info)
    elif level == "error":
        logger.error(full_message, exc_info=exc_info)
    elif level == "warning":
        logger.warning(full_message, exc_info=exc_info)
    else:
        logger.info(full_message)
