"""
Service context logger.

Provides logging interface for the service context with automatic [service] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[service]"


def _log_info(message: str) -> None:
    """Log info message with [service] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [service] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [service] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [service] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def log_request_failure(reason: str, message: str, error: BaseException = None) -> None:
    """
    Log a failed request.

    Expected failures are logged as one line; unexpected ones (error given)
    carry the traceback.
    """
    if error is None:
        _log_error(f"PDF generation failed ({reason}): {message}")
    else:
        logger.opt(exception=error).error(
            f"{CONTEXT_PREFIX} PDF generation failed ({reason}): {message}"
        )
