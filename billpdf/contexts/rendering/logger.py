"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[render]"


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_render_start(chromium_path: str, timeouts) -> None:
    """Log start of a render with engine context."""
    _log_info("Launching browser...")
    _log_debug(f"  Executable: {chromium_path}")
    _log_debug(
        f"  Timeouts: launch={timeouts.launch:g}s load={timeouts.load:g}s "
        f"rasterize={timeouts.rasterize:g}s release={timeouts.release:g}s"
    )


def log_render_result(artifact, elapsed_time: float) -> None:
    """
    Log a successful render.

    Args:
        artifact: RenderedArtifact from ChromiumEngine.render()
        elapsed_time: Time taken from launch to release
    """
    _log_success(
        f"PDF generated: {artifact.page_count} page, "
        f"{len(artifact.content)} bytes ({elapsed_time:.2f}s)"
    )


def log_release_failure(failure) -> None:
    """Log a teardown failure. These never propagate to the caller."""
    _log_warning(f"{failure.reason}: {failure.message}")
