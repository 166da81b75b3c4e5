"""
Failure taxonomy for the rendering pipeline.

Every failure carries a machine-readable ``reason`` so the service boundary
can report it without leaking exception types to callers.
"""

from typing import Optional


class RenderingFailure(Exception):
    """
    Base class for pipeline failures.

    Attributes:
        reason: Machine-readable failure code
        message: Human-readable description
        original_error: The underlying exception, if any
    """

    reason = "rendering_failure"

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(message)


class InvalidInput(RenderingFailure):
    """Request carried no usable bill record. Raised before the engine starts."""

    reason = "invalid_input"


class EngineUnavailable(RenderingFailure):
    """Chromium could not be started (missing binary, resource exhaustion, timeout)."""

    reason = "engine_unavailable"


class LoadTimeout(RenderingFailure):
    """The composed document failed to load, or did not settle within its bound."""

    reason = "load_timeout"


class RenderError(RenderingFailure):
    """PDF generation failed, timed out, or produced other than one page."""

    reason = "render_error"


class ReleaseFailure(RenderingFailure):
    """
    Engine teardown failed.

    Only ever logged by the engine adapter; never raised to callers.
    """

    reason = "release_failure"
