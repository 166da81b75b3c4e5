"""
Rendering Context

Responsibilities:
- Launches and tears down the headless Chromium engine
- Loads composed documents and prints them to PDF
- Classifies engine failures (unavailable, load timeout, render error)

Owns: Engine lifecycle, PDF generation, failure taxonomy
Never: Modifies template content
"""

from billpdf.contexts.rendering.engine import (
    ENGINE_ARGS,
    PDF_CONTENT_TYPE,
    ChromiumEngine,
    RenderedArtifact,
    RenderTimeouts,
)
from billpdf.contexts.rendering.exceptions import (
    EngineUnavailable,
    InvalidInput,
    LoadTimeout,
    ReleaseFailure,
    RenderError,
    RenderingFailure,
)

__all__ = [
    "ChromiumEngine",
    "RenderedArtifact",
    "RenderTimeouts",
    "ENGINE_ARGS",
    "PDF_CONTENT_TYPE",
    "RenderingFailure",
    "InvalidInput",
    "EngineUnavailable",
    "LoadTimeout",
    "RenderError",
    "ReleaseFailure",
]
