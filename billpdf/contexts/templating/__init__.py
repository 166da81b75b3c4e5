"""
Templating Context

Responsibilities:
- Owns the invoice HTML template and its layout configuration (layout.yaml)
- Composes bound slots into a single fixed-size page
- Places the payment code and signature overlays

Owns: Invoice markup, page geometry, overlay placement
Never: Computes totals or starts the rendering engine
"""

from billpdf.contexts.templating.composer import (
    ComposedDocument,
    Overlay,
    PageGeometry,
    compose,
    load_layout,
)
from billpdf.contexts.templating.exceptions import InvalidLayoutError, TemplateRenderError
from billpdf.contexts.templating.template_registry import TemplateRegistry

__all__ = [
    "compose",
    "load_layout",
    "ComposedDocument",
    "Overlay",
    "PageGeometry",
    "TemplateRegistry",
    "TemplateRenderError",
    "InvalidLayoutError",
]
