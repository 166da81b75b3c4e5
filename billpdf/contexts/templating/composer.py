"""
Document Composer

Lays bound invoice slots out on the fixed single-page invoice template.
Composition is a structural transform only: no totals are computed, and the
only choice made per record is which of the fixed item rows carry values.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from jinja2 import TemplateError
from omegaconf import OmegaConf

from billpdf.contexts.binding.schema import BLANK, MAX_LINE_ITEMS, SCHEMA_FIELDS, line_items
from billpdf.contexts.templating.exceptions import InvalidLayoutError, TemplateRenderError
from billpdf.contexts.templating.logger import _log_debug, _log_info, _log_warning
from billpdf.contexts.templating.template_registry import TemplateRegistry

LAYOUT_PATH = Path(__file__).resolve().parent / "layout.yaml"
INVOICE_TEMPLATE = "invoice"

# Only inline images are embedded; remote URLs would make loading depend on the network
DATA_IMAGE_PREFIX = "data:image/"

REQUIRED_OVERLAYS = ("payment_qr", "signature")


@dataclass(frozen=True)
class PageGeometry:
    """
    Physical page of the composed document.

    Attributes:
        format: Paper format name understood by the engine
        width_mm: Page width
        height_mm: Page height
        padding_mm: Internal padding of the page container
        margin: Print margin applied on every side
        print_background: Whether background colors are printed
        slack_mm: Height the page container leaves unused at the bottom of the page
    """

    format: str = "A4"
    width_mm: float = 210
    height_mm: float = 297
    padding_mm: float = 8
    margin: str = "0"
    print_background: bool = True
    slack_mm: float = 1

    @property
    def container_height_mm(self) -> float:
        return self.height_mm - self.slack_mm


@dataclass(frozen=True)
class Overlay:
    """
    Absolutely positioned image, placed independently of the table flow.

    Attributes:
        name: Overlay identifier from layout.yaml (e.g., 'payment_qr')
        slot: Schema key holding the image data
        image_src: data: URI to embed, or None when no usable image was supplied
        placement: CSS offsets and sizes from layout.yaml
    """

    name: str
    slot: str
    image_src: Optional[str] = None
    placement: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ComposedDocument:
    """
    One logical invoice page, ready for the rendering engine.

    Attributes:
        html: Complete HTML markup
        page: Fixed page geometry
        item_rows: Number of item rows in the table (always MAX_LINE_ITEMS)
        overlays: Positioned overlays in layout order
    """

    html: str
    page: PageGeometry
    item_rows: int
    overlays: Tuple[Overlay, ...] = ()


def load_layout(layout_path: Path = LAYOUT_PATH) -> Dict[str, Any]:
    """
    Load and check the invoice layout configuration.

    Args:
        layout_path: Path to layout YAML (default: bundled layout.yaml)

    Returns:
        Plain dict with page, currency_symbol, overlays and footer sections

    Raises:
        InvalidLayoutError: If a required section or overlay is missing
    """
    layout = OmegaConf.to_container(OmegaConf.load(layout_path), resolve=True)

    for section in ("page", "currency_symbol", "overlays", "footer"):
        if section not in layout:
            raise InvalidLayoutError(f"Layout {layout_path} is missing '{section}'")

    for name in REQUIRED_OVERLAYS:
        overlay = layout["overlays"].get(name)
        if overlay is None:
            raise InvalidLayoutError(f"Layout {layout_path} is missing overlay '{name}'")
        if overlay.get("slot") not in SCHEMA_FIELDS:
            raise InvalidLayoutError(
                f"Overlay '{name}' references unknown slot {overlay.get('slot')!r}"
            )

    return layout


@lru_cache(maxsize=1)
def _default_layout() -> Dict[str, Any]:
    return load_layout()


@lru_cache(maxsize=1)
def _default_registry() -> TemplateRegistry:
    return TemplateRegistry()


def image_source(value: str, slot: str) -> Optional[str]:
    """Return value if it is an inline image URI, otherwise None."""
    if value == BLANK:
        return None
    if value.strip().startswith(DATA_IMAGE_PREFIX):
        return value.strip()
    _log_warning(f"Ignoring {slot}: only {DATA_IMAGE_PREFIX}... URIs are embedded")
    return None


def compose(
    bound: Mapping[str, str],
    registry: Optional[TemplateRegistry] = None,
    layout: Optional[Dict[str, Any]] = None,
) -> ComposedDocument:
    """
    Compose bound slots into the single-page invoice document.

    Args:
        bound: Slot mapping from bind(); keys it lacks render as blank
        registry: Template registry (default: shared registry)
        layout: Layout configuration (default: bundled layout.yaml)

    Returns:
        ComposedDocument with HTML, page geometry and overlays

    Raises:
        TemplateRenderError: If the invoice template fails to render
    """
    registry = registry or _default_registry()
    layout = layout or _default_layout()

    slots = {key: bound.get(key, BLANK) for key in SCHEMA_FIELDS}
    items = line_items(slots)
    page = PageGeometry(**layout["page"])

    overlays = tuple(
        Overlay(
            name=name,
            slot=config["slot"],
            image_src=image_source(slots[config["slot"]], config["slot"]),
            placement=dict(config),
        )
        for name, config in layout["overlays"].items()
    )

    template = registry.get_template(INVOICE_TEMPLATE)
    try:
        html = template.render(
            slots=slots,
            items=items,
            page=page,
            overlays={overlay.name: overlay for overlay in overlays},
            footer=layout["footer"],
            currency=layout["currency_symbol"],
        )
    except TemplateError as e:
        raise TemplateRenderError(
            "Failed to render invoice template",
            template_name=INVOICE_TEMPLATE,
            template_path=registry.get_template_path(INVOICE_TEMPLATE),
            original_error=e,
        ) from e

    filled = sum(1 for item in items if not item.is_blank)
    _log_info(f"Composed invoice {slots['b_invoice_no'].strip() or '(no number)'}")
    _log_debug(f"  Item rows: {filled}/{MAX_LINE_ITEMS} filled")
    _log_debug(f"  Overlays with images: {[o.name for o in overlays if o.image_src]}")

    return ComposedDocument(
        html=html,
        page=page,
        item_rows=len(items),
        overlays=overlays,
    )
