"""Unit tests for the document composer."""

import pytest

from billpdf.contexts.binding.binder import bind
from billpdf.contexts.binding.schema import BLANK, MAX_LINE_ITEMS
from billpdf.contexts.templating.composer import (
    ComposedDocument,
    PageGeometry,
    compose,
    load_layout,
)
from billpdf.contexts.templating.exceptions import InvalidLayoutError, TemplateRenderError
from billpdf.contexts.templating.template_registry import TemplateRegistry

PNG_DATA_URI = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="


@pytest.mark.unit
def test_compose_fixed_geometry():
    """Test every composition has the same single A4 page."""
    doc = compose(bind({}))

    assert isinstance(doc, ComposedDocument)
    assert doc.page == PageGeometry(format="A4", width_mm=210, height_mm=297, padding_mm=8)
    assert doc.page.margin == "0"
    assert doc.page.print_background is True
    assert doc.item_rows == MAX_LINE_ITEMS
    assert "size: A4;" in doc.html


@pytest.mark.unit
def test_compose_container_shorter_than_page():
    """Test the page container leaves slack below the page height."""
    doc = compose(bind({}))

    assert doc.page.container_height_mm < doc.page.height_mm
    assert f"height: {doc.page.container_height_mm}mm;" in doc.html
    assert "height: 297mm;" not in doc.html


@pytest.mark.unit
def test_compose_overlay_placement_not_shared():
    """Test each document gets its own overlay placement."""
    first = compose(bind({}))
    first.overlays[0].placement["left"] = "0px"

    second = compose(bind({}))

    assert first.overlays[0].placement is not second.overlays[0].placement
    assert second.overlays[0].placement["left"] == "395px"


@pytest.mark.unit
def test_compose_places_bound_values(acme_record):
    """Test the two set fields appear and other slots show the blank marker."""
    doc = compose(bind(acme_record))

    assert ">Acme</td>" in doc.html
    assert ">INV-001</td>" in doc.html
    # Invoice date cell
    assert f'class="bold text-left border-bottom">{BLANK}</td>' in doc.html


@pytest.mark.unit
def test_compose_item_rows_fixed(full_record):
    """Test the item table has exactly MAX_LINE_ITEMS rows regardless of input."""
    doc = compose(bind(full_record))

    assert doc.html.count("data-position=") == MAX_LINE_ITEMS
    assert doc.html.count("item-detail-row") == MAX_LINE_ITEMS
    assert "Steel Rod" in doc.html
    assert "Binding Wire" in doc.html


@pytest.mark.unit
def test_compose_overflow_items_not_rendered():
    """Test items beyond the table size are not represented."""
    record = {f"b_item_name_{n}": f"Widget-{n:02d}" for n in range(1, 10)}
    doc = compose(bind(record))

    assert doc.html.count("data-position=") == MAX_LINE_ITEMS
    assert "Widget-06" in doc.html
    assert "Widget-07" not in doc.html
    assert "Widget-09" not in doc.html


@pytest.mark.unit
def test_compose_displays_totals_verbatim():
    """Test totals are shown as given, with no recomputation."""
    doc = compose(bind({"b_subtotal": "100.00", "b_grand_total": "999.99"}))

    assert "999.99" in doc.html
    assert "100.00" in doc.html


@pytest.mark.unit
def test_compose_cgst_amount_uses_rate_slot():
    """Test CGST percentage and amount are separate cells."""
    doc = compose(bind({"b_cgst_perce": "9%", "b_cgst_rate": "261.23"}))

    assert ">9%</td>" in doc.html
    assert ">261.23</td>" in doc.html


@pytest.mark.unit
def test_compose_escapes_markup():
    """Test record values cannot inject markup into the document."""
    doc = compose(bind({"m_company_name": "<script>alert(1)</script>"}))

    assert "<script>" not in doc.html
    assert "&lt;script&gt;" in doc.html


@pytest.mark.unit
def test_compose_accepts_partial_mapping():
    """Test keys missing from the bound mapping render as blank."""
    doc = compose({"m_company_name": "Acme"})
    assert ">Acme</td>" in doc.html


@pytest.mark.unit
def test_compose_overlays_without_images():
    """Test overlays exist but carry no image when none is supplied."""
    doc = compose(bind({}))

    assert [o.name for o in doc.overlays] == ["payment_qr", "signature"]
    assert all(o.image_src is None for o in doc.overlays)
    assert 'id="payment-qr"' not in doc.html
    assert 'id="signature"' not in doc.html
    assert "SCAN &amp; PAY" in doc.html
    assert "This is a Computer Generated Invoice" in doc.html


@pytest.mark.unit
def test_compose_embeds_data_uri_images():
    """Test inline images are placed as positioned overlays."""
    doc = compose(bind({"b_upi_qr": PNG_DATA_URI, "m_signature_image": PNG_DATA_URI}))

    overlays = {o.name: o for o in doc.overlays}
    assert overlays["payment_qr"].image_src == PNG_DATA_URI
    assert overlays["signature"].image_src == PNG_DATA_URI
    assert 'id="payment-qr"' in doc.html
    assert 'id="signature"' in doc.html
    assert "left: 395px; bottom: 305px; width: 120px" in doc.html


@pytest.mark.unit
def test_compose_rejects_remote_images():
    """Test non-inline image references are never embedded."""
    doc = compose(bind({"b_upi_qr": "https://example.com/qr.png"}))

    assert doc.overlays[0].image_src is None
    assert "example.com" not in doc.html


@pytest.mark.unit
def test_load_layout_default():
    """Test the bundled layout has the sections the template needs."""
    layout = load_layout()

    assert layout["page"]["format"] == "A4"
    assert set(layout["overlays"]) >= {"payment_qr", "signature"}
    assert layout["currency_symbol"] == "₹"


@pytest.mark.unit
def test_load_layout_missing_overlay(tmp_path):
    """Test a layout without the signature overlay is rejected."""
    layout_file = tmp_path / "layout.yaml"
    layout_file.write_text(
        """
page: {format: A4}
currency_symbol: "$"
overlays:
  payment_qr: {slot: b_upi_qr}
footer: {text: x}
""",
        encoding="utf-8",
    )

    with pytest.raises(InvalidLayoutError, match="signature"):
        load_layout(layout_file)


@pytest.mark.unit
def test_load_layout_unknown_slot(tmp_path):
    """Test an overlay pointing at a non-schema key is rejected."""
    layout_file = tmp_path / "layout.yaml"
    layout_file.write_text(
        """
page: {format: A4}
currency_symbol: "$"
overlays:
  payment_qr: {slot: b_upi_qr}
  signature: {slot: m_not_a_field}
footer: {text: x}
""",
        encoding="utf-8",
    )

    with pytest.raises(InvalidLayoutError, match="m_not_a_field"):
        load_layout(layout_file)


@pytest.mark.unit
def test_compose_template_error(tmp_path):
    """Test Jinja2 failures surface as TemplateRenderError."""
    (tmp_path / "invoice.html.jinja").write_text("{{ slots.m_company_name }}{{ missing }}")
    registry = TemplateRegistry(templates_path=tmp_path)

    with pytest.raises(TemplateRenderError) as exc_info:
        compose(bind({}), registry=registry)

    assert exc_info.value.template_name == "invoice"
    assert exc_info.value.original_error is not None
