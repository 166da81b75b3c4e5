"""Pytest configuration and fixtures."""

import asyncio
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any, Dict, List, Optional

import pytest
from PyPDF2 import PdfWriter

from billpdf.contexts.rendering.engine import ChromiumEngine, RenderedArtifact
from billpdf.utils.settings import Settings

# A4 in points
A4_WIDTH = 595.28
A4_HEIGHT = 841.89


def build_pdf(pages: int = 1, width: float = A4_WIDTH, height: float = A4_HEIGHT) -> bytes:
    """Blank PDF with the given number of pages."""
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=width, height=height)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@dataclass
class EngineBehavior:
    """Scripted behavior and call counters for the fake Playwright driver."""

    pdf_bytes: bytes
    start_delay: float = 0.0
    start_error: Optional[BaseException] = None
    launch_error: Optional[BaseException] = None
    launch_delay: float = 0.0
    load_error: Optional[BaseException] = None
    load_delay: float = 0.0
    pdf_error: Optional[BaseException] = None
    pdf_delay: float = 0.0
    close_error: Optional[BaseException] = None

    driver_starts: int = 0
    driver_stops: int = 0
    driver_aborts: int = 0
    browsers_launched: int = 0
    browser_closes: int = 0
    launch_kwargs: Dict[str, Any] = field(default_factory=dict)
    pdf_kwargs: Dict[str, Any] = field(default_factory=dict)
    loaded_html: List[str] = field(default_factory=list)


class FakePage:
    def __init__(self, behavior: EngineBehavior):
        self.behavior = behavior

    async def set_content(self, html, wait_until=None, timeout=None):
        if self.behavior.load_delay:
            await asyncio.sleep(self.behavior.load_delay)
        if self.behavior.load_error:
            raise self.behavior.load_error
        self.behavior.loaded_html.append(html)

    async def pdf(self, **kwargs):
        self.behavior.pdf_kwargs = kwargs
        if self.behavior.pdf_delay:
            await asyncio.sleep(self.behavior.pdf_delay)
        if self.behavior.pdf_error:
            raise self.behavior.pdf_error
        return self.behavior.pdf_bytes


class FakeBrowser:
    def __init__(self, behavior: EngineBehavior):
        self.behavior = behavior

    async def new_page(self):
        return FakePage(self.behavior)

    async def close(self):
        self.behavior.browser_closes += 1
        if self.behavior.close_error:
            raise self.behavior.close_error


class FakeChromium:
    def __init__(self, behavior: EngineBehavior):
        self.behavior = behavior

    async def launch(self, **kwargs):
        self.behavior.launch_kwargs = kwargs
        if self.behavior.launch_delay:
            await asyncio.sleep(self.behavior.launch_delay)
        if self.behavior.launch_error:
            raise self.behavior.launch_error
        self.behavior.browsers_launched += 1
        return FakeBrowser(self.behavior)


class FakePlaywright:
    def __init__(self, behavior: EngineBehavior):
        self.behavior = behavior
        self.chromium = FakeChromium(behavior)

    async def stop(self):
        self.behavior.driver_stops += 1


class FakePlaywrightFactory:
    """
    Stands in for async_playwright: calling it returns a context manager with start().

    start() counts the driver as spawned before the handshake delay, like the
    real driver subprocess; __aexit__ is the only way to stop it if start()
    never returns.
    """

    def __init__(self, behavior: EngineBehavior):
        self.behavior = behavior

    def __call__(self):
        return self

    async def start(self):
        self.behavior.driver_starts += 1
        if self.behavior.start_delay:
            await asyncio.sleep(self.behavior.start_delay)
        if self.behavior.start_error:
            raise self.behavior.start_error
        return FakePlaywright(self.behavior)

    async def __aexit__(self, *args):
        self.behavior.driver_aborts += 1
        self.behavior.driver_stops += 1


class RecordingEngine:
    """
    Engine stand-in for orchestrator and API tests.

    Returns the composed HTML as the artifact content so tests can see which
    document produced which result, or raises the configured error.
    """

    def __init__(self, error: Optional[BaseException] = None, delay: float = 0.0):
        self.error = error
        self.delay = delay
        self.documents = []

    async def render(self, doc, timeouts=None):
        self.documents.append(doc)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return RenderedArtifact(content=doc.html.encode("utf-8"))


@pytest.fixture
def single_page_pdf():
    """One blank A4 page."""
    return build_pdf(pages=1)


@pytest.fixture
def engine_behavior(single_page_pdf):
    """Fake driver behavior that succeeds with a single-page PDF."""
    return EngineBehavior(pdf_bytes=single_page_pdf)


@pytest.fixture
def fake_engine(engine_behavior):
    """ChromiumEngine wired to the fake Playwright driver."""
    settings = Settings(chromium_path="/opt/fake/chromium")
    return ChromiumEngine(settings, playwright_factory=FakePlaywrightFactory(engine_behavior))


@pytest.fixture
def acme_record():
    """Record with only the company name and invoice number set."""
    return {"m_company_name": "Acme", "b_invoice_no": "INV-001"}


@pytest.fixture
def full_record():
    """Realistic record with two line items and totals."""
    return {
        "m_company_name": "Acme Traders",
        "m_company_address1": "12 Market Road",
        "m_company_gstin": "27ABCDE1234F1Z5",
        "m_pan_no": "ABCDE1234F",
        "m_bank_name": "State Bank",
        "m_for_name": "Acme Traders",
        "b_invoice_no": "INV-042",
        "b_invoice_date": "2025-11-14",
        "b_company_name": "Globex Retail",
        "b_item_1": 1,
        "b_item_name_1": "Steel Rod",
        "b_item_hsn_1": "7214",
        "b_item_quantity_1": 10,
        "b_item_rate_1": 250.0,
        "b_item_per_1": "pcs",
        "b_item_amount_1": "2,500.00",
        "b_item_dis_1": "12mm TMT",
        "b_item_2": 2,
        "b_item_name_2": "Binding Wire",
        "b_item_quantity_2": 5,
        "b_item_rate_2": 80.5,
        "b_item_amount_2": "402.50",
        "b_qty_total": 15,
        "b_subtotal": "2,902.50",
        "b_cgst_perce": "9%",
        "b_cgst_rate": "261.23",
        "b_sgst_percen": "9%",
        "b_sgst_rate": "261.23",
        "b_grand_total": "3,425.00",
        "b_amount_word": "Three Thousand Four Hundred Twenty Five Only",
    }


@pytest.fixture
def make_pdf():
    """Factory for blank PDFs: make_pdf(pages=2)."""
    return build_pdf


@pytest.fixture
def make_engine():
    """Factory for RecordingEngine stand-ins: make_engine(error=..., delay=...)."""
    return RecordingEngine
