"""
Rendering Engine Adapter

Drives a headless Chromium instance (through Playwright) to turn a composed
invoice into PDF bytes. Each render launches its own engine and tears it down
before returning, on success, on failure and on cancellation.

State machine per render:
    acquire -> load -> rasterize -> release
"""

import asyncio
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Optional

from playwright.async_api import Browser, Page, async_playwright
from playwright.async_api import Error as PlaywrightError

from billpdf.contexts.rendering.exceptions import (
    EngineUnavailable,
    LoadTimeout,
    ReleaseFailure,
    RenderError,
)
from billpdf.contexts.rendering.logger import (
    _log_debug,
    _log_info,
    log_release_failure,
    log_render_result,
    log_render_start,
)
from billpdf.contexts.templating.composer import ComposedDocument
from billpdf.utils.pdf_processing import page_count
from billpdf.utils.settings import Settings

PDF_CONTENT_TYPE = "application/pdf"

# Restricted-container profile: no privileged sandbox, single process, no GPU
ENGINE_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-software-rasterizer",
    "--no-zygote",
    "--single-process",
]


@dataclass(frozen=True)
class RenderTimeouts:
    """
    Upper bounds, in seconds, for each blocking step of a render.

    Attributes:
        launch: Starting the driver and the browser
        load: Opening a page and waiting for network idle
        rasterize: Producing the PDF
        release: Each teardown step (browser close, driver stop)
    """

    launch: float = 30.0
    load: float = 30.0
    rasterize: float = 30.0
    release: float = 10.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "RenderTimeouts":
        return cls(
            launch=settings.launch_timeout_s,
            load=settings.load_timeout_s,
            rasterize=settings.rasterize_timeout_s,
            release=settings.release_timeout_s,
        )


@dataclass(frozen=True)
class RenderedArtifact:
    """
    Rendered invoice.

    Attributes:
        content: PDF bytes
        content_type: MIME type of content
        page_count: Number of pages in the PDF (always 1 for invoices)
    """

    content: bytes
    content_type: str = PDF_CONTENT_TYPE
    page_count: int = 1


class ChromiumEngine:
    """
    Renders composed documents to PDF with a fresh Chromium per call.

    No browser is pooled or shared: at most one instance is live per
    in-flight render, and none outlives the render() call that started it.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        playwright_factory: Callable = async_playwright,
    ):
        """
        Initialize engine adapter.

        Args:
            settings: Service settings (executable path, default timeouts)
            playwright_factory: Callable returning an object with an async start()
                that yields a Playwright driver (default: async_playwright)
        """
        self.settings = settings or Settings()
        self._playwright_factory = playwright_factory

    @asynccontextmanager
    async def session(self, timeouts: RenderTimeouts) -> AsyncIterator[Browser]:
        """
        Acquire a browser for the duration of the block, then release it.

        Release runs exactly once whatever happens inside the block,
        including a failed launch and task cancellation.

        Raises:
            EngineUnavailable: If the driver or browser cannot be started in time
        """
        manager = self._playwright_factory()
        playwright = None
        browser = None
        try:
            try:
                try:
                    playwright = await asyncio.wait_for(manager.start(), timeouts.launch)
                except BaseException:
                    # The driver subprocess is spawned before the handshake completes
                    await self._abort_driver(manager, timeouts)
                    raise
                browser = await asyncio.wait_for(
                    playwright.chromium.launch(
                        executable_path=self.settings.chromium_path,
                        args=ENGINE_ARGS,
                        headless=True,
                    ),
                    timeouts.launch,
                )
            except asyncio.TimeoutError as e:
                raise EngineUnavailable(
                    f"Chromium did not start within {timeouts.launch:g}s", original_error=e
                ) from e
            except (PlaywrightError, OSError) as e:
                raise EngineUnavailable(
                    f"Chromium failed to start: {e}", original_error=e
                ) from e

            _log_info("Browser launched")
            yield browser
        finally:
            await self._release(browser, playwright, timeouts)

    async def _abort_driver(self, manager, timeouts: RenderTimeouts) -> None:
        """Stop a driver whose start() failed or timed out; failures are logged."""
        try:
            await asyncio.wait_for(manager.__aexit__(None, None, None), timeouts.release)
            _log_debug("Driver stopped after failed start")
        except Exception as e:
            log_release_failure(ReleaseFailure(f"Driver stop failed: {e!r}", e))

    async def _release(self, browser, playwright, timeouts: RenderTimeouts) -> None:
        """Close the browser and stop the driver; failures are logged, never raised."""
        # Stopping the driver also kills any browser it launched, so it runs
        # even when closing the browser failed or the launch never returned
        if browser is not None:
            try:
                await asyncio.wait_for(browser.close(), timeouts.release)
                _log_debug("Browser closed")
            except Exception as e:
                log_release_failure(ReleaseFailure(f"Browser close failed: {e!r}", e))
        if playwright is not None:
            try:
                await asyncio.wait_for(playwright.stop(), timeouts.release)
                _log_debug("Driver stopped")
            except Exception as e:
                log_release_failure(ReleaseFailure(f"Driver stop failed: {e!r}", e))

    async def _load(self, browser: Browser, doc: ComposedDocument, timeout: float) -> Page:
        """Open a page and wait until the document has no pending network activity."""

        async def open_and_load() -> Page:
            page = await browser.new_page()
            await page.set_content(doc.html, wait_until="networkidle", timeout=timeout * 1000)
            return page

        try:
            page = await asyncio.wait_for(open_and_load(), timeout)
        except asyncio.TimeoutError as e:
            raise LoadTimeout(
                f"Document did not finish loading within {timeout:g}s", original_error=e
            ) from e
        except PlaywrightError as e:
            raise LoadTimeout(f"Document failed to load: {e}", original_error=e) from e

        _log_info("Content loaded")
        return page

    async def _rasterize(self, page: Page, doc: ComposedDocument, timeout: float) -> bytes:
        """Print the loaded page to PDF with the document's fixed geometry."""
        margin = {side: doc.page.margin for side in ("top", "right", "bottom", "left")}
        try:
            content = await asyncio.wait_for(
                page.pdf(
                    format=doc.page.format,
                    print_background=doc.page.print_background,
                    margin=margin,
                    prefer_css_page_size=True,
                ),
                timeout,
            )
        except asyncio.TimeoutError as e:
            raise RenderError(
                f"PDF generation did not finish within {timeout:g}s", original_error=e
            ) from e
        except PlaywrightError as e:
            raise RenderError(f"PDF generation failed: {e}", original_error=e) from e

        return content

    async def render(
        self,
        doc: ComposedDocument,
        timeouts: Optional[RenderTimeouts] = None,
    ) -> RenderedArtifact:
        """
        Render a composed document to a single-page PDF.

        Args:
            doc: Composed invoice document
            timeouts: Step bounds (default: from settings)

        Returns:
            RenderedArtifact with the PDF bytes

        Raises:
            EngineUnavailable: Chromium could not be started
            LoadTimeout: The document failed to load in time
            RenderError: PDF generation failed or did not yield exactly one page
        """
        timeouts = timeouts or RenderTimeouts.from_settings(self.settings)
        log_render_start(self.settings.chromium_path, timeouts)
        start_time = time.time()

        async with self.session(timeouts) as browser:
            page = await self._load(browser, doc, timeouts.load)
            content = await self._rasterize(page, doc, timeouts.rasterize)

        pages = page_count(content)
        if pages is None:
            raise RenderError("Expected a single-page PDF, engine returned an unreadable PDF")
        if pages != 1:
            raise RenderError(f"Expected a single-page PDF, engine produced {pages} pages")

        artifact = RenderedArtifact(content=content, page_count=pages)
        log_render_result(artifact, elapsed_time=time.time() - start_time)
        return artifact
