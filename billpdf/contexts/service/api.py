"""
HTTP surface for the invoice renderer.

Endpoints:
    GET  /              Liveness probe with service identity and timestamp
    POST /generate-pdf  Bill record (JSON object) in, application/pdf out
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from billpdf import __version__
from billpdf.contexts.rendering.engine import ChromiumEngine, RenderedArtifact, RenderTimeouts
from billpdf.contexts.service.logger import _log_warning
from billpdf.contexts.service.orchestrator import FailureReport, handle
from billpdf.utils.settings import Settings, load_settings
from billpdf.utils.timestamp import now_iso

SERVICE_NAME = "billpdf"
SERVICE_MESSAGE = "PDF Generation Server for Flutter Billing App"

STATUS_BY_REASON = {
    "invalid_input": 400,
    "payload_too_large": 413,
    "engine_unavailable": 503,
    "load_timeout": 504,
    "render_error": 500,
    "internal_error": 500,
}


def _failure_response(failure: FailureReport) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_BY_REASON.get(failure.reason, 500),
        content=failure.to_dict(),
    )


def _too_large(limit: int) -> JSONResponse:
    _log_warning(f"Rejected request body larger than {limit} bytes")
    return _failure_response(
        FailureReport(
            reason="payload_too_large",
            message=f"Request body exceeds {limit} bytes",
            error="Payload too large",
        )
    )


def create_app(settings: Optional[Settings] = None, engine=None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Service settings (default: load_settings())
        engine: Rendering engine (default: ChromiumEngine(settings))

    Returns:
        Configured FastAPI app
    """
    settings = settings or load_settings()
    engine = engine or ChromiumEngine(settings)
    timeouts = RenderTimeouts.from_settings(settings)

    app = FastAPI(title=SERVICE_NAME, version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.engine = engine

    @app.get("/")
    async def health():
        return {
            "status": "Server is running!",
            "service": SERVICE_NAME,
            "version": __version__,
            "message": SERVICE_MESSAGE,
            "timestamp": now_iso(),
        }

    @app.post("/generate-pdf")
    async def generate_pdf(request: Request):
        limit = settings.max_body_bytes

        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > limit:
            return _too_large(limit)

        chunks = []
        size = 0
        async for chunk in request.stream():
            size += len(chunk)
            if size > limit:
                return _too_large(limit)
            chunks.append(chunk)

        result = await handle(b"".join(chunks), engine, timeouts)

        if isinstance(result, RenderedArtifact):
            return Response(
                content=result.content,
                media_type=result.content_type,
                headers={"Content-Disposition": 'inline; filename="invoice.pdf"'},
            )
        return _failure_response(result)

    return app
