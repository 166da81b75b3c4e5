"""
Request Orchestrator

Validates an inbound bill record and runs it through bind -> compose -> render.
This is the failure boundary: every pipeline error is converted into a
FailureReport here, so one bad request never takes the service down.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from billpdf.contexts.binding.binder import bind, overflow_item_numbers
from billpdf.contexts.binding.schema import MAX_LINE_ITEMS
from billpdf.contexts.rendering.engine import RenderedArtifact, RenderTimeouts
from billpdf.contexts.rendering.exceptions import InvalidInput, RenderingFailure
from billpdf.contexts.service.logger import (
    _log_info,
    _log_success,
    _log_warning,
    log_request_failure,
)
from billpdf.contexts.templating.composer import compose

GENERIC_ERROR = "Failed to generate PDF"
INVALID_INPUT_ERROR = "No bill data provided"
INTERNAL_ERROR_REASON = "internal_error"

RawBody = Union[bytes, bytearray, str, Mapping[str, Any], None]


@dataclass(frozen=True)
class FailureReport:
    """
    Structured error returned in place of a PDF.

    Attributes:
        reason: Machine-readable failure code (e.g., 'load_timeout')
        message: Human-readable detail
        error: Generic summary shown to the user
    """

    reason: str
    message: str
    error: str = GENERIC_ERROR

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.error, "reason": self.reason, "message": self.message}


def parse_record(raw_body: RawBody) -> Dict[str, Any]:
    """
    Turn a raw request body into a bill record.

    Args:
        raw_body: JSON text (bytes or str) or an already-decoded mapping

    Returns:
        Bill record as a dict

    Raises:
        InvalidInput: If the body is absent, empty, not JSON, not an object, or {}
    """
    if raw_body is None:
        raise InvalidInput("Request body is empty")

    if isinstance(raw_body, (bytes, bytearray)):
        try:
            raw_body = bytes(raw_body).decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidInput("Request body is not UTF-8 text", original_error=e) from e

    if isinstance(raw_body, str):
        if not raw_body.strip():
            raise InvalidInput("Request body is empty")
        try:
            record = json.loads(raw_body)
        except json.JSONDecodeError as e:
            raise InvalidInput(f"Request body is not valid JSON: {e.msg}", original_error=e) from e
    else:
        record = raw_body

    if not isinstance(record, Mapping):
        raise InvalidInput("Bill data must be a JSON object")
    if len(record) == 0:
        raise InvalidInput(INVALID_INPUT_ERROR)

    return dict(record)


async def handle(
    raw_body: RawBody,
    engine,
    timeouts: Optional[RenderTimeouts] = None,
) -> Union[RenderedArtifact, FailureReport]:
    """
    Render one bill record to PDF.

    Args:
        raw_body: Request body (JSON text or mapping)
        engine: Object with ``async render(doc, timeouts)`` (e.g., ChromiumEngine)
        timeouts: Step bounds passed through to the engine

    Returns:
        RenderedArtifact on success, FailureReport otherwise. Nothing is raised
        except task cancellation.
    """
    _log_info("PDF generation request received")

    try:
        record = parse_record(raw_body)

        overflow = overflow_item_numbers(record)
        if overflow:
            _log_warning(
                f"Only {MAX_LINE_ITEMS} line items fit on the invoice; "
                f"ignoring items {overflow}"
            )

        bound = bind(record)
        _log_info("Generating HTML template...")
        doc = compose(bound)
        artifact = await engine.render(doc, timeouts)

    except RenderingFailure as e:
        error = INVALID_INPUT_ERROR if isinstance(e, InvalidInput) else GENERIC_ERROR
        log_request_failure(e.reason, e.message)
        return FailureReport(reason=e.reason, message=e.message, error=error)

    except Exception as e:
        message = getattr(e, "message", None) or str(e) or type(e).__name__
        log_request_failure(INTERNAL_ERROR_REASON, message, error=e)
        return FailureReport(reason=INTERNAL_ERROR_REASON, message=message)

    _log_success("PDF generated successfully!")
    return artifact
