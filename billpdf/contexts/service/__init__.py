"""
Service Context

Responsibilities:
- Validates inbound bill records
- Runs bind -> compose -> render for each request
- Converts every pipeline failure into a structured error
- Exposes the HTTP endpoints (health probe, PDF generation)

Owns: Request boundary, failure containment
Never: Keeps state between requests
"""

from billpdf.contexts.service.api import create_app
from billpdf.contexts.service.orchestrator import FailureReport, handle, parse_record

__all__ = ["create_app", "handle", "parse_record", "FailureReport"]
