"""
billpdf - Tax invoice PDF rendering service

A rendering backend for a mobile billing app. Takes a flat bill record and
returns a single-page A4 tax invoice rendered by headless Chromium.

Architecture:
- Binding Context: Maps bill records onto the fixed invoice field schema
- Templating Context: Composes bound fields into the invoice HTML document
- Rendering Context: Drives the Chromium engine and owns its lifecycle
- Service Context: Request orchestration and the HTTP surface
"""

__version__ = "0.1.0"
