"""
Binding Context

Responsibilities:
- Defines the fixed invoice field vocabulary
- Maps inbound bill records onto that vocabulary
- Substitutes the blank marker for missing values

Owns: Field schema, value normalization
Never: Computes totals or touches layout
"""

from billpdf.contexts.binding.binder import bind, display_value, overflow_item_numbers
from billpdf.contexts.binding.schema import (
    BLANK,
    MAX_LINE_ITEMS,
    SCHEMA_FIELDS,
    LineItem,
    line_items,
)

__all__ = [
    "bind",
    "display_value",
    "overflow_item_numbers",
    "BLANK",
    "MAX_LINE_ITEMS",
    "SCHEMA_FIELDS",
    "LineItem",
    "line_items",
]
