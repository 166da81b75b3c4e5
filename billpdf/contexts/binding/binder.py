"""
Record Binder

Maps a bill record onto every slot of the invoice schema. Binding is total:
any missing, null, empty or unrepresentable value becomes the blank marker,
and keys outside the schema are dropped.
"""

import math
import re
from numbers import Number
from typing import Any, Dict, List, Mapping

from billpdf.contexts.binding.schema import (
    BLANK,
    LINE_ITEM_STEMS,
    MAX_LINE_ITEMS,
    SCHEMA_FIELDS,
)

# Matches positional line item keys such as b_item_amount_7
_ITEM_KEY_PATTERN = re.compile(
    r"^(?:" + "|".join(sorted(LINE_ITEM_STEMS.values(), key=len, reverse=True)) + r")_(\d+)$"
)


def display_value(value: Any) -> str:
    """
    Normalize a record value to display-safe text.

    Examples:
        display_value(None)    # BLANK
        display_value("  ")    # BLANK
        display_value(100.0)   # "100"
        display_value(12.5)    # "12.5"
        display_value(True)    # "true"
    """
    if value is None:
        return BLANK
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value if value.strip() else BLANK
    if isinstance(value, float):
        if not math.isfinite(value):
            return BLANK
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, Number):
        return str(value)
    # Nested structures have no place in a flat record
    return BLANK


def bind(record: Mapping[str, Any]) -> Dict[str, str]:
    """
    Bind a bill record to the invoice schema.

    Args:
        record: Flat mapping of field name to string or numeric value

    Returns:
        Ordered dict covering every schema key, in schema order
    """
    return {key: display_value(record.get(key)) for key in SCHEMA_FIELDS}


def overflow_item_numbers(record: Mapping[str, Any]) -> List[int]:
    """
    Line item positions beyond MAX_LINE_ITEMS that the record tries to fill.

    These rows have no slot on the fixed-layout page and are never rendered.

    Returns:
        Sorted list of distinct overflowing positions (empty if none)
    """
    numbers = set()
    for key, value in record.items():
        match = _ITEM_KEY_PATTERN.match(str(key))
        if match and display_value(value) != BLANK:
            number = int(match.group(1))
            if number > MAX_LINE_ITEMS:
                numbers.add(number)
    return sorted(numbers)
