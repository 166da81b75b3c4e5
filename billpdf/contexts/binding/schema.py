"""
Invoice field schema.

The fixed vocabulary of bill record keys understood by the invoice template,
in display order. Merchant fields carry an ``m_`` prefix and per-bill fields
a ``b_`` prefix. Line items are positional: ``b_item_name_1`` through
``b_item_name_6`` and so on.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

# Rendered in place of any missing value so every cell keeps its row height
BLANK = "\u00a0"

MAX_LINE_ITEMS = 6

MERCHANT_FIELDS: Tuple[str, ...] = (
    "m_company_name",
    "m_company_address1",
    "m_company_address2",
    "m_company_gstin",
    "m_company_state",
    "m_company_contact",
    "m_company_email",
    "m_pan_no",
    "m_ac_name",
    "m_bank_name",
    "m_ac_no",
    "m_branch_name",
    "m_udyam_no",
    "m_declaration_1",
    "m_declaration_2",
    "m_declaration_3",
    "m_for_name",
    "m_terms_1",
    "m_terms_2",
    "m_terms_3",
    "m_terms_4",
    "m_terms_5",
)

BILL_FIELDS: Tuple[str, ...] = (
    "b_invoice_no",
    "b_invoice_date",
    "b_challan_no",
    "b_challan_date",
    "b_po_no",
    "b_po_date",
    "b_vehicle_no",
    "b_eway_no",
    "b_company_name",
    "b_company_address1",
    "b_company_address2",
    "b_company_gstin",
    "b_company_state",
    "b_company_contact",
    "b_company_email",
    "b_dispatched_through",
    "b_destination",
    "b_lr_no",
    "b_mode",
    "b_terms",
)

# Attribute name on LineItem -> key stem in the bill record
LINE_ITEM_STEMS: Dict[str, str] = {
    "number": "b_item",
    "description": "b_item_name",
    "hsn": "b_item_hsn",
    "quantity": "b_item_quantity",
    "rate": "b_item_rate",
    "per": "b_item_per",
    "amount": "b_item_amount",
    "detail": "b_item_dis",
}

SUMMARY_FIELDS: Tuple[str, ...] = (
    "b_qty_total",
    "b_subtotal",
    "b_freight",
    "b_taxable_amount",
    "b_cgst_perce",
    "b_cgst_rate",
    "b_sgst_percen",
    "b_sgst_rate",
    "b_igst_percen",
    "b_igst_rate",
    "b_roundoff",
    "b_amount_word",
    "b_grand_total",
    "b_previous_balance",
    "b_current_balance",
    "b_total_balance",
)

# Inline image data (data: URIs) for the positioned overlays
ASSET_FIELDS: Tuple[str, ...] = (
    "b_upi_qr",
    "m_signature_image",
)


def line_item_key(stem: str, number: int) -> str:
    """Record key for one attribute of the line item at 1-based position number."""
    return f"{stem}_{number}"


def _line_item_fields() -> Tuple[str, ...]:
    keys = []
    for number in range(1, MAX_LINE_ITEMS + 1):
        for stem in LINE_ITEM_STEMS.values():
            keys.append(line_item_key(stem, number))
    return tuple(keys)


LINE_ITEM_FIELDS = _line_item_fields()

SCHEMA_FIELDS: Tuple[str, ...] = (
    MERCHANT_FIELDS + BILL_FIELDS + LINE_ITEM_FIELDS + SUMMARY_FIELDS + ASSET_FIELDS
)


@dataclass(frozen=True)
class LineItem:
    """
    One positional row of the item table.

    Attributes:
        position: 1-based slot index in the table
        number: Serial number shown in the "No." column
        description: Description of goods
        hsn: HSN/SAC classification code
        quantity: Quantity
        rate: Unit rate
        per: Unit of measure
        amount: Line amount
        detail: Secondary description line rendered under the item
    """

    position: int
    number: str = BLANK
    description: str = BLANK
    hsn: str = BLANK
    quantity: str = BLANK
    rate: str = BLANK
    per: str = BLANK
    amount: str = BLANK
    detail: str = BLANK

    @property
    def is_blank(self) -> bool:
        """True when every cell of the row shows the blank marker."""
        return all(getattr(self, attr) == BLANK for attr in LINE_ITEM_STEMS)


def line_items(bound: Dict[str, str]) -> List[LineItem]:
    """
    Gather bound slots into the fixed sequence of MAX_LINE_ITEMS rows.

    Args:
        bound: Mapping produced by bind()

    Returns:
        Exactly MAX_LINE_ITEMS LineItems, unfilled positions all blank
    """
    items = []
    for position in range(1, MAX_LINE_ITEMS + 1):
        values = {
            attr: bound.get(line_item_key(stem, position), BLANK)
            for attr, stem in LINE_ITEM_STEMS.items()
        }
        items.append(LineItem(position=position, **values))
    return items
