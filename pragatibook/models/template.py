from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

HeaderStyle = Literal["modern", "classic", "minimal"]
FontSize = Literal["small", "medium", "large"]

DEFAULT_PAYMENT_TERMS = (
    "Payment is due within 30 days of invoice date. Please include the invoice number with your payment."
)


class Template(BaseModel):
    id: int | None = None
    uuid: str = ""
    owner_id: int = 0
    name: str = "Default Template"

    company_name: str = ""
    company_subtitle: str = "Professional Services"
    company_address: str = ""
    company_phone: str = ""
    company_email: str = ""
    company_website: str = ""

    primary_color: str = "#2563EB"
    secondary_color: str = "#64748B"
    accent_color: str = "#059669"
    text_color: str = "#1F2937"
    background_color: str = "#FFFFFF"

    header_style: HeaderStyle = "modern"
    font_size: FontSize = "medium"

    show_company_address: bool = True
    show_due_date: bool = True
    show_payment_terms: bool = True
    show_footer: bool = True
    show_item_numbers: bool = True
    show_measurements: bool = True

    payment_terms: str = DEFAULT_PAYMENT_TERMS
    footer_text: str = "Thank you for your business!"
    invoice_prefix: str = "INV"
    due_days: int = 30

    is_active: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


DEFAULT_TEMPLATE = Template(
    name="Default Template",
    company_name="Your Company",
    primary_color="#1D4ED8",
)

# Fields a caller may set through create/update; everything else is managed.
EDITABLE_FIELDS = frozenset(
    name
    for name in Template.model_fields
    if name not in {"id", "uuid", "owner_id", "is_active", "created_at", "updated_at"}
)
