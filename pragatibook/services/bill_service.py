from __future__ import annotations

import logging
import math
from datetime import date
from urllib.parse import quote

from pragatibook.errors import NotFoundError, ValidationError
from pragatibook.models import format_amount
from pragatibook.models.bill import Bill, LineItem
from pragatibook.models.template import DEFAULT_TEMPLATE, Template
from pragatibook.pdf.invoice import InvoicePDF
from pragatibook.pricing import compute_bill_total, item_is_billable, price_items
from pragatibook.repositories.base import BillRepository

logger = logging.getLogger(__name__)


def invoice_number(template: Template, bill: Bill) -> str:
    return f"{template.invoice_prefix}-{bill.uuid.upper()}"


def pdf_filename(template: Template, bill: Bill) -> str:
    customer = "".join(ch if ch.isascii() and ch.isalnum() else "-" for ch in bill.customer_name)
    return f"{template.invoice_prefix}-{customer}-{bill.uuid}.pdf"


def share_text(template: Template, bill: Bill) -> str:
    """Plain-text invoice summary for chat apps."""
    company = template.company_name or DEFAULT_TEMPLATE.company_name
    lines = [
        f"Invoice {invoice_number(template, bill)} from {company}",
        f"Customer: {bill.customer_name}",
        f"Date: {bill.date.strftime('%d %b %Y')}",
    ]
    if bill.description:
        lines.append(bill.description)
    lines.append("")
    for item in bill.items:
        lines.append(f"- {item.description or 'Item'}: {format_amount(item.amount)}")
    lines.append("")
    lines.append(f"Total: {format_amount(bill.total)}")
    return "\n".join(lines)


def whatsapp_url(text: str) -> str:
    return f"https://wa.me/?text={quote(text, safe='')}"


class BillService:
    def __init__(self, bill_repo: BillRepository) -> None:
        self.bill_repo = bill_repo
        self.pdf_generator = InvoicePDF()

    @staticmethod
    def preview(items: list[LineItem]) -> tuple[list[LineItem], float]:
        """Price items for display. Half-filled rows are fine here; only overflowing values are rejected."""
        priced = price_items(items)
        total = compute_bill_total(priced)
        if not math.isfinite(total):
            raise ValidationError("Item values are too large")
        return priced, total

    @staticmethod
    def validate(customer_name: str, items: list[LineItem]) -> None:
        if not customer_name.strip():
            raise ValidationError("Please enter a customer name")
        if not items:
            raise ValidationError("Add at least one item")
        if not all(item_is_billable(item) for item in items):
            raise ValidationError("Each item must have a rate and either measurements (feet/inches) or quantity")

    def create_bill(
        self,
        owner_id: int,
        customer_name: str,
        bill_date: date,
        items: list[LineItem],
        description: str = "",
    ) -> Bill:
        self.validate(customer_name, items)
        priced, total = self.preview(items)
        bill = Bill(
            owner_id=owner_id,
            customer_name=customer_name.strip(),
            description=description,
            date=bill_date,
            items=priced,
            total=total,
        )
        bill = self.bill_repo.create(bill)
        logger.info("Bill created: uuid=%s owner=%s items=%d total=%.2f", bill.uuid, owner_id, len(priced), total)
        return bill

    def update_bill(
        self,
        uuid: str,
        owner_id: int,
        customer_name: str,
        bill_date: date,
        items: list[LineItem],
        description: str = "",
    ) -> Bill:
        self.validate(customer_name, items)
        priced, total = self.preview(items)
        bill = Bill(
            uuid=uuid,
            owner_id=owner_id,
            customer_name=customer_name.strip(),
            description=description,
            date=bill_date,
            items=priced,
            total=total,
        )
        updated = self.bill_repo.update(bill)
        if updated is None:
            logger.warning("Bill update rejected: uuid=%s not found for owner=%s", uuid, owner_id)
            raise NotFoundError("Bill not found")
        logger.info("Bill updated: uuid=%s total=%.2f", uuid, total)
        return updated

    def get_bill(self, uuid: str, owner_id: int) -> Bill:
        bill = self.bill_repo.get_for_owner(uuid, owner_id)
        logger.debug("get_bill uuid=%s owner=%s found=%s", uuid, owner_id, bill is not None)
        if bill is None:
            raise NotFoundError("Bill not found")
        return bill

    def list_bills(self, owner_id: int, query: str = "", customer: str = "") -> list[Bill]:
        """List the owner's bills, newest first.

        ``query`` matches customer name or description case-insensitively;
        ``customer`` keeps only bills for that exact customer name.
        """
        result = self.bill_repo.list_for_owner(owner_id)
        needle = query.strip().lower()
        if needle:
            result = [
                b for b in result if needle in b.customer_name.lower() or needle in (b.description or "").lower()
            ]
        if customer:
            result = [b for b in result if b.customer_name == customer]
        logger.debug("Listed %d bills for owner=%s", len(result), owner_id)
        return result

    def list_customers(self, owner_id: int) -> list[str]:
        return sorted({b.customer_name for b in self.bill_repo.list_for_owner(owner_id)}, key=str.lower)

    def delete_bill(self, uuid: str, owner_id: int) -> None:
        if not self.bill_repo.delete_for_owner(uuid, owner_id):
            raise NotFoundError("Bill not found")
        logger.info("Bill %s deleted", uuid)

    def render_pdf(self, uuid: str, owner_id: int, template: Template, tax_percent: float = 0) -> tuple[bytes, str]:
        """Render a bill with ``template``. Returns (pdf_bytes, filename)."""
        bill = self.get_bill(uuid, owner_id)
        pdf_bytes = self.pdf_generator.generate(
            bill,
            template=template,
            invoice_number=invoice_number(template, bill),
            tax_percent=tax_percent,
        )
        logger.info("PDF rendered for bill %s (%d bytes)", uuid, len(pdf_bytes))
        return bytes(pdf_bytes), pdf_filename(template, bill)

    def share_bill(self, uuid: str, owner_id: int, template: Template) -> dict[str, str]:
        bill = self.get_bill(uuid, owner_id)
        text = share_text(template, bill)
        logger.info("Share text built for bill %s", uuid)
        return {"text": text, "whatsapp_url": whatsapp_url(text), "filename": pdf_filename(template, bill)}
