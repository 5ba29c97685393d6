from __future__ import annotations

import logging
from datetime import timedelta

from fpdf import FPDF

from pragatibook.constants import PDF_CURRENCY_SYMBOL
from pragatibook.models import format_amount
from pragatibook.models.bill import Bill
from pragatibook.models.template import DEFAULT_TEMPLATE, Template

logger = logging.getLogger(__name__)

FONT = "Helvetica"
FONT_SIZES = {"small": 8, "medium": 10, "large": 11}


def _hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    h = hex_color.lstrip("#")
    return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))


def _derive_colors(template: Template) -> dict[str, tuple[int, int, int]]:
    primary = _hex_to_rgb(template.primary_color)
    background = _hex_to_rgb(template.background_color)
    text_color = _hex_to_rgb(template.text_color)

    row_alt = tuple(max(0, c - 8) for c in background)
    border_color = tuple(max(0, c - 40) for c in background)
    muted_text = tuple(min(255, c + 68) for c in text_color)

    return {
        "primary": primary,
        "secondary": _hex_to_rgb(template.secondary_color),
        "accent": _hex_to_rgb(template.accent_color),
        "text_color": text_color,
        "background": background,
        "contrast": (255, 255, 255),
        "muted_text": muted_text,  # type: ignore[dict-item]
        "row_alt": row_alt,  # type: ignore[dict-item]
        "border_color": border_color,  # type: ignore[dict-item]
    }


def _latin1(value: str) -> str:
    # Core fonts only cover Latin-1; anything else becomes "?".
    return value.encode("latin-1", "replace").decode("latin-1")


def _money(value: float) -> str:
    return format_amount(value, symbol=f"{PDF_CURRENCY_SYMBOL} ")


def _number(value: float | None) -> str:
    if not value:
        return "-"
    return f"{value:g}"


class InvoicePDF:
    def generate(
        self,
        bill: Bill,
        template: Template | None = None,
        invoice_number: str = "",
        tax_percent: float = 0,
    ) -> bytes:
        template = template or DEFAULT_TEMPLATE
        self._t = template
        self._colors = _derive_colors(template)
        self._size = FONT_SIZES.get(template.font_size, 10)

        pdf = FPDF()
        pdf.add_page()
        pdf.set_auto_page_break(auto=True, margin=25)

        page_w = pdf.w - pdf.l_margin - pdf.r_margin

        self._draw_header(pdf, page_w)
        self._draw_details(pdf, page_w, bill, invoice_number)
        self._draw_table(pdf, page_w, bill)
        self._draw_summary(pdf, page_w, bill.total, tax_percent)

        if template.show_payment_terms and template.payment_terms:
            self._draw_payment_terms(pdf, page_w, template.payment_terms)

        if template.show_footer and template.footer_text:
            self._draw_footer(pdf, page_w, template.footer_text)

        output = pdf.output()
        logger.debug(
            "PDF generated: bill=%s items=%d style=%s size=%d bytes",
            bill.uuid,
            len(bill.items),
            template.header_style,
            len(output),
        )
        return output

    def _draw_header(self, pdf: FPDF, page_w: float) -> None:
        t = self._t
        c = self._colors
        x = pdf.l_margin
        y = pdf.get_y()

        if t.header_style == "modern":
            pdf.set_fill_color(*c["primary"])
            pdf.rect(x, y, page_w, 34, "F")
            title_color = c["contrast"]
            sub_color = c["contrast"]
        else:
            title_color = c["primary"]
            sub_color = c["muted_text"]

        pdf.set_xy(x + 6, y + 6)
        pdf.set_text_color(*title_color)
        pdf.set_font(FONT, "B", self._size + 12)
        pdf.cell(page_w / 2, 12, _latin1(t.company_name or "Your Company"))
        pdf.set_font(FONT, "B", self._size + 10)
        pdf.cell(page_w / 2 - 12, 12, "INVOICE", align="R", new_x="LMARGIN", new_y="NEXT")

        if t.company_subtitle:
            pdf.set_x(x + 6)
            pdf.set_font(FONT, "", self._size)
            pdf.set_text_color(*sub_color)
            pdf.cell(0, 6, _latin1(t.company_subtitle), new_x="LMARGIN", new_y="NEXT")

        pdf.set_y(y + 34 if t.header_style == "modern" else pdf.get_y() + 2)
        if t.header_style == "classic":
            pdf.set_draw_color(*c["primary"])
            pdf.set_line_width(0.8)
            pdf.line(x, pdf.get_y(), x + page_w, pdf.get_y())
        pdf.ln(6)

    def _draw_details(self, pdf: FPDF, page_w: float, bill: Bill, invoice_number: str) -> None:
        t = self._t
        c = self._colors
        col_w = page_w / 2 - 3
        x = pdf.l_margin
        y = pdf.get_y()

        # From
        pdf.set_font(FONT, "B", self._size - 1)
        pdf.set_text_color(*c["primary"])
        pdf.cell(col_w, 6, "FROM", new_x="LMARGIN", new_y="NEXT")
        pdf.set_font(FONT, "", self._size)
        pdf.set_text_color(*c["text_color"])
        lines = [t.company_name or "Your Company"]
        if t.show_company_address and t.company_address:
            lines.append(t.company_address)
        lines.extend(v for v in (t.company_phone, t.company_email, t.company_website) if v)
        for line in lines:
            pdf.multi_cell(col_w, 5, _latin1(line), new_x="LMARGIN", new_y="NEXT")
        from_bottom = pdf.get_y()

        # Bill to + invoice info
        right_x = x + col_w + 6
        pdf.set_xy(right_x, y)
        pdf.set_font(FONT, "B", self._size - 1)
        pdf.set_text_color(*c["primary"])
        pdf.cell(col_w, 6, "BILL TO", new_x="LEFT", new_y="NEXT")
        pdf.set_font(FONT, "B", self._size + 1)
        pdf.set_text_color(*c["text_color"])
        pdf.multi_cell(col_w, 6, _latin1(bill.customer_name), new_x="LEFT", new_y="NEXT")
        pdf.set_font(FONT, "", self._size)
        if bill.description:
            pdf.multi_cell(col_w, 5, _latin1(bill.description), new_x="LEFT", new_y="NEXT")
        if invoice_number:
            pdf.cell(col_w, 5, f"Invoice No: {_latin1(invoice_number)}", new_x="LEFT", new_y="NEXT")
        pdf.cell(col_w, 5, f"Date: {bill.date.strftime('%d %b %Y')}", new_x="LEFT", new_y="NEXT")
        if t.show_due_date:
            due = bill.date + timedelta(days=t.due_days)
            pdf.cell(col_w, 5, f"Due: {due.strftime('%d %b %Y')}", new_x="LEFT", new_y="NEXT")

        pdf.set_y(max(from_bottom, pdf.get_y()) + 8)

    def _columns(self, page_w: float) -> list[tuple[str, float, str]]:
        t = self._t
        cols: list[tuple[str, float]] = []
        if t.show_item_numbers:
            cols.append(("#", 8))
        cols.append(("Description", 0))
        if t.show_measurements:
            cols.extend([("Feet", 16), ("Inches", 16)])
        cols.extend([("Qty", 16), ("Rate", 28), ("Amount", 32)])
        fixed = sum(w for _, w in cols)
        return [(label, w or page_w - fixed, "L" if label in {"#", "Description"} else "R") for label, w in cols]

    def _draw_table(self, pdf: FPDF, page_w: float, bill: Bill) -> None:
        t = self._t
        c = self._colors
        line_h = 9
        columns = self._columns(page_w)

        pdf.set_fill_color(*c["primary"])
        pdf.set_text_color(*c["contrast"])
        pdf.set_font(FONT, "B", self._size - 1)
        for label, width, align in columns:
            pdf.cell(width, line_h, f" {label} ", fill=True, align=align)
        pdf.ln(line_h)

        pdf.set_text_color(*c["text_color"])
        pdf.set_font(FONT, "", self._size)
        for i, item in enumerate(bill.items):
            pdf.set_fill_color(*(c["row_alt"] if i % 2 == 0 else c["background"]))
            values = []
            if t.show_item_numbers:
                values.append(str(i + 1))
            values.append(_latin1(item.description or "Item"))
            if t.show_measurements:
                values.extend([_number(item.feet), _number(item.inches)])
            values.extend([_number(item.quantity), _money(item.rate), _money(item.amount)])
            for (_, width, align), value in zip(columns, values):
                pdf.cell(width, line_h, f" {value} ", fill=True, align=align)
            pdf.ln(line_h)

        pdf.set_draw_color(*c["border_color"])
        pdf.set_line_width(0.3)
        y = pdf.get_y()
        pdf.line(pdf.l_margin, y, pdf.l_margin + page_w, y)

    def _draw_summary(self, pdf: FPDF, page_w: float, subtotal: float, tax_percent: float) -> None:
        c = self._colors
        pdf.ln(4)
        label_w = page_w * 0.72
        amount_w = page_w * 0.28

        pdf.set_text_color(*c["text_color"])
        pdf.set_font(FONT, "", self._size)
        pdf.cell(label_w, 8, "Subtotal  ", align="R")
        pdf.cell(amount_w, 8, f"{_money(subtotal)} ", align="R", new_x="LMARGIN", new_y="NEXT")

        tax = subtotal * tax_percent / 100 if tax_percent > 0 else 0
        if tax_percent > 0:
            pdf.cell(label_w, 8, f"Tax ({tax_percent:g}%)  ", align="R")
            pdf.cell(amount_w, 8, f"{_money(tax)} ", align="R", new_x="LMARGIN", new_y="NEXT")

        pdf.set_fill_color(*c["accent"])
        pdf.set_text_color(*c["contrast"])
        pdf.set_font(FONT, "B", self._size + 2)
        pdf.cell(label_w, 12, "TOTAL  ", fill=True, align="R")
        pdf.cell(amount_w, 12, f"{_money(subtotal + tax)} ", fill=True, align="R", new_x="LMARGIN", new_y="NEXT")

    def _draw_payment_terms(self, pdf: FPDF, page_w: float, terms: str) -> None:
        c = self._colors
        pdf.ln(10)
        pdf.set_font(FONT, "B", self._size - 1)
        pdf.set_text_color(*c["muted_text"])
        pdf.cell(0, 6, "PAYMENT TERMS", new_x="LMARGIN", new_y="NEXT")
        pdf.set_font(FONT, "", self._size - 1)
        pdf.set_text_color(*c["text_color"])
        pdf.multi_cell(page_w, 5, _latin1(terms), new_x="LMARGIN", new_y="NEXT")

    def _draw_footer(self, pdf: FPDF, page_w: float, footer_text: str) -> None:
        c = self._colors
        # The footer sits inside the bottom margin; keep it on the current page.
        pdf.set_auto_page_break(auto=False)
        pdf.set_y(-30)
        pdf.set_draw_color(*c["border_color"])
        pdf.set_line_width(0.3)
        y = pdf.get_y()
        pdf.line(pdf.l_margin, y, pdf.l_margin + page_w, y)
        pdf.ln(5)
        pdf.set_font(FONT, "B", self._size)
        pdf.set_text_color(*c["primary"])
        pdf.cell(0, 6, _latin1(footer_text), align="C")
