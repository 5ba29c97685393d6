from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from starlette.responses import Response

from pragatibook.errors import ValidationError
from pragatibook.models.bill import Bill
from web.deps import current_user_id, get_bill_service, get_template_service
from web.forms import item_to_wire, parse_date, parse_items, parse_number, read_json, text_field

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bills")


def _serialize_bill(bill: Bill) -> dict:
    return {
        "id": bill.uuid,
        "userId": str(bill.owner_id),
        "customerName": bill.customer_name,
        "description": bill.description,
        "date": bill.date.isoformat(),
        "items": [item_to_wire(item) for item in bill.items],
        "total": bill.total,
        "createdAt": bill.created_at.isoformat() if bill.created_at else None,
        "updatedAt": bill.updated_at.isoformat() if bill.updated_at else None,
    }


async def _parse_bill_body(request: Request) -> dict:
    body = await read_json(request)
    customer_name = text_field(body, "customerName")
    items = parse_items(body.get("items"))
    if not customer_name or not body.get("date") or not items:
        raise ValidationError("Customer name, date, and items are required")
    bill_date = parse_date(body.get("date"))
    if bill_date is None:
        raise ValidationError("Date must be in YYYY-MM-DD format")
    description = body.get("description")
    return {
        "customer_name": customer_name,
        "bill_date": bill_date,
        "items": items,
        "description": description.strip() if isinstance(description, str) else "",
    }


@router.get("")
async def bill_list(request: Request, q: str = "", customer: str = ""):
    bills = get_bill_service(request).list_bills(current_user_id(request), query=q, customer=customer)
    return [_serialize_bill(bill) for bill in bills]


@router.post("", status_code=201)
async def bill_create(request: Request):
    fields = await _parse_bill_body(request)
    owner_id = current_user_id(request)
    bill = get_bill_service(request).create_bill(owner_id, **fields)
    logger.info("POST /api/bills: created %s for user=%s", bill.uuid, owner_id)
    return _serialize_bill(bill)


@router.get("/customers")
async def bill_customers(request: Request):
    return {"customers": get_bill_service(request).list_customers(current_user_id(request))}


@router.post("/preview")
async def bill_preview(request: Request):
    body = await read_json(request)
    items, total = get_bill_service(request).preview(parse_items(body.get("items")))
    return {"items": [item_to_wire(item) for item in items], "total": total}


@router.get("/{bill_id}")
async def bill_detail(request: Request, bill_id: str):
    bill = get_bill_service(request).get_bill(bill_id, current_user_id(request))
    return _serialize_bill(bill)


@router.put("/{bill_id}")
async def bill_update(request: Request, bill_id: str):
    fields = await _parse_bill_body(request)
    bill = get_bill_service(request).update_bill(bill_id, current_user_id(request), **fields)
    logger.info("PUT /api/bills/%s: updated", bill_id)
    return _serialize_bill(bill)


@router.delete("/{bill_id}")
async def bill_delete(request: Request, bill_id: str):
    get_bill_service(request).delete_bill(bill_id, current_user_id(request))
    logger.info("DELETE /api/bills/%s", bill_id)
    return {"message": "Bill deleted successfully"}


@router.get("/{bill_id}/pdf")
async def bill_pdf(request: Request, bill_id: str, tax_percent: str = ""):
    owner_id = current_user_id(request)
    tax = parse_number(tax_percent) or 0
    if tax < 0:
        raise ValidationError("Tax percent cannot be negative")
    template = get_template_service(request).resolve_template(owner_id)
    pdf_bytes, filename = get_bill_service(request).render_pdf(bill_id, owner_id, template, tax_percent=tax)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{bill_id}/share")
async def bill_share(request: Request, bill_id: str):
    owner_id = current_user_id(request)
    template = get_template_service(request).resolve_template(owner_id)
    share = get_bill_service(request).share_bill(bill_id, owner_id, template)
    return {
        "text": share["text"],
        "whatsappUrl": share["whatsapp_url"],
        "pdfUrl": f"/api/bills/{bill_id}/pdf",
        "filename": share["filename"],
    }
