from __future__ import annotations

import logging
import re

from fastapi import APIRouter, Request

from pragatibook.models.template import DEFAULT_TEMPLATE, EDITABLE_FIELDS, Template
from web.deps import current_user_id, get_template_service
from web.forms import camel_keys, read_json, snake_keys

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/templates")

_HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")

COLOR_FIELDS = (
    "primary_color",
    "secondary_color",
    "accent_color",
    "text_color",
    "background_color",
)


def _parse_template_fields(body: dict) -> dict:
    """Keep known editable fields; invalid colours fall back to the default palette."""
    fields: dict = {}
    for key, value in snake_keys(body).items():
        if key not in EDITABLE_FIELDS:
            continue
        if key in COLOR_FIELDS:
            value = str(value).strip()
            if not _HEX_COLOR_RE.match(value):
                value = getattr(DEFAULT_TEMPLATE, key)
        elif isinstance(value, str):
            value = value.strip()
        fields[key] = value
    return fields


def _serialize_template(template: Template) -> dict:
    data = camel_keys(template.model_dump(exclude={"id", "uuid", "owner_id", "created_at", "updated_at"}))
    data.update(
        {
            "id": template.uuid,
            "userId": str(template.owner_id),
            "createdAt": template.created_at.isoformat() if template.created_at else None,
            "updatedAt": template.updated_at.isoformat() if template.updated_at else None,
        }
    )
    return data


@router.get("")
async def template_list(request: Request):
    templates = get_template_service(request).list_templates(current_user_id(request))
    return [_serialize_template(t) for t in templates]


@router.post("", status_code=201)
async def template_create(request: Request):
    fields = _parse_template_fields(await read_json(request))
    template = get_template_service(request).create_template(current_user_id(request), **fields)
    return _serialize_template(template)


@router.get("/active")
async def template_active(request: Request):
    return _serialize_template(get_template_service(request).resolve_template(current_user_id(request)))


@router.get("/{template_id}")
async def template_detail(request: Request, template_id: str):
    template = get_template_service(request).get_template(template_id, current_user_id(request))
    return _serialize_template(template)


@router.put("/{template_id}")
async def template_update(request: Request, template_id: str):
    fields = _parse_template_fields(await read_json(request))
    template = get_template_service(request).update_template(template_id, current_user_id(request), **fields)
    return _serialize_template(template)


@router.delete("/{template_id}")
async def template_delete(request: Request, template_id: str):
    get_template_service(request).delete_template(template_id, current_user_id(request))
    return {"message": "Template deleted successfully"}


@router.post("/{template_id}/duplicate", status_code=201)
async def template_duplicate(request: Request, template_id: str):
    template = get_template_service(request).duplicate_template(template_id, current_user_id(request))
    return _serialize_template(template)


@router.post("/{template_id}/activate")
async def template_activate(request: Request, template_id: str):
    template = get_template_service(request).activate_template(template_id, current_user_id(request))
    logger.info("Template %s activated", template_id)
    return _serialize_template(template)
