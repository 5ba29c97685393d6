"""Parsing helpers for JSON request bodies.

Bodies use the camelCase wire names the browser client sends. Item rows use
``text``/``defaultValue``/``calculatedValue`` for description, rate and amount.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import date

from fastapi import Request
from pydantic.alias_generators import to_camel, to_snake

from pragatibook.models.bill import LineItem

logger = logging.getLogger(__name__)


async def read_json(request: Request) -> dict:
    """Return the JSON object body, or {} when it is missing or malformed."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.info("Malformed JSON body on %s %s", request.method, request.url.path)
        return {}
    return body if isinstance(body, dict) else {}


def text_field(body: dict, key: str) -> str:
    value = body.get(key)
    return value.strip() if isinstance(value, str) else ""


def parse_number(value) -> float | None:
    """Parse a numeric field. Returns None for blanks, junk, NaN and infinities."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    elif not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def parse_date(value) -> date | None:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        # Accept full ISO timestamps from clients that send Date.toISOString().
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def parse_items(raw) -> list[LineItem]:
    """Build LineItems from wire rows. Client-supplied amounts are discarded."""
    if not isinstance(raw, list):
        return []
    items: list[LineItem] = []
    for row in raw:
        if not isinstance(row, dict):
            continue
        fields = {
            "description": text_field(row, "text"),
            "feet": parse_number(row.get("feet")) or 0,
            "inches": parse_number(row.get("inches")) or 0,
            "quantity": parse_number(row.get("quantity")),
            "rate": parse_number(row.get("defaultValue")) or 0,
        }
        item_id = row.get("id")
        if isinstance(item_id, str) and item_id:
            fields["id"] = item_id
        items.append(LineItem(**fields))
    return items


def item_to_wire(item: LineItem) -> dict:
    return {
        "id": item.id,
        "text": item.description,
        "feet": item.feet,
        "inches": item.inches,
        "quantity": item.quantity,
        "defaultValue": item.rate,
        "calculatedValue": item.amount,
    }


def snake_keys(body: dict) -> dict:
    return {to_snake(key): value for key, value in body.items()}


def camel_keys(data: dict) -> dict:
    return {to_camel(key): value for key, value in data.items()}
