from __future__ import annotations

import secrets
from datetime import date, datetime

from pydantic import BaseModel, Field


def new_item_id() -> str:
    return secrets.token_hex(6)


class LineItem(BaseModel):
    id: str = Field(default_factory=new_item_id)
    description: str = ""
    feet: float = 0
    inches: float = 0
    quantity: float | None = None
    rate: float = 0
    amount: float = 0  # derived; see pragatibook.pricing

    @property
    def has_measurement(self) -> bool:
        return self.feet > 0 or self.inches > 0

    @property
    def has_quantity(self) -> bool:
        return self.quantity is not None and self.quantity > 0


class Bill(BaseModel):
    id: int | None = None
    uuid: str = ""
    owner_id: int
    customer_name: str
    description: str = ""
    date: date
    items: list[LineItem] = []
    total: float = 0  # derived; sum of item amounts
    created_at: datetime | None = None
    updated_at: datetime | None = None
