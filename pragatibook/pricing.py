"""Line-item pricing.

An item's amount is a pure function of its feet, inches, quantity and rate.
Rules are evaluated in order:

* quantity > 0 with a measurement and a rate: ``total_inches * rate * quantity``
* quantity > 0 with a rate only: ``rate * quantity``
* quantity > 0 otherwise: ``0``
* no quantity, with a measurement and a rate: ``total_inches * rate``
* no quantity otherwise: ``0``

A rate-only item without a quantity prices at 0 rather than ``rate``. Existing
bills were priced this way, so the rule stays.

Nothing here raises on odd numbers; negative or zero inputs just fall through
to one of the branches above. Whether an item may be saved is a separate
question answered by :func:`item_is_billable`.
"""

from __future__ import annotations

from collections.abc import Iterable

from pragatibook.constants import INCHES_PER_FOOT
from pragatibook.models.bill import LineItem


def compute_item_amount(feet: float, inches: float, quantity: float | None, rate: float) -> float:
    has_measurement = feet > 0 or inches > 0

    if quantity is not None and quantity > 0:
        if has_measurement and rate > 0:
            total_inches = feet * INCHES_PER_FOOT + inches
            return total_inches * rate * quantity
        if rate > 0:
            return rate * quantity
        return 0

    if has_measurement and rate > 0:
        total_inches = feet * INCHES_PER_FOOT + inches
        return total_inches * rate * 1
    return 0


def compute_bill_total(items: Iterable[LineItem]) -> float:
    # No rounding here; two-decimal display is the renderer's job.
    return sum((item.amount for item in items), 0)


def price_item(item: LineItem) -> LineItem:
    """Return a copy of ``item`` with ``amount`` recomputed from its inputs."""
    amount = compute_item_amount(item.feet, item.inches, item.quantity, item.rate)
    return item.model_copy(update={"amount": amount})


def price_items(items: Iterable[LineItem]) -> list[LineItem]:
    return [price_item(item) for item in items]


def item_is_billable(item: LineItem) -> bool:
    """Save-time rule: a rate plus either a measurement or a quantity."""
    return item.rate > 0 and (item.has_measurement or item.has_quantity)
