from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from pragatibook.models import format_amount
from pragatibook.models.bill import Bill, LineItem
from pragatibook.models.otp import OTPRecord
from pragatibook.models.template import DEFAULT_TEMPLATE, EDITABLE_FIELDS, Template


class TestFormatAmount:
    def test_rupees(self):
        assert format_amount(1234.5) == "₹1,234.50"

    def test_zero(self):
        assert format_amount(0) == "₹0.00"

    def test_negative(self):
        assert format_amount(-20) == "-₹20.00"

    def test_custom_symbol(self):
        assert format_amount(1000000, symbol="Rs. ") == "Rs. 1,000,000.00"


class TestLineItem:
    def test_defaults(self):
        item = LineItem()
        assert item.quantity is None
        assert item.amount == 0
        assert len(item.id) == 12

    def test_ids_are_unique(self):
        assert LineItem().id != LineItem().id

    def test_has_measurement(self):
        assert LineItem(inches=1).has_measurement
        assert not LineItem().has_measurement

    def test_has_quantity(self):
        assert LineItem(quantity=1).has_quantity
        assert not LineItem(quantity=0).has_quantity
        assert not LineItem().has_quantity


class TestBill:
    def test_date_parsed_from_iso(self):
        bill = Bill(owner_id=1, customer_name="X", date="2026-03-01")
        assert bill.date == date(2026, 3, 1)

    def test_date_required(self):
        with pytest.raises(ValidationError):
            Bill(owner_id=1, customer_name="X")


class TestOTPRecord:
    def _record(self, **overrides) -> OTPRecord:
        created = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
        defaults = dict(
            email="a@x.com",
            code="123456",
            created_at=created,
            expires_at=created + timedelta(minutes=10),
        )
        defaults.update(overrides)
        return OTPRecord(**defaults)

    def test_expiry_boundary(self):
        record = self._record()
        assert not record.is_expired(record.expires_at - timedelta(seconds=1))
        assert record.is_expired(record.expires_at)

    def test_can_verify_only_unverified_live_records(self):
        record = self._record()
        assert record.can_verify(record.created_at)
        assert not record.model_copy(update={"verified": True}).can_verify(record.created_at)
        assert not record.can_verify(record.expires_at)

    def test_grants_reset_only_verified_live_records(self):
        record = self._record(verified=True)
        assert record.grants_reset(record.created_at)
        assert not record.grants_reset(record.expires_at + timedelta(minutes=1))
        assert not self._record().grants_reset(record.created_at)


class TestTemplate:
    def test_default_template(self):
        assert DEFAULT_TEMPLATE.company_name == "Your Company"
        assert DEFAULT_TEMPLATE.invoice_prefix == "INV"
        assert DEFAULT_TEMPLATE.due_days == 30

    def test_rejects_unknown_header_style(self):
        with pytest.raises(ValidationError):
            Template(header_style="fancy")

    def test_editable_fields_exclude_managed(self):
        assert "company_name" in EDITABLE_FIELDS
        for managed in ("id", "uuid", "owner_id", "is_active", "created_at", "updated_at"):
            assert managed not in EDITABLE_FIELDS
