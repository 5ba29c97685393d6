"""Root conftest: in-memory SQLite engine and fixtures for the full schema."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from sqlalchemy import Connection, text
from sqlalchemy.engine import Engine

from pragatibook.db import create_db_engine
from pragatibook.models.bill import Bill, LineItem
from pragatibook.models.user import User

# Matches Alembic head: 3f9c1a7d2b40 (initial schema)
SCHEMA_DDL = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email VARCHAR(255) NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
);

CREATE TABLE bills (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    owner_id INTEGER NOT NULL REFERENCES users(id),
    customer_name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    bill_date VARCHAR(10) NOT NULL,
    total FLOAT NOT NULL DEFAULT 0,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
);

CREATE TABLE bill_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    bill_id INTEGER NOT NULL REFERENCES bills(id) ON DELETE CASCADE,
    item_key VARCHAR(32) NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    feet FLOAT NOT NULL DEFAULT 0,
    inches FLOAT NOT NULL DEFAULT 0,
    quantity FLOAT,
    rate FLOAT NOT NULL DEFAULT 0,
    amount FLOAT NOT NULL DEFAULT 0,
    sort_order INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE password_reset_otps (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email VARCHAR(255) NOT NULL,
    code VARCHAR(6) NOT NULL,
    created_at DATETIME NOT NULL,
    expires_at DATETIME NOT NULL,
    verified BOOLEAN NOT NULL DEFAULT 0
);

CREATE INDEX ix_password_reset_otps_email ON password_reset_otps (email);

CREATE TABLE templates (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    owner_id INTEGER NOT NULL REFERENCES users(id),
    name VARCHAR(100) NOT NULL,
    company_name TEXT NOT NULL DEFAULT '',
    company_subtitle TEXT NOT NULL DEFAULT '',
    company_address TEXT NOT NULL DEFAULT '',
    company_phone VARCHAR(50) NOT NULL DEFAULT '',
    company_email VARCHAR(255) NOT NULL DEFAULT '',
    company_website VARCHAR(255) NOT NULL DEFAULT '',
    primary_color VARCHAR(7) NOT NULL DEFAULT '#2563EB',
    secondary_color VARCHAR(7) NOT NULL DEFAULT '#64748B',
    accent_color VARCHAR(7) NOT NULL DEFAULT '#059669',
    text_color VARCHAR(7) NOT NULL DEFAULT '#1F2937',
    background_color VARCHAR(7) NOT NULL DEFAULT '#FFFFFF',
    header_style VARCHAR(10) NOT NULL DEFAULT 'modern',
    font_size VARCHAR(10) NOT NULL DEFAULT 'medium',
    show_company_address BOOLEAN NOT NULL DEFAULT 1,
    show_due_date BOOLEAN NOT NULL DEFAULT 1,
    show_payment_terms BOOLEAN NOT NULL DEFAULT 1,
    show_footer BOOLEAN NOT NULL DEFAULT 1,
    show_item_numbers BOOLEAN NOT NULL DEFAULT 1,
    show_measurements BOOLEAN NOT NULL DEFAULT 1,
    payment_terms TEXT NOT NULL DEFAULT '',
    footer_text TEXT NOT NULL DEFAULT '',
    invoice_prefix VARCHAR(20) NOT NULL DEFAULT 'INV',
    due_days INTEGER NOT NULL DEFAULT 30,
    is_active BOOLEAN NOT NULL DEFAULT 0,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
);
"""


def create_schema(conn: Connection) -> None:
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()


@pytest.fixture()
def db_engine() -> Engine:
    engine = create_db_engine("sqlite://")
    yield engine
    engine.dispose()


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    create_schema(conn)
    yield conn
    conn.close()


class FakeClock:
    """Settable clock for code that takes a ``now`` callable."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        from datetime import timedelta

        self.current = self.current + timedelta(**kwargs)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


def _sample_items() -> list[LineItem]:
    return [
        LineItem(id="a1", description="Window glass", feet=2, inches=6, quantity=3, rate=10, amount=900),
        LineItem(id="b2", description="Fitting", quantity=5, rate=20, amount=100),
        LineItem(id="c3", description="Frame", feet=1, rate=10, amount=120),
    ]


@pytest.fixture()
def sample_items() -> list[LineItem]:
    return _sample_items()


@pytest.fixture()
def sample_user() -> User:
    return User(id=1, name="Asha Rao", email="asha@example.com", password_hash="hashed")


@pytest.fixture()
def sample_bill() -> Bill:
    return Bill(
        id=1,
        uuid="01JQ0000000000000000000000",
        owner_id=1,
        customer_name="Mehta Traders",
        description="Shop front",
        date=date(2026, 3, 1),
        items=_sample_items(),
        total=1120,
    )
