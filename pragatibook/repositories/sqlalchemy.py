from __future__ import annotations

from datetime import datetime

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import SQLAlchemyError
from ulid import ULID

from pragatibook.constants import utcnow
from pragatibook.models.bill import Bill, LineItem
from pragatibook.models.otp import OTPRecord
from pragatibook.models.template import Template
from pragatibook.models.user import User
from pragatibook.repositories.base import (
    BillRepository,
    OTPRepository,
    TemplateRepository,
    UserRepository,
)


def _now() -> datetime:
    return utcnow()


class SQLAlchemyBillRepository(BillRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def _insert_items(self, bill_id: int, items: list[LineItem]) -> None:
        for i, item in enumerate(items):
            self.conn.execute(
                text(
                    "INSERT INTO bill_items (bill_id, item_key, description, feet, inches, "
                    "quantity, rate, amount, sort_order) "
                    "VALUES (:bill_id, :item_key, :description, :feet, :inches, "
                    ":quantity, :rate, :amount, :sort_order)"
                ),
                {
                    "bill_id": bill_id,
                    "item_key": item.id,
                    "description": item.description,
                    "feet": item.feet,
                    "inches": item.inches,
                    "quantity": item.quantity,
                    "rate": item.rate,
                    "amount": item.amount,
                    "sort_order": i,
                },
            )

    def create(self, bill: Bill) -> Bill:
        bill_uuid = str(ULID())
        now = _now()
        result = self.conn.execute(
            text(
                "INSERT INTO bills (uuid, owner_id, customer_name, description, bill_date, total, "
                "created_at, updated_at) "
                "VALUES (:uuid, :owner_id, :customer_name, :description, :bill_date, :total, "
                ":created_at, :updated_at)"
            ),
            {
                "uuid": bill_uuid,
                "owner_id": bill.owner_id,
                "customer_name": bill.customer_name,
                "description": bill.description,
                "bill_date": bill.date.isoformat(),
                "total": bill.total,
                "created_at": now,
                "updated_at": now,
            },
        )
        self._insert_items(result.lastrowid, bill.items)
        self.conn.commit()
        created = self.get_for_owner(bill_uuid, bill.owner_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve bill after create (uuid={bill_uuid})")
        return created

    @staticmethod
    def _build_bill(row: RowMapping, item_rows: list[RowMapping]) -> Bill:
        return Bill(
            id=row["id"],
            uuid=row["uuid"],
            owner_id=row["owner_id"],
            customer_name=row["customer_name"],
            description=row["description"],
            date=row["bill_date"],
            total=row["total"],
            items=[
                LineItem(
                    id=item_row["item_key"],
                    description=item_row["description"],
                    feet=item_row["feet"],
                    inches=item_row["inches"],
                    quantity=item_row["quantity"],
                    rate=item_row["rate"],
                    amount=item_row["amount"],
                )
                for item_row in item_rows
            ],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_for_owner(self, uuid: str, owner_id: int) -> Bill | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM bills WHERE uuid = :uuid AND owner_id = :owner_id"),
                {"uuid": uuid, "owner_id": owner_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        items = (
            self.conn.execute(
                text("SELECT * FROM bill_items WHERE bill_id = :bill_id ORDER BY sort_order"),
                {"bill_id": row["id"]},
            )
            .mappings()
            .fetchall()
        )
        return self._build_bill(row, list(items))

    def list_for_owner(self, owner_id: int) -> list[Bill]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM bills WHERE owner_id = :owner_id ORDER BY updated_at DESC, id DESC"),
                {"owner_id": owner_id},
            )
            .mappings()
            .fetchall()
        )
        if not rows:
            return []
        bill_ids = [row["id"] for row in rows]
        placeholders = ", ".join(f":id{i}" for i in range(len(bill_ids)))
        params = {f"id{i}": bid for i, bid in enumerate(bill_ids)}
        all_items = (
            self.conn.execute(
                text(f"SELECT * FROM bill_items WHERE bill_id IN ({placeholders}) ORDER BY sort_order"),
                params,
            )
            .mappings()
            .fetchall()
        )
        items_by_bill: dict[int, list[RowMapping]] = {}
        for item_row in all_items:
            items_by_bill.setdefault(item_row["bill_id"], []).append(item_row)
        return [self._build_bill(row, items_by_bill.get(row["id"], [])) for row in rows]

    def update(self, bill: Bill) -> Bill | None:
        row = (
            self.conn.execute(
                text("SELECT id FROM bills WHERE uuid = :uuid AND owner_id = :owner_id"),
                {"uuid": bill.uuid, "owner_id": bill.owner_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        bill_id = row["id"]
        self.conn.execute(
            text(
                "UPDATE bills SET customer_name = :customer_name, description = :description, "
                "bill_date = :bill_date, total = :total, updated_at = :updated_at WHERE id = :id"
            ),
            {
                "customer_name": bill.customer_name,
                "description": bill.description,
                "bill_date": bill.date.isoformat(),
                "total": bill.total,
                "updated_at": _now(),
                "id": bill_id,
            },
        )
        self.conn.execute(
            text("DELETE FROM bill_items WHERE bill_id = :bill_id"),
            {"bill_id": bill_id},
        )
        self._insert_items(bill_id, bill.items)
        self.conn.commit()
        return self.get_for_owner(bill.uuid, bill.owner_id)

    def delete_for_owner(self, uuid: str, owner_id: int) -> bool:
        row = (
            self.conn.execute(
                text("SELECT id FROM bills WHERE uuid = :uuid AND owner_id = :owner_id"),
                {"uuid": uuid, "owner_id": owner_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return False
        self.conn.execute(text("DELETE FROM bill_items WHERE bill_id = :id"), {"id": row["id"]})
        self.conn.execute(text("DELETE FROM bills WHERE id = :id"), {"id": row["id"]})
        self.conn.commit()
        return True


class SQLAlchemyUserRepository(UserRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_user(row: RowMapping) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def create(self, user: User) -> User:
        now = _now()
        self.conn.execute(
            text(
                "INSERT INTO users (name, email, password_hash, created_at, updated_at) "
                "VALUES (:name, :email, :password_hash, :created_at, :updated_at)"
            ),
            {
                "name": user.name,
                "email": user.email,
                "password_hash": user.password_hash,
                "created_at": now,
                "updated_at": now,
            },
        )
        self.conn.commit()
        result = self.get_by_email(user.email)
        if result is None:
            raise RuntimeError(f"Failed to retrieve user after create (email={user.email})")
        return result

    def get_by_id(self, user_id: int) -> User | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM users WHERE id = :id"),
                {"id": user_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_user(row)

    def get_by_email(self, email: str) -> User | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM users WHERE email = :email"),
                {"email": email},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_user(row)

    def list_all(self) -> list[User]:
        rows = self.conn.execute(text("SELECT * FROM users ORDER BY created_at DESC")).mappings().fetchall()
        return [self._row_to_user(row) for row in rows]

    def update_password_hash(self, email: str, password_hash: str) -> bool:
        result = self.conn.execute(
            text("UPDATE users SET password_hash = :password_hash, updated_at = :updated_at WHERE email = :email"),
            {"password_hash": password_hash, "updated_at": _now(), "email": email},
        )
        self.conn.commit()
        return result.rowcount > 0


class SQLAlchemyOTPRepository(OTPRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_record(row: RowMapping) -> OTPRecord:
        return OTPRecord(
            id=row["id"],
            email=row["email"],
            code=row["code"],
            created_at=row["created_at"],
            expires_at=row["expires_at"],
            verified=bool(row["verified"]),
        )

    def replace_for_email(self, record: OTPRecord) -> OTPRecord:
        """Delete every record for the email and insert ``record`` in one transaction."""
        try:
            self.conn.execute(
                text("DELETE FROM password_reset_otps WHERE email = :email"),
                {"email": record.email},
            )
            result = self.conn.execute(
                text(
                    "INSERT INTO password_reset_otps (email, code, created_at, expires_at, verified) "
                    "VALUES (:email, :code, :created_at, :expires_at, :verified)"
                ),
                {
                    "email": record.email,
                    "code": record.code,
                    "created_at": record.created_at,
                    "expires_at": record.expires_at,
                    "verified": record.verified,
                },
            )
            self.conn.commit()
        except SQLAlchemyError:
            self.conn.rollback()
            raise
        return record.model_copy(update={"id": result.lastrowid})

    def _write(self, sql: str, params: dict) -> int:
        """Run one write statement in its own transaction; return the affected row count."""
        try:
            result = self.conn.execute(text(sql), params)
            self.conn.commit()
        except SQLAlchemyError:
            self.conn.rollback()
            raise
        return result.rowcount

    def mark_verified(self, email: str, code: str, now: datetime) -> bool:
        # The WHERE clause is the whole check, so two racing callers cannot both win.
        updated = self._write(
            "UPDATE password_reset_otps SET verified = 1 "
            "WHERE email = :email AND code = :code AND verified = 0 AND expires_at > :now",
            {"email": email, "code": code, "now": now},
        )
        return updated > 0

    def has_verified(self, email: str, now: datetime) -> bool:
        row = self.conn.execute(
            text(
                "SELECT 1 FROM password_reset_otps "
                "WHERE email = :email AND verified = 1 AND expires_at > :now LIMIT 1"
            ),
            {"email": email, "now": now},
        ).fetchone()
        return row is not None

    def list_by_email(self, email: str) -> list[OTPRecord]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM password_reset_otps WHERE email = :email ORDER BY created_at DESC"),
                {"email": email},
            )
            .mappings()
            .fetchall()
        )
        return [self._row_to_record(row) for row in rows]

    def delete_verified(self, email: str) -> None:
        self._write("DELETE FROM password_reset_otps WHERE email = :email AND verified = 1", {"email": email})

    def delete_by_email(self, email: str) -> None:
        self._write("DELETE FROM password_reset_otps WHERE email = :email", {"email": email})

    def delete_expired(self, now: datetime) -> int:
        return self._write("DELETE FROM password_reset_otps WHERE expires_at <= :now", {"now": now})


_TEMPLATE_COLUMNS = [name for name in Template.model_fields if name not in {"id", "uuid", "created_at", "updated_at"}]


class SQLAlchemyTemplateRepository(TemplateRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_template(row: RowMapping) -> Template:
        return Template(**{key: row[key] for key in Template.model_fields if key in row})

    def create(self, template: Template) -> Template:
        template_uuid = str(ULID())
        now = _now()
        columns = ["uuid", *_TEMPLATE_COLUMNS, "created_at", "updated_at"]
        params = {name: getattr(template, name) for name in _TEMPLATE_COLUMNS}
        params.update({"uuid": template_uuid, "created_at": now, "updated_at": now})
        self.conn.execute(
            text(
                f"INSERT INTO templates ({', '.join(columns)}) "
                f"VALUES ({', '.join(':' + c for c in columns)})"
            ),
            params,
        )
        self.conn.commit()
        result = self.get_for_owner(template_uuid, template.owner_id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve template after create (uuid={template_uuid})")
        return result

    def get_for_owner(self, uuid: str, owner_id: int) -> Template | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM templates WHERE uuid = :uuid AND owner_id = :owner_id"),
                {"uuid": uuid, "owner_id": owner_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_template(row)

    def get_active(self, owner_id: int) -> Template | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM templates WHERE owner_id = :owner_id AND is_active = 1 LIMIT 1"),
                {"owner_id": owner_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_template(row)

    def list_for_owner(self, owner_id: int) -> list[Template]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM templates WHERE owner_id = :owner_id ORDER BY created_at, id"),
                {"owner_id": owner_id},
            )
            .mappings()
            .fetchall()
        )
        return [self._row_to_template(row) for row in rows]

    def update(self, template: Template) -> Template:
        editable = [c for c in _TEMPLATE_COLUMNS if c not in {"owner_id", "is_active"}]
        params = {name: getattr(template, name) for name in editable}
        params.update({"updated_at": _now(), "id": template.id})
        assignments = ", ".join(f"{c} = :{c}" for c in [*editable, "updated_at"])
        self.conn.execute(text(f"UPDATE templates SET {assignments} WHERE id = :id"), params)
        self.conn.commit()
        result = self.get_for_owner(template.uuid, template.owner_id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve template after update (id={template.id})")
        return result

    def set_active(self, template_id: int, owner_id: int) -> None:
        self.conn.execute(
            text("UPDATE templates SET is_active = (id = :id) WHERE owner_id = :owner_id"),
            {"id": template_id, "owner_id": owner_id},
        )
        self.conn.commit()

    def delete(self, template_id: int) -> None:
        self.conn.execute(
            text("DELETE FROM templates WHERE id = :id"),
            {"id": template_id},
        )
        self.conn.commit()
