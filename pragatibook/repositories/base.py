from abc import ABC, abstractmethod
from datetime import datetime

from pragatibook.models.bill import Bill
from pragatibook.models.otp import OTPRecord
from pragatibook.models.template import Template
from pragatibook.models.user import User


class BillRepository(ABC):
    """Every lookup is scoped to an owner; there is no id-only access."""

    @abstractmethod
    def create(self, bill: Bill) -> Bill: ...

    @abstractmethod
    def get_for_owner(self, uuid: str, owner_id: int) -> Bill | None: ...

    @abstractmethod
    def list_for_owner(self, owner_id: int) -> list[Bill]: ...

    @abstractmethod
    def update(self, bill: Bill) -> Bill | None: ...

    @abstractmethod
    def delete_for_owner(self, uuid: str, owner_id: int) -> bool: ...


class UserRepository(ABC):
    @abstractmethod
    def create(self, user: User) -> User: ...

    @abstractmethod
    def get_by_id(self, user_id: int) -> User | None: ...

    @abstractmethod
    def get_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    def list_all(self) -> list[User]: ...

    @abstractmethod
    def update_password_hash(self, email: str, password_hash: str) -> bool: ...


class OTPRepository(ABC):
    @abstractmethod
    def replace_for_email(self, record: OTPRecord) -> OTPRecord: ...

    @abstractmethod
    def mark_verified(self, email: str, code: str, now: datetime) -> bool: ...

    @abstractmethod
    def has_verified(self, email: str, now: datetime) -> bool: ...

    @abstractmethod
    def list_by_email(self, email: str) -> list[OTPRecord]: ...

    @abstractmethod
    def delete_verified(self, email: str) -> None: ...

    @abstractmethod
    def delete_by_email(self, email: str) -> None: ...

    @abstractmethod
    def delete_expired(self, now: datetime) -> int: ...


class TemplateRepository(ABC):
    @abstractmethod
    def create(self, template: Template) -> Template: ...

    @abstractmethod
    def get_for_owner(self, uuid: str, owner_id: int) -> Template | None: ...

    @abstractmethod
    def get_active(self, owner_id: int) -> Template | None: ...

    @abstractmethod
    def list_for_owner(self, owner_id: int) -> list[Template]: ...

    @abstractmethod
    def update(self, template: Template) -> Template: ...

    @abstractmethod
    def set_active(self, template_id: int, owner_id: int) -> None: ...

    @abstractmethod
    def delete(self, template_id: int) -> None: ...
