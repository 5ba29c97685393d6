import pytest
from sqlalchemy import Connection

from pragatibook.models.user import User
from pragatibook.repositories.sqlalchemy import (
    SQLAlchemyBillRepository,
    SQLAlchemyOTPRepository,
    SQLAlchemyTemplateRepository,
    SQLAlchemyUserRepository,
)


@pytest.fixture()
def user_repo(db_connection: Connection) -> SQLAlchemyUserRepository:
    return SQLAlchemyUserRepository(db_connection)


@pytest.fixture()
def bill_repo(db_connection: Connection) -> SQLAlchemyBillRepository:
    return SQLAlchemyBillRepository(db_connection)


@pytest.fixture()
def otp_repo(db_connection: Connection) -> SQLAlchemyOTPRepository:
    return SQLAlchemyOTPRepository(db_connection)


@pytest.fixture()
def template_repo(db_connection: Connection) -> SQLAlchemyTemplateRepository:
    return SQLAlchemyTemplateRepository(db_connection)


@pytest.fixture()
def owner(user_repo: SQLAlchemyUserRepository) -> User:
    return user_repo.create(User(name="Owner", email="owner@example.com", password_hash="h"))


@pytest.fixture()
def other_owner(user_repo: SQLAlchemyUserRepository) -> User:
    return user_repo.create(User(name="Other", email="other@example.com", password_hash="h"))
