from __future__ import annotations

import logging

import bcrypt

from pragatibook.constants import MIN_PASSWORD_LENGTH
from pragatibook.errors import ValidationError
from pragatibook.models.user import User
from pragatibook.repositories.base import UserRepository

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=12)).decode()


def validate_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


class UserService:
    def __init__(self, repo: UserRepository) -> None:
        self.repo = repo

    def register(self, name: str, email: str, password: str) -> User:
        name = name.strip()
        email = email.strip()
        if not name or not email or not password:
            raise ValidationError("Name, email, and password are required")
        validate_password(password)
        if self.repo.get_by_email(email) is not None:
            raise ValidationError("User with this email already exists")
        user = User(name=name, email=email, password_hash=hash_password(password))
        result = self.repo.create(user)
        logger.info("User registered: %s", email)
        return result

    def authenticate(self, email: str, password: str) -> User | None:
        user = self.repo.get_by_email(email.strip())
        if user is None:
            return None
        if bcrypt.checkpw(password.encode(), user.password_hash.encode()):
            return user
        return None

    def get_by_id(self, user_id: int) -> User | None:
        return self.repo.get_by_id(user_id)

    def get_by_email(self, email: str) -> User | None:
        return self.repo.get_by_email(email)

    def change_password(self, email: str, new_password: str) -> bool:
        """Store a new password hash. Returns False when no user has that email."""
        updated = self.repo.update_password_hash(email, hash_password(new_password))
        if updated:
            logger.info("Password changed for user: %s", email)
        return updated

    def list_users(self) -> list[User]:
        return self.repo.list_all()
