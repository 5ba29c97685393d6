from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from pragatibook.db import get_engine
from pragatibook.mailer import get_mailer
from pragatibook.repositories.sqlalchemy import (
    SQLAlchemyBillRepository,
    SQLAlchemyOTPRepository,
    SQLAlchemyTemplateRepository,
    SQLAlchemyUserRepository,
)
from pragatibook.services.bill_service import BillService
from pragatibook.services.otp_service import OTPService
from pragatibook.services.password_reset_service import PasswordResetService
from pragatibook.services.template_service import TemplateService
from pragatibook.services.user_service import UserService
from web.tokens import read_token

logger = logging.getLogger(__name__)

PUBLIC_PREFIX_PATHS = {"/api/auth/", "/api/health"}
# Under /api/auth/ but still requiring a token.
PROTECTED_EXACT_PATHS = {"/api/auth/me"}


def _bearer_token(scope: Scope) -> str | None:
    for name, value in scope.get("headers", []):
        if name == b"authorization":
            scheme, _, token = value.decode("latin-1").partition(" ")
            if scheme.lower() == "bearer" and token.strip():
                return token.strip()
    return None


class AuthMiddleware:
    """Pure ASGI middleware for bearer-token authentication."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope["path"]
        scope.setdefault("state", {})
        if path not in PROTECTED_EXACT_PATHS and any(path.startswith(p) for p in PUBLIC_PREFIX_PATHS):
            await self.app(scope, receive, send)
            return

        token = _bearer_token(scope)
        user_id = read_token(token) if token else None
        if user_id is None:
            logger.info("Auth rejected: %s %s", scope.get("method"), path)
            response = JSONResponse({"error": "Unauthorized"}, status_code=401)
            await response(scope, receive, send)
            return

        scope["state"]["user_id"] = user_id
        await self.app(scope, receive, send)


class DBConnectionMiddleware:
    """Pure ASGI middleware: at most one DB connection per request."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        request.state.db_conn = None
        try:
            await self.app(scope, receive, send)
        finally:
            conn = getattr(request.state, "db_conn", None)
            if conn is not None:
                conn.close()
                logger.debug("DB connection closed for %s %s", request.method, request.url.path)


def _get_conn(request: Request):
    """Lazy per-request connection, created on first use and closed by middleware."""
    if request.state.db_conn is None:
        logger.debug("Creating DB connection for %s %s", request.method, request.url.path)
        request.state.db_conn = get_engine().connect()
    return request.state.db_conn


def current_user_id(request: Request) -> int:
    return request.state.user_id


def get_user_service(request: Request) -> UserService:
    return UserService(SQLAlchemyUserRepository(_get_conn(request)))


def get_bill_service(request: Request) -> BillService:
    return BillService(SQLAlchemyBillRepository(_get_conn(request)))


def get_template_service(request: Request) -> TemplateService:
    return TemplateService(SQLAlchemyTemplateRepository(_get_conn(request)))


def get_otp_service(request: Request) -> OTPService:
    return OTPService(SQLAlchemyOTPRepository(_get_conn(request)))


def get_password_reset_service(request: Request) -> PasswordResetService:
    return PasswordResetService(get_user_service(request), get_otp_service(request), get_mailer())
