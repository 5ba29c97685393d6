from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from pragatibook.errors import NotFoundError, ValidationError
from pragatibook.models.user import User
from web.deps import current_user_id, get_password_reset_service, get_user_service
from web.forms import read_json, text_field
from web.tokens import issue_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth")

# Simple in-memory rate limiters, keyed by client IP
_login_attempts: dict[str, list[float]] = {}
_MAX_ATTEMPTS = 5
_LOCKOUT_SECONDS = 60

_otp_attempts: dict[str, list[float]] = {}
_OTP_MAX_ATTEMPTS = 5
_OTP_LOCKOUT_SECONDS = 300

_TOO_MANY = "Too many attempts. Please wait a moment and try again."


def _recent(store: dict[str, list[float]], ip: str, window: int) -> list[float]:
    now = time.monotonic()
    attempts = [t for t in store.get(ip, []) if now - t < window]
    store[ip] = attempts
    return attempts


def _is_rate_limited(ip: str) -> bool:
    """Check if an IP is rate-limited. Returns True if locked out."""
    return len(_recent(_login_attempts, ip, _LOCKOUT_SECONDS)) >= _MAX_ATTEMPTS


def _record_failed_attempt(ip: str) -> None:
    _recent(_login_attempts, ip, _LOCKOUT_SECONDS).append(time.monotonic())


def _clear_attempts(ip: str) -> None:
    _login_attempts.pop(ip, None)


def _is_otp_rate_limited(ip: str) -> bool:
    return len(_recent(_otp_attempts, ip, _OTP_LOCKOUT_SECONDS)) >= _OTP_MAX_ATTEMPTS


def _record_otp_failed(ip: str) -> None:
    _recent(_otp_attempts, ip, _OTP_LOCKOUT_SECONDS).append(time.monotonic())


def _clear_otp_attempts(ip: str) -> None:
    _otp_attempts.pop(ip, None)


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _serialize_user(user: User) -> dict:
    return {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
    }


@router.post("/register")
async def register(request: Request):
    body = await read_json(request)
    name = text_field(body, "name")
    email = text_field(body, "email")
    password = body.get("password") if isinstance(body.get("password"), str) else ""
    confirm = body.get("confirmPassword")
    if isinstance(confirm, str) and confirm != password:
        raise ValidationError("Passwords do not match")

    user = get_user_service(request).register(name, email, password)
    logger.info("User %s registered", user.email)
    return {"user": _serialize_user(user), "token": issue_token(user.id)}


@router.post("/login")
async def login(request: Request):
    client_ip = _client_ip(request)
    if _is_rate_limited(client_ip):
        logger.warning("Rate-limited login attempt from %s", client_ip)
        return JSONResponse({"error": _TOO_MANY}, status_code=429)

    body = await read_json(request)
    email = text_field(body, "email")
    password = body.get("password") if isinstance(body.get("password"), str) else ""
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = get_user_service(request).authenticate(email, password)
    if user is None:
        _record_failed_attempt(client_ip)
        logger.warning("Failed login attempt for email=%s from %s", email, client_ip)
        return JSONResponse({"error": "Invalid credentials"}, status_code=401)

    _clear_attempts(client_ip)
    logger.info("User %s logged in", user.email)
    return {"user": _serialize_user(user), "token": issue_token(user.id)}


@router.get("/me")
async def me(request: Request):
    user = get_user_service(request).get_by_id(current_user_id(request))
    if user is None:
        # Token outlived its user.
        return JSONResponse({"error": "Unauthorized"}, status_code=401)
    return {"user": _serialize_user(user)}


@router.post("/forgot-password")
async def forgot_password(request: Request):
    body = await read_json(request)
    email = text_field(body, "email")
    get_password_reset_service(request).request_reset(email)
    return {"message": "OTP sent successfully to your email", "email": email}


@router.post("/verify-otp")
async def verify_otp(request: Request):
    client_ip = _client_ip(request)
    if _is_otp_rate_limited(client_ip):
        logger.warning("Rate-limited OTP verification from %s", client_ip)
        return JSONResponse({"error": _TOO_MANY}, status_code=429)

    body = await read_json(request)
    email = text_field(body, "email")
    code = text_field(body, "otp")
    try:
        get_password_reset_service(request).verify_code(email, code)
    except ValidationError:
        if email and code:
            _record_otp_failed(client_ip)
        raise

    _clear_otp_attempts(client_ip)
    return {"message": "OTP verified successfully", "verified": True}


@router.post("/reset-password")
async def reset_password(request: Request):
    body = await read_json(request)
    email = text_field(body, "email")
    new_password = body.get("newPassword") if isinstance(body.get("newPassword"), str) else ""
    confirm = body.get("confirmPassword")
    if isinstance(confirm, str) and confirm != new_password:
        raise ValidationError("Passwords do not match")

    try:
        get_password_reset_service(request).reset_password(email, new_password)
    except NotFoundError:
        logger.warning("Password reset for unknown email=%s", email)
        raise
    return {"message": "Password reset successfully"}
