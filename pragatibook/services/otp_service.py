"""Password-reset one-time codes.

Per email the lifecycle is ``NONE -> UNVERIFIED -> VERIFIED -> NONE``. Saving a
new code discards whatever existed for that email. Expiry is a separate,
time-based invalidation that applies in either live state; expired rows are
inert and only removed by :meth:`OTPService.sweep_expired`.

Every answer is a plain bool (a count for the sweep). Storage errors are
logged and answered as False. Callers must not learn whether a failed
verification was a wrong code, an expired one or a reused one.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError

from pragatibook.constants import OTP_MAX, OTP_MIN, utcnow
from pragatibook.models.otp import OTPRecord
from pragatibook.repositories.base import OTPRepository
from pragatibook.settings import settings

logger = logging.getLogger(__name__)


class OTPState(str, Enum):
    NONE = "none"
    UNVERIFIED = "unverified"
    VERIFIED = "verified"
    EXPIRED = "expired"


class OTPService:
    def __init__(
        self,
        otp_repo: OTPRepository,
        now: Callable[[], datetime] = utcnow,
        expiry_minutes: int | None = None,
    ) -> None:
        self.otp_repo = otp_repo
        self.now = now
        self.expiry = timedelta(minutes=settings.otp_expiry_minutes if expiry_minutes is None else expiry_minutes)

    @staticmethod
    def generate() -> str:
        return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))

    def save(self, email: str, code: str) -> bool:
        created_at = self.now()
        record = OTPRecord(
            email=email,
            code=code,
            created_at=created_at,
            expires_at=created_at + self.expiry,
            verified=False,
        )
        try:
            self.otp_repo.replace_for_email(record)
        except SQLAlchemyError:
            logger.exception("Failed to save OTP for email=%s", email)
            return False
        logger.info("OTP issued for email=%s, expires_at=%s", email, record.expires_at.isoformat())
        return True

    def verify(self, email: str, code: str) -> bool:
        # mark_verified is a single conditional UPDATE; concurrent callers race on the row, not here.
        try:
            verified = self.otp_repo.mark_verified(email, code, self.now())
        except SQLAlchemyError:
            logger.exception("Failed to verify OTP for email=%s", email)
            return False
        if verified:
            logger.info("OTP verified for email=%s", email)
        else:
            logger.warning("OTP verification failed for email=%s", email)
        return verified

    def is_verified(self, email: str) -> bool:
        try:
            return self.otp_repo.has_verified(email, self.now())
        except SQLAlchemyError:
            logger.exception("Failed to check OTP state for email=%s", email)
            return False

    def consume(self, email: str) -> bool:
        try:
            self.otp_repo.delete_verified(email)
        except SQLAlchemyError:
            logger.exception("Failed to consume OTP for email=%s", email)
            return False
        logger.info("Verified OTP consumed for email=%s", email)
        return True

    def discard(self, email: str) -> bool:
        """Drop every record for the email, e.g. when the code could not be delivered."""
        try:
            self.otp_repo.delete_by_email(email)
        except SQLAlchemyError:
            logger.exception("Failed to discard OTP records for email=%s", email)
            return False
        logger.info("OTP records discarded for email=%s", email)
        return True

    def sweep_expired(self) -> int:
        try:
            removed = self.otp_repo.delete_expired(self.now())
        except SQLAlchemyError:
            logger.exception("Failed to sweep expired OTPs")
            return 0
        logger.debug("Swept %d expired OTP records", removed)
        return removed

    def state(self, email: str) -> OTPState:
        records = self.otp_repo.list_by_email(email)
        if not records:
            return OTPState.NONE
        record = records[0]
        if record.is_expired(self.now()):
            return OTPState.EXPIRED
        return OTPState.VERIFIED if record.verified else OTPState.UNVERIFIED
