from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class OTPRecord(BaseModel):
    """A password-reset code bound to an email.

    A record moves from unverified to verified once and never back. Expiry
    invalidates it in either state; nothing extends ``expires_at``.
    """

    id: int | None = None
    email: str
    code: str
    created_at: datetime
    expires_at: datetime
    verified: bool = False

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def can_verify(self, now: datetime) -> bool:
        return not self.verified and not self.is_expired(now)

    def grants_reset(self, now: datetime) -> bool:
        return self.verified and not self.is_expired(now)
