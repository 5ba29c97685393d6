from __future__ import annotations

import logging

from pragatibook.errors import InfrastructureError, NotFoundError, ValidationError
from pragatibook.mailer import BrevoMailer
from pragatibook.services.otp_service import OTPService
from pragatibook.services.user_service import UserService, validate_password

logger = logging.getLogger(__name__)


class PasswordResetService:
    """Forgot-password flow: request a code, verify it, then set a new password."""

    def __init__(self, user_service: UserService, otp_service: OTPService, mailer: BrevoMailer) -> None:
        self.user_service = user_service
        self.otp_service = otp_service
        self.mailer = mailer

    def request_reset(self, email: str) -> None:
        email = email.strip()
        if not email:
            raise ValidationError("Email is required")

        user = self.user_service.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found")

        code = self.otp_service.generate()
        if not self.otp_service.save(email, code):
            raise InfrastructureError("Failed to generate OTP")

        if not self.mailer.send_otp_email(email, code, user.name):
            # Leave nothing behind that the user has no way to act on.
            self.otp_service.discard(email)
            raise InfrastructureError("Failed to send OTP email")

        self.otp_service.sweep_expired()
        logger.info("Password reset requested for %s", email)

    def verify_code(self, email: str, code: str) -> None:
        email = email.strip()
        code = code.strip()
        if not email or not code:
            raise ValidationError("Email and OTP are required")
        if not self.otp_service.verify(email, code):
            raise ValidationError("Invalid or expired OTP")

    def reset_password(self, email: str, new_password: str) -> None:
        email = email.strip()
        if not email or not new_password:
            raise ValidationError("Email and new password are required")
        validate_password(new_password)

        # Checked now, not earlier: the code may have expired since verification.
        if not self.otp_service.is_verified(email):
            raise ValidationError("OTP not verified. Please verify OTP first.")

        if not self.user_service.change_password(email, new_password):
            raise NotFoundError("User not found")

        if not self.otp_service.consume(email):
            logger.warning("Password for %s changed but its verified OTP could not be removed", email)
        logger.info("Password reset completed for %s", email)
