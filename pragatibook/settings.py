import logging
import secrets

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_INSECURE_DEFAULT_KEY = "change-me-in-production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="PRAGATIBOOK_", extra="ignore")

    app_name: str = "PragatiBook"

    db_url: str = "sqlite:///pragatibook.db"

    log_level: str = "INFO"
    log_json: bool = False

    token_max_age: int = 604800  # 7 days in seconds
    otp_expiry_minutes: int = 10

    brevo_api_key: str = ""
    brevo_sender_email: str = "noreply@pragatibook.app"
    brevo_sender_name: str = "PragatiBook Support"

    secret_key: str = _INSECURE_DEFAULT_KEY

    def get_secret_key(self) -> str:
        if self.secret_key == _INSECURE_DEFAULT_KEY:
            logger.warning(
                "PRAGATIBOOK_SECRET_KEY is not set, using a random key. "
                "Issued tokens will not survive restarts. "
                "Set PRAGATIBOOK_SECRET_KEY in your environment or .env file."
            )
            self.secret_key = secrets.token_urlsafe(32)
        return self.secret_key


settings = Settings()
