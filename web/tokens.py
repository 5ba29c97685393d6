from __future__ import annotations

import logging

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from pragatibook.settings import settings

logger = logging.getLogger(__name__)

_SALT = "pragatibook-auth"


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.get_secret_key(), salt=_SALT)


def issue_token(user_id: int) -> str:
    return _serializer().dumps({"uid": user_id})


def read_token(token: str) -> int | None:
    """Return the user id carried by a token, or None if it is forged or stale."""
    try:
        data = _serializer().loads(token, max_age=settings.token_max_age)
    except SignatureExpired:
        logger.info("Rejected expired auth token")
        return None
    except BadSignature:
        logger.warning("Rejected auth token with bad signature")
        return None
    user_id = data.get("uid") if isinstance(data, dict) else None
    return user_id if isinstance(user_id, int) else None
