"""Password hashing (passlib) and bearer tokens (python-jose)."""

from datetime import UTC, datetime, timedelta

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext

from shared.errors import Unauthenticated
from shared.settings import get_settings

logger = structlog.get_logger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def issue_access_token(user_id: str, expires_minutes: int | None = None) -> str:
    settings = get_settings()
    minutes = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    claims = {
        "sub": str(user_id),
        "exp": datetime.now(UTC) + timedelta(minutes=minutes),
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.token_algorithm)


def read_access_token(token: str) -> str:
    """Return the user id carried by ``token``.

    Raises ``Unauthenticated`` when the signature, expiry or subject is invalid.
    """
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[settings.token_algorithm])
    except JWTError as exc:
        logger.info("Rejected bearer token", reason=str(exc))
        raise Unauthenticated("Invalid or expired token") from exc

    subject = claims.get("sub")
    if not subject:
        raise Unauthenticated("Invalid or expired token")
    return subject
