#create and decode the JWT access tokens used by protected routes
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from recipe_api.config import Settings
from recipe_api.exceptions import AuthenticationError


def create_token(subject: str, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expires_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> str:
    """Return the token subject, or raise AuthenticationError.

    Bad signature, expiry and malformed payloads all end up as the same
    error so callers cannot tell which check failed.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise AuthenticationError()
    subject = payload.get("sub")
    if not subject or not isinstance(subject, str):
        raise AuthenticationError()
    return subject
