"""Bearer token helpers shared with the identity provider."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from markethub.config import get_settings


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Sign ``data`` (expects ``sub`` and ``role`` claims) into a bearer token."""

    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode(
        {**data, "exp": expire},
        settings.secret_key,
        algorithm=settings.access_token_algorithm,
    )


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(
            token, settings.secret_key, algorithms=[settings.access_token_algorithm]
        )
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc
