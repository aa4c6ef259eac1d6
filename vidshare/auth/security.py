"""Bearer token handling for the acting channel.

Tokens are issued by the identity provider and signed with the shared
``auth_secret_key``. The ``sub`` claim is the channel id. ``create_access_token``
exists for tooling and tests that need to act as a channel.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from vidshare.config.settings import get_settings


def create_access_token(
    channel_id: str,
    expires_delta: timedelta | None = None,
    **claims: Any,
) -> str:
    """Create a signed access token for a channel.

    Args:
        channel_id: Value of the ``sub`` claim
        expires_delta: Token lifetime (default from settings)
        **claims: Extra claims to embed

    Returns:
        Encoded JWT string
    """
    settings = get_settings()
    now = datetime.now(UTC)
    expire = now + (
        expires_delta or timedelta(minutes=settings.auth_access_token_expire_minutes)
    )

    payload = {
        **claims,
        "sub": str(channel_id),
        "exp": expire,
        "iat": now,
        "type": "access",
    }
    return jwt.encode(payload, settings.auth_secret_key, algorithm=settings.auth_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate an access token.

    Validates signature, expiration and token type.

    Raises:
        JWTError: If token is invalid, expired, of the wrong type or has no subject
    """
    settings = get_settings()

    payload = jwt.decode(
        token,
        settings.auth_secret_key,
        algorithms=[settings.auth_algorithm],
    )

    if payload.get("type") != "access":
        msg = "Invalid token type: expected 'access'"
        raise JWTError(msg)

    if not payload.get("sub"):
        msg = "Token has no subject"
        raise JWTError(msg)

    return payload
