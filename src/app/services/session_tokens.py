"""Session tokens

Bearer tokens are HS256 JWTs whose ``sub`` claim is the user id. The token
carries no tenant or role: both are read from the user row on every request
so a revoked role takes effect immediately.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from config import ApplicationConfig

ALGORITHM = "HS256"


class InvalidSessionToken(ValueError):
    pass


def issue_token(user_id: int, ttl_seconds: Optional[int] = None, secret_key: Optional[str] = None) -> str:
    """Sign a session token for a user"""
    ttl = ttl_seconds if ttl_seconds is not None else ApplicationConfig.SESSION_TOKEN_TTL_SECONDS
    expires_at = datetime.now(timezone.utc) + timedelta(seconds=int(ttl))
    claims = {"sub": str(user_id), "exp": expires_at}
    return jwt.encode(claims, secret_key or ApplicationConfig.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str, secret_key: Optional[str] = None) -> int:
    """
    Validate a session token and return the user id it names

    Raises:
        InvalidSessionToken: If the token is malformed, expired, badly signed,
            or lacks the exp/sub claims
    """
    try:
        payload = jwt.decode(token, secret_key or ApplicationConfig.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        raise InvalidSessionToken(f"Invalid token: {e}") from e

    if payload.get("exp") is None:
        raise InvalidSessionToken("Token missing expiration")

    subject = payload.get("sub")
    if subject is None:
        raise InvalidSessionToken("Token missing user identifier")

    try:
        return int(subject)
    except (TypeError, ValueError) as e:
        raise InvalidSessionToken("Token subject is not a user id") from e
