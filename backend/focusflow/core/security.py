# backend/focusflow/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

from jose import JWTError, jwt

from focusflow.core.config import settings
from focusflow.core.errors import AuthError

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24  # 1 day


def create_access_token(
    subject: Union[str, Any],
    expires_delta: Optional[timedelta] = None,
    secret_key: Optional[str] = None,
) -> str:
    """
    Issue an access token for the given user id.
    The web app does this at login; tests and scripts use it directly.
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"exp": expire, "sub": str(subject), "type": "access"}
    return jwt.encode(to_encode, secret_key or settings.JWT_SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: Optional[str], secret_key: Optional[str] = None) -> str:
    """
    Validate an access token and return its user id (sub).
    Raises AuthError for missing, expired, malformed or non-access tokens.
    """
    if not token or not token.strip():
        raise AuthError("No access token configured")

    try:
        payload = jwt.decode(
            token.strip(),
            secret_key or settings.JWT_SECRET_KEY,
            algorithms=[ALGORITHM],
        )
    except JWTError as exc:
        raise AuthError(f"Could not validate credentials: {exc}") from exc

    if payload.get("type", "access") != "access":
        raise AuthError("Refresh tokens cannot open a session")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthError("Token has no subject")
    return str(user_id)
