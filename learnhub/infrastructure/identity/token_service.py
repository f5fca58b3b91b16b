"""Access token verification."""

from datetime import UTC, datetime, timedelta

import jwt
from jwt import InvalidTokenError

from learnhub.config import get_settings

ALGORITHM = "HS256"


def create_access_token(user_id: int, expires_in: timedelta = timedelta(minutes=15)) -> str:
    """Create an access token for a user."""
    expire = datetime.now(UTC) + expires_in
    to_encode = {"sub": str(user_id), "exp": expire, "type": "access"}
    return jwt.encode(to_encode, get_settings().SECRET_KEY, algorithm=ALGORITHM)


def verify_access_token(token: str) -> int | None:
    """Verify an access token and return the user_id if valid."""
    try:
        payload = jwt.decode(token, get_settings().SECRET_KEY, algorithms=[ALGORITHM])
        # Refresh tokens are not accepted as access tokens
        if payload.get("type") == "refresh":
            return None
        user_id = payload.get("sub")
        if user_id is None:
            return None
        return int(user_id)
    except (InvalidTokenError, ValueError):
        return None
