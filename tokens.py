from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import BaseModel

from config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_DAYS
from errors import InvalidToken


class TokenClaim(BaseModel):
    user_id: int
    email: str
    issued_at: datetime
    expires_at: datetime


def issue(user_id: int, email: str, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode = {"sub": str(user_id), "email": email, "iat": now, "exp": expire}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify(token: str) -> TokenClaim:
    try:
        payload = jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidToken("Token has expired")
    except jwt.InvalidTokenError:
        raise InvalidToken("Could not validate token")

    email = payload.get("email")
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise InvalidToken("Malformed token subject")
    if not email:
        raise InvalidToken("Token carries no email")

    return TokenClaim(
        user_id=user_id,
        email=email,
        issued_at=datetime.fromtimestamp(payload["iat"], timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], timezone.utc),
    )
