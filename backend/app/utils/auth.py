from datetime import datetime, timedelta, timezone
from typing import Sequence

import bcrypt
import jwt
from jwt import InvalidTokenError

BCRYPT_ROUNDS = 10
BCRYPT_MAX_BYTES = 72
DEFAULT_TOKEN_LIFETIME = timedelta(days=7)


def hash_password(password: str) -> str:
    raw = password.encode()
    if len(raw) > BCRYPT_MAX_BYTES:
        raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    raw = password.encode()
    if len(raw) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, password_hash.encode())
    except ValueError:  # malformed stored hash
        return False


def create_access_token(
    *,
    user_id: int,
    secret: str,
    role: str | None = None,
    algorithm: str = "HS256",
    expires_delta: timedelta | None = None,
) -> str:
    """Signed bearer token. `role` is informational; authorization reads the role from the users table."""
    issued_at = datetime.now(timezone.utc)
    claims: dict[str, object] = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + (expires_delta or DEFAULT_TOKEN_LIFETIME),
    }
    if role is not None:
        claims["role"] = role
    return jwt.encode(claims, secret, algorithm=algorithm)


def decode_access_token(token: str, *, secret: str, algorithms: Sequence[str]) -> int:
    """Return the user id carried by a valid token; ValueError for anything else."""
    try:
        claims = jwt.decode(token, secret, algorithms=list(algorithms), options={"require": ["exp", "sub"]})
    except InvalidTokenError as exc:
        raise ValueError("invalid token") from exc

    subject = str(claims["sub"])
    if not subject.isdigit():
        raise ValueError("token subject is not a user id")
    return int(subject)
