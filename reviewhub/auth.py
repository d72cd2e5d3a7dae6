import time
from typing import NamedTuple, Optional

import jwt
from fastapi import Depends, Header
from passlib.context import CryptContext

from .config import settings
from .errors import Forbidden, Unauthenticated

# Use pbkdf2_sha256 as default to avoid bcrypt 72-byte limitation in some envs
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")

ALGORITHM = "HS256"


class TokenClaims(NamedTuple):
    user_id: int
    is_admin: bool


def create_access_token(user_id: int, is_admin: bool, expires_delta: Optional[int] = None) -> str:
    now = int(time.time())
    exp = now + (settings.token_ttl_seconds if expires_delta is None else expires_delta)
    payload = {"sub": str(user_id), "is_admin": bool(is_admin), "iat": now, "exp": exp}
    return jwt.encode(payload, settings.jwt_secret, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Raises ``jwt.PyJWTError`` on a bad signature, malformed token or expiry."""
    return jwt.decode(token, settings.jwt_secret, algorithms=[ALGORITHM], options={"require": ["sub", "exp"]})


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


# -------------------- Request guards --------------------

def require_token(authorization: str | None = Header(default=None)) -> TokenClaims:
    """Verify the bearer token; claims are trusted until the token expires."""
    if not authorization:
        raise Unauthenticated("token required")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Forbidden("invalid token")
    try:
        payload = decode_access_token(token.strip())
        return TokenClaims(user_id=int(payload["sub"]), is_admin=bool(payload.get("is_admin", False)))
    except (jwt.PyJWTError, ValueError):
        raise Forbidden("invalid token")


def require_admin(claims: TokenClaims = Depends(require_token)) -> TokenClaims:
    if not claims.is_admin:
        raise Forbidden("admin access required")
    return claims
