"""
Security helpers for password hashing and token authentication.

Passwords are hashed with ``bcrypt``.  Access tokens are JSON Web
Tokens signed with ``PyJWT`` (HS256 by default) and carry the claims
``{"user": {"id": ..., "isAdmin": ...}}`` plus ``iat``/``exp``.
Clients send the token in the ``x-auth-token`` header.

The FastAPI dependencies at the bottom of the module resolve the
caller from that header.  The token only proves identity: the user
record is reloaded on every request, so bans and promotions take
effect without waiting for the token to expire.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from .config import Settings

logger = logging.getLogger(__name__)

AUTH_HEADER = "x-auth-token"


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a password with a fresh bcrypt salt of the given cost."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Check a plain password against a stored bcrypt hash.

    Malformed or missing hashes never match.
    """
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(
    user_id: int,
    is_admin: bool,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a token identifying ``user_id``.

    Parameters
    ----------
    user_id : int
        Identifier of the authenticated user.
    is_admin : bool
        Admin flag at issue time.  Informational for clients; the
        server always re-reads the flag from the store.
    settings : Settings
        Supplies the secret, the algorithm and the default lifetime.
    expires_delta : Optional[timedelta]
        Overrides ``settings.access_token_expire_minutes``.
    """
    now = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    payload: Dict[str, Any] = {
        "user": {"id": user_id, "isAdmin": bool(is_admin)},
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Settings) -> Optional[Dict[str, Any]]:
    """Verify signature and expiry; return the payload or ``None``."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        return None
    except jwt.InvalidTokenError as e:
        logger.info("Rejected invalid token: %s", e)
        return None
    user = payload.get("user")
    if not isinstance(user, dict) or not isinstance(user.get("id"), int):
        return None
    return payload


token_header = APIKeyHeader(name=AUTH_HEADER, auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def get_current_user(
    request: Request,
    token: Optional[str] = Depends(token_header),
) -> Dict[str, Any]:
    """Dependency that resolves the authenticated caller.

    Raises 401 when the header is missing, the token is invalid or
    expired, or the user no longer exists, and 403 when the account
    is banned.  Returns ``{"user_id", "username", "is_admin"}``.
    """
    if not token:
        raise _unauthorized("No token, authorization denied")
    settings: Settings = request.app.state.settings
    payload = decode_access_token(token, settings)
    if payload is None:
        raise _unauthorized("Token is not valid")

    user_id = payload["user"]["id"]
    with request.app.state.db.cursor() as cursor:
        row = cursor.execute(
            "SELECT id, username, is_admin, is_banned FROM users WHERE id = ?",
            (user_id,),
        ).fetchone()
    if not row:
        raise _unauthorized("Token is not valid")
    if row["is_banned"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your account has been banned.",
        )
    return {
        "user_id": row["id"],
        "username": row["username"],
        "is_admin": bool(row["is_admin"]),
    }


def require_admin(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    """Dependency that only lets administrators through (403 otherwise)."""
    if not current_user.get("is_admin"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: Not an administrator.",
        )
    return current_user
