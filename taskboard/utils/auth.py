import logging
from datetime import datetime, timedelta, UTC
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from taskboard import config
from taskboard.database import get_db
from taskboard.models.user import User
from taskboard.schemas.user import PASSWORD_MAX_BYTES

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str):
    """Hash a password after validating bcrypt's 72-byte limit.

    Raises ValueError if the UTF-8 encoding of the password exceeds 72 bytes.
    """
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
    return pwd_context.hash(password)


def verify_password(plain, hashed):
    """Verify a plaintext password against a hash.

    If verification raises a ValueError (for example plain >72 bytes), return False
    to allow the caller to respond with an authentication failure instead of an error.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def create_token(data: dict):
    data = data.copy()
    # read expiry at call-time so tests (and runtime overrides) that modify
    # taskboard.config.ACCESS_TOKEN_EXPIRE_MINUTES take effect immediately
    expire = datetime.now(UTC) + timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    data.update({"exp": int(expire.timestamp())})  # RFC 7519 NumericDate is a Unix timestamp
    return jwt.encode(data, config.SECRET_KEY, algorithm=config.ALGORITHM)


def create_user_token(user: User) -> str:
    return create_token({"sub": str(user.id)})


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an `Authorization: Bearer <token>` header."""
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return None


def get_current_user(authorization: Optional[str] = Header(None), db: Session = Depends(get_db)) -> User:
    tok = _extract_token(authorization)
    if not tok:
        raise _unauthorized("Not authenticated")
    try:
        # jwt.decode validates exp automatically
        payload = jwt.decode(tok, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except ExpiredSignatureError:
        logger.warning("Rejected expired token")
        raise _unauthorized("Token has expired")
    except JWTError:
        logger.warning("Rejected invalid token")
        raise _unauthorized("Invalid token")

    sub = payload.get("sub")
    if not sub or not str(sub).isdigit():
        raise _unauthorized("Invalid token: missing user")
    user = db.get(User, int(sub))
    if user is None:
        raise _unauthorized("Invalid token: unknown user")
    return user
