import logging
import threading
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import get_settings
from .exceptions import InvalidCredentialsException

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt"""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against its bcrypt hash"""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT carrying ``data`` plus expiry and token id claims"""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_access_token(token: str) -> Dict[str, Any]:
    """Validated claims of a token; ``sub`` is returned as an int user id"""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise InvalidCredentialsException("Token expired")
    except jwt.InvalidTokenError:
        raise InvalidCredentialsException("Could not validate credentials")

    try:
        payload["sub"] = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise InvalidCredentialsException("Could not validate credentials")
    return payload

def get_token_claims(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Dict[str, Any]:
    """FastAPI dependency resolving the bearer token to its claims"""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return decode_access_token(credentials.credentials)
    except InvalidCredentialsException as e:
        logger.info(f"Rejected bearer token: {e.message}")
        raise HTTPException(
            status_code=e.status_code,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

class TokenDenylist:
    """Ids of tokens revoked by logout, each kept until its own expiry"""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._revoked: Dict[str, float] = {}
        self._clock = clock
        self._lock = threading.Lock()

    def revoke(self, jti: Optional[str], expires_at: float) -> None:
        if not jti:
            return
        with self._lock:
            now = self._clock()
            self._revoked = {key: exp for key, exp in self._revoked.items() if exp > now}
            self._revoked[jti] = expires_at

    def is_revoked(self, jti: Optional[str]) -> bool:
        if not jti:
            return False
        with self._lock:
            return jti in self._revoked
