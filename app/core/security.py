# app/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import ALGORITHM, get_jwt_secret_key

# ─── JWT EXPIRATION CONSTS ────────────────────────────────────────────────────
ACCESS_TOKEN_EXPIRE_MINUTES = 30

bearer_scheme = HTTPBearer()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token with expiration and a 'type' claim.
    Tokens are normally issued by the auth service; this mirrors its format.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({
        "exp": expire,
        "type": "access"
    })
    return jwt.encode(to_encode, get_jwt_secret_key(), algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate a JWT, enforcing algorithm lockdown."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, get_jwt_secret_key(), algorithms=[ALGORITHM])
    except JWTError:
        raise credentials_exception
    return payload


def get_access_token(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)
) -> str:
    """FastAPI dependency: the raw Bearer token, forwarded to the profile API."""
    return credentials.credentials


def get_current_user_email(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)
) -> str:
    """FastAPI dependency: return the `email` claim from a Bearer token."""
    token = credentials.credentials
    payload = decode_token(token)
    email = payload.get("email")
    if not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )
    return email
