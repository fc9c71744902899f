"""
Identity token utilities

The identity provider signs a JWT carrying the principal's email, display name
and picture. These helpers verify such tokens, and mint them for local
development and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from jose import JWTError, jwt
from pydantic import BaseModel, EmailStr, ValidationError as SchemaError

from careshift.core.config import get_settings


class Principal(BaseModel):
    """Authenticated identity supplied by the identity provider"""
    sub: Optional[str] = None
    email: EmailStr
    name: Optional[str] = None
    picture: Optional[str] = None


def create_identity_token(
    email: str,
    name: Optional[str] = None,
    picture: Optional[str] = None,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed identity token with profile claims"""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": email,
        "email": email,
        "name": name,
        "picture": picture,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_identity_token(token: str) -> Optional[Dict]:
    """Decode and validate an identity token, None when invalid or expired"""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def verify_identity_token(token: str) -> Optional[Principal]:
    """Verify token and return the principal if valid"""
    payload = decode_identity_token(token)
    if payload is None or not payload.get("email"):
        return None

    try:
        return Principal(
            sub=payload.get("sub"),
            email=payload["email"],
            name=payload.get("name"),
            picture=payload.get("picture"),
        )
    except SchemaError:
        return None
