# storefront/auth/service.py
#
# Login, signup and token issuing live with the auth provider. This module only
# verifies the bearer tokens it hands out and exposes the caller's identity.

from datetime import timedelta, datetime, timezone
from typing import Annotated, Optional
from uuid import uuid4
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
import jwt
from jwt import PyJWTError
import logging

from . import models
from ..core.config import settings
from ..core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

SECRET_KEY = settings.ENCODING_SECRET_KEY
ALGORITHM = settings.ENCODING_ALGORITHM

oauth2_bearer = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def create_access_token(user_id: str, role: str = "user", expires_delta: Optional[timedelta] = None) -> str:
    """Issue an access token in the provider's format (local tooling and tests)."""
    expires = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    encode = {
        "id": str(user_id),
        "role": role,
        "scope": "access_token",
        "jti": str(uuid4()),
        "exp": expires,
    }
    return jwt.encode(encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: Optional[str]) -> models.TokenData:
    """Decodes and verifies an access token."""
    if not token:
        raise AuthenticationError(message="Not authenticated")
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except PyJWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise AuthenticationError(message="Invalid token")

    # Check token scope
    if payload.get('scope') != 'access_token':
        raise AuthenticationError(message="Invalid token scope")

    # Check user ID
    user_id = payload.get('id')
    if not user_id:
        raise AuthenticationError(message="User ID not found in token.")

    return models.TokenData(user_id=str(user_id), role=payload.get('role') or "user")


def get_current_user(token: Annotated[Optional[str], Depends(oauth2_bearer)]) -> models.TokenData:
    """FastAPI dependency to get the current user from a token."""
    return verify_token(token)


def get_current_admin(current_user: Annotated[models.TokenData, Depends(get_current_user)]) -> models.TokenData:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


CurrentUser = Annotated[models.TokenData, Depends(get_current_user)]
CurrentAdmin = Annotated[models.TokenData, Depends(get_current_admin)]
