"""
JWT Authentication Module

This module provides bearer-token validation for the lesson APIs.
Supports:
- HS256 tokens signed with the service signing key
- Token expiration validation
- Claims extraction (user id, email, role)
- Role checks (user, admin, instructor)

Usage:
    from shared.auth import verify_token, extract_user_info

    claims = verify_token(token)
    user = extract_user_info(claims)
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, Optional
from functools import lru_cache
import logging

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from fastapi import HTTPException, status
from pydantic import ConfigDict
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


VALID_ROLES = ("user", "admin", "instructor")


class AuthConfig(BaseSettings):
    """Token configuration, loaded from the environment or .env"""
    TOKEN_SIGNING_KEY: Optional[str] = None
    TOKEN_ALGORITHM: str = "HS256"
    TOKEN_EXPIRE_MINUTES: int = 60 * 24

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


@lru_cache()
def get_auth_config() -> AuthConfig:
    """
    Get token configuration. Cached for performance.

    Raises:
        RuntimeError: If TOKEN_SIGNING_KEY is not configured
    """
    config = AuthConfig()
    if not config.TOKEN_SIGNING_KEY:
        raise RuntimeError("Missing required environment variable: TOKEN_SIGNING_KEY")
    return config


def create_access_token(
    user_id: str,
    role_name: str,
    email: Optional[str] = None,
    expires_minutes: Optional[int] = None,
    config: Optional[AuthConfig] = None,
) -> str:
    """
    Issue a signed token carrying {id, email, roleName}.

    Used by seed scripts and tests; the login flow lives elsewhere.
    """
    config = config or get_auth_config()
    now = datetime.now(timezone.utc)
    lifetime = expires_minutes if expires_minutes is not None else config.TOKEN_EXPIRE_MINUTES
    payload = {
        "id": user_id,
        "sub": user_id,
        "email": email,
        "roleName": role_name,
        "iat": now,
        "exp": now + timedelta(minutes=lifetime),
    }
    return jwt.encode(payload, config.TOKEN_SIGNING_KEY, algorithm=config.TOKEN_ALGORITHM)


def verify_token(token: str, config: Optional[AuthConfig] = None) -> Dict:
    """
    Verify and decode a bearer token.

    Args:
        token: JWT token string
        config: Token configuration (defaults to get_auth_config())

    Returns:
        dict: Decoded token claims

    Raises:
        HTTPException 401: If token is invalid or expired
    """
    config = config or get_auth_config()

    try:
        payload = jwt.decode(
            token,
            config.TOKEN_SIGNING_KEY,
            algorithms=[config.TOKEN_ALGORITHM],
            options={"verify_exp": True, "require": ["exp"]},
        )
    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or Expired Token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or Expired Token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not (payload.get("id") or payload.get("sub")):
        logger.warning("Token without user id claim")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or Expired Token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload


def extract_user_info(claims: Dict) -> Dict:
    """
    Extract common user information from token claims.

    Returns:
        dict: {user_id, email, role_name}
    """
    return {
        "user_id": str(claims.get("id") or claims.get("sub")),
        "email": claims.get("email"),
        "role_name": claims.get("roleName") or claims.get("role_name"),
    }


def check_user_role(user: Dict, allowed_roles: Iterable[str]) -> bool:
    """True if the user's role is one of allowed_roles."""
    return user.get("role_name") in set(allowed_roles)


def require_role(user: Dict, required_role: str) -> None:
    """
    Require user to have a specific role.

    Raises:
        HTTPException 403: If the user has a different role
    """
    if not check_user_role(user, [required_role]):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"{required_role.capitalize()} access only",
        )
