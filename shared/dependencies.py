"""
FastAPI Authentication Dependencies

Provides reusable dependencies for authentication and role checks.
"""

from typing import Optional, List

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .auth import (
    verify_token,
    extract_user_info,
    check_user_role,
)

# Security scheme for Swagger UI. Missing credentials are reported by
# get_token so the status is always 401.
security = HTTPBearer(
    scheme_name="JWT Bearer Token",
    description="Enter your access token",
    auto_error=False,
)


async def get_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    Extract JWT token from Authorization header.

    Raises:
        HTTPException 401: If the header is missing or not a Bearer token
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication Token Required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


async def get_current_user(
    token: str = Depends(get_token),
) -> dict:
    """
    Get current authenticated user from the bearer token.

    Returns:
        dict: {user_id, email, role_name}

    Example:
        @app.get("/api/users/me")
        async def get_me(user: dict = Depends(get_current_user)):
            return {"user_id": user["user_id"]}
    """
    claims = verify_token(token)
    return extract_user_info(claims)


def require_roles(allowed_roles: List[str]):
    """
    Dependency factory: the user must have one of allowed_roles.

    Example:
        @app.post("/api/v1/lessons")
        async def create_lesson(admin: dict = Depends(require_roles(["admin"]))):
            ...
    """
    async def dependency(
        user: dict = Depends(get_current_user),
    ) -> dict:
        if not check_user_role(user, allowed_roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access restricted to: {', '.join(allowed_roles)}",
            )
        return user

    return dependency


def block_roles(blocked_roles: List[str]):
    """
    Dependency factory: any authenticated user except blocked_roles.

    Example:
        # Learners and instructors, but not admins
        @app.get("/api/v1/lessons")
        async def list_lessons(user: dict = Depends(block_roles(["admin"]))):
            ...
    """
    async def dependency(
        user: dict = Depends(get_current_user),
    ) -> dict:
        if check_user_role(user, blocked_roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied for {user.get('role_name')} users",
            )
        return user

    return dependency


def require_admin():
    """Convenience dependency to require the admin role."""
    return require_roles(["admin"])


def require_learner():
    """Convenience dependency for learner-only features (admins blocked)."""
    return require_roles(["user"])
