"""
Authentication Utility - JWT verification for protected routes.

Tokens are issued by the platform's auth service; this service only verifies
them. Expected claims:
- sub:    user id
- role:   "employer" | "student" | "university"
- org_id: employer's organization (company) id
"""

from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from hireboard.core.config import get_settings

settings = get_settings()

# Bearer token extractor
bearer_scheme = HTTPBearer()


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> dict:
    """
    FastAPI dependency - Get current authenticated user from the token.

    Usage:
        @app.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception

    return {"user_id": user_id, "role": payload.get("role"), "org_id": payload.get("org_id")}


async def get_current_employer(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require employer role and an organization."""
    if user["role"] != "employer":
        raise HTTPException(status_code=403, detail="Employers only")

    try:
        user["org_id"] = int(user["org_id"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=403, detail="Token carries no organization")

    return user
