from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from auth.utils import decode_access_token

# auto_error=False: a missing header is answered with our own 401
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> dict:
    """
    Dependency to get current authenticated user from JWT token

    Usage in route:
        @router.post("/jobs")
        async def create(current_user: dict = Depends(get_current_user)):
            ...

    Args:
        credentials: HTTP Bearer token from Authorization header

    Returns:
        dict: {"username": str, "is_admin": bool} from the JWT token

    Raises:
        HTTPException: If token is missing or invalid
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Decode and verify the JWT token
    payload = decode_access_token(credentials.credentials)

    username = payload.get("username")
    if username is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {
        "username": username,
        "is_admin": payload.get("isAdmin") is True,
    }


async def ensure_admin(current_user: dict = Depends(get_current_user)) -> dict:
    """
    Dependency for write endpoints: the token must carry isAdmin=true.

    Raises:
        HTTPException: 401 if the user is not an admin
    """
    if not current_user["is_admin"]:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return current_user
