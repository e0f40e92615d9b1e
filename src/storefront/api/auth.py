"""Bearer-token dependencies for the API routers."""

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.identity.tokens import InvalidToken, decode_access_token
from storefront.utils.logging import bind_request_context

security = HTTPBearer(auto_error=False)


async def current_user(credentials: HTTPAuthorizationCredentials | None = Depends(security)) -> dict:
    """Claims of the caller's access token: `id`, `email`, `is_admin`."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        claims = decode_access_token(credentials.credentials)
    except InvalidToken as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    bind_request_context(user_id=claims["id"])
    return claims


async def require_admin(user: dict = Depends(current_user)) -> dict:
    if not user.get("is_admin"):
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
