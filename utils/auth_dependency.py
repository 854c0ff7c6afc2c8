from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from config import Settings
from models.user import User
from repositories.base import FleetStore
from utils.dependencies import get_settings, get_store
from utils.security import decode_session_token

security = HTTPBearer(auto_error=False)

def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    store: FleetStore = Depends(get_store),
    settings: Settings = Depends(get_settings)
) -> User:
    # Dashboards send the session cookie, scripts send a bearer token
    token = credentials.credentials if credentials else request.cookies.get(settings.cookie_name)
    if not token:
        raise _unauthorized("Not authenticated")

    payload = decode_session_token(token)
    if payload is None:
        raise _unauthorized()

    user_id = payload.get("sub")
    if user_id is None or not isinstance(user_id, str):
        raise _unauthorized()

    user = store.get_user(user_id)
    if user is None or not user.is_active:
        raise _unauthorized("User not found")

    return user
