from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, validator, Field
from config import Settings
from models.user import User
from repositories.base import FleetStore
from services.auth_service import AuthService
from utils.auth_dependency import get_current_user
from utils.dependencies import get_settings, get_store
import re

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

class LoginRequest(BaseModel):
    id: str = Field(..., min_length=1, max_length=50, description="Account id")
    key: str = Field(..., min_length=1, max_length=200, description="API key")

    @validator('id')
    def validate_id(cls, v):
        v = v.strip()
        if not re.match(r'^[A-Za-z0-9_\-\.]+$', v):
            raise ValueError('Invalid account id format')
        return v

class LoginResponse(BaseModel):
    message: str = "ok"
    id: str
    role: str
    access_token: str
    token_type: str = "bearer"
    expires_in: int

class UserResponse(BaseModel):
    id: str
    name: str
    role: str

@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    response: Response,
    store: FleetStore = Depends(get_store),
    settings: Settings = Depends(get_settings)
):
    """
    Check an account id and API key. On success the session token is set as
    an HttpOnly cookie and also returned in the body for API clients.
    """
    user = AuthService.authenticate_user(store, request.id, request.key)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    token = AuthService.generate_token(user, expire_minutes=settings.session_expire_minutes)
    max_age = settings.session_expire_minutes * 60
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=max_age,
        path="/",
        httponly=True,
        samesite="strict"
    )
    return LoginResponse(id=user.id, role=user.role.value, access_token=token, expires_in=max_age)

@router.post("/logout")
def logout(response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(key=settings.cookie_name, path="/")
    return {"message": "Logged out"}

@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    return UserResponse(id=current_user.id, name=current_user.name, role=current_user.role.value)
