from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, field_validator

from pharmadash.core.exceptions import AuthError


class UserCreate(BaseModel):
    email: EmailStr
    password: str

    @field_validator('password')
    @classmethod
    def password_min_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError('Password must be at least 6 characters')
        return v


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class PublicIdentity(BaseModel):
    """What the dashboard knows about the signed-in user. Never carries the hash."""
    id: int
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AuthResult(BaseModel):
    success: bool
    error: Optional[str] = None
    user: Optional[PublicIdentity] = None
    status_code: int = 200

    @classmethod
    def ok(cls, user: Optional[PublicIdentity] = None) -> "AuthResult":
        return cls(success=True, user=user)

    @classmethod
    def failed(cls, err: AuthError) -> "AuthResult":
        return cls(success=False, error=err.message, status_code=err.status_code)


class LoginResponse(AuthResult):
    """AuthResult plus the session token (also set as an httpOnly cookie)."""
    access_token: Optional[str] = None
    token_type: str = "bearer"
