from pydantic import BaseModel, EmailStr, Field
from typing import Optional, Literal

from fechou.schemas.users.user_schemas import UserProfileOut


class RegisterRequest(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=128)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    referral_code: Optional[str] = Field(None, max_length=20)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str]
    token_type: Literal["bearer"] = "bearer"


class AuthOut(BaseModel):
    auth: Optional[TokenResponse] = None
    user: UserProfileOut
