from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from fechou.models.enums.user_plan import UserPlan, SubscriptionStatus

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class UserProfileOut(BaseModel):
    id: int
    email: EmailStr
    first_name: Optional[str]
    last_name: Optional[str]
    profile_image_url: Optional[str]
    cpf_cnpj: Optional[str]
    profession: Optional[str]
    business_name: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    cep: Optional[str]
    numero: Optional[str]
    complemento: Optional[str]
    cidade: Optional[str]
    estado: Optional[str]
    logo_url: Optional[str]
    pix_key: Optional[str]

    plan: UserPlan
    plan_expires_at: Optional[datetime]
    quotes_limit: int
    quotes_used_this_month: int
    bonus_quotes: int
    payment_status: SubscriptionStatus
    payment_method: Optional[str]

    referral_code: Optional[str]
    referral_count: int

    whatsapp_notifications: bool
    email_notifications: bool
    primary_color: str
    secondary_color: str

    is_admin: bool
    last_login_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    profile_image_url: Optional[str] = None
    cpf_cnpj: Optional[str] = Field(None, max_length=20)
    profession: Optional[str] = Field(None, max_length=100)
    business_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None
    cep: Optional[str] = Field(None, max_length=10)
    numero: Optional[str] = Field(None, max_length=20)
    complemento: Optional[str] = Field(None, max_length=100)
    cidade: Optional[str] = Field(None, max_length=100)
    estado: Optional[str] = Field(None, min_length=2, max_length=2)
    pix_key: Optional[str] = Field(None, max_length=255)
    whatsapp_notifications: Optional[bool] = None
    email_notifications: Optional[bool] = None


class BrandingUpdate(BaseModel):
    primary_color: Optional[str] = Field(None, pattern=HEX_COLOR)
    secondary_color: Optional[str] = Field(None, pattern=HEX_COLOR)
    logo_url: Optional[str] = None


class PlanLimitsOut(BaseModel):
    plan: UserPlan
    is_premium: bool
    is_expired: bool
    monthly_quote_limit: int
    bonus_quotes: int
    quotes_used: int
    quotes_remaining: int
    can_create_quote: bool
    plan_expires_at: Optional[datetime]


class PublicProfileOut(BaseModel):
    id: int
    first_name: Optional[str]
    last_name: Optional[str]
    business_name: Optional[str]
    profession: Optional[str]
    phone: Optional[str]
    email: EmailStr
    pix_key: Optional[str]
    cidade: Optional[str]
    estado: Optional[str]
    logo_url: Optional[str]
    primary_color: str
    secondary_color: str

    class Config:
        from_attributes = True
