from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from uuid import uuid4
from datetime import datetime, timezone

from app.models.common import TrimmedStr


class UserPreferences(BaseModel):
    currency: str = "USD"
    theme: str = "light"
    notifications: bool = True
    weekly_report: bool = False
    monthly_report: bool = True


class UserCreate(BaseModel):
    name: TrimmedStr = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserInDB(BaseModel):
    user_id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    email: EmailStr
    password_hash: str
    created_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    preferences: UserPreferences = Field(default_factory=UserPreferences)


class UserPublic(BaseModel):
    user_id: str
    name: str
    email: EmailStr
    created_at: str
    preferences: UserPreferences = Field(default_factory=UserPreferences)


class ProfileUpdate(BaseModel):
    name: TrimmedStr = Field(min_length=1)
    email: EmailStr


class PreferencesUpdate(BaseModel):
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    theme: Optional[str] = None
    notifications: Optional[bool] = None
    weekly_report: Optional[bool] = None
    monthly_report: Optional[bool] = None


class PasswordChange(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class PasswordReset(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=6)
