"""
Pydantic schemas for user registration and user responses.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime
from xpatly.models.user import UserRole, UserType
from xpatly.utils.validators import ValidationUtils


class UserCreate(BaseModel):
    """Registration request."""

    email: EmailStr = Field(..., examples=["anna@example.com"])
    password: str = Field(..., max_length=128, description="8+ chars with upper, lower and a digit")
    full_name: Optional[str] = Field(None, min_length=2, max_length=255)
    phone: Optional[str] = None
    user_type: UserType = UserType.TENANT
    preferred_language: str = Field("en", pattern=r"^(en|et|ru)$")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return ValidationUtils.validate_password_strength(v)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v):
        if v is None:
            return v
        return ValidationUtils.clean_required_text(v, "Full name")

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return ValidationUtils.validate_phone_number(v)


class UserResponse(BaseModel):
    """User response schema (excluding sensitive data)."""

    id: str
    email: EmailStr
    full_name: Optional[str] = None
    phone: Optional[str] = None
    preferred_language: str
    role: UserRole
    user_type: UserType
    is_verified: bool
    is_approved: bool
    is_banned: bool
    created_at: datetime
    updated_at: datetime


class AdminUserResponse(UserResponse):
    """User row on the admin user management page."""

    listing_count: int = 0


class AdminUserListResponse(BaseModel):
    users: List[AdminUserResponse]
    count: int
