"""
Pydantic schemas for authentication requests and responses.
Handles login, token refresh, and current-user data.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import List
from xpatly.models.user import UserRole, UserType, STAFF_ROLES
from xpatly.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr = Field(..., description="User's email address", examples=["anna@example.com"])
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class RefreshTokenRequest(BaseModel):
    """Refresh token request schema."""

    refresh_token: str = Field(..., description="Valid refresh token")


class AccessTokenResponse(BaseModel):
    """Access token response schema."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration time in seconds", examples=[1800])


class CurrentUserResponse(UserResponse):
    """Current user response with the actions the dashboard may offer."""

    permissions: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def set_permissions(self):
        """Derive permissions from role, user type and ban status."""
        if self.is_banned:
            self.permissions = []
            return self

        permissions = ["search_listings", "manage_saved_searches"]
        if self.user_type in (UserType.LANDLORD, UserType.BOTH) or self.role != UserRole.USER:
            permissions += ["create_listing", "archive_own_listing"]
        if self.role in STAFF_ROLES:
            permissions += ["moderate_listings", "manage_users"]
        if self.role == UserRole.SUPER_ADMIN:
            permissions.append("assign_staff_roles")
        self.permissions = permissions
        return self


class LoginResponse(BaseModel):
    """Complete login response schema."""

    user: CurrentUserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class RegisterResponse(BaseModel):
    user: UserResponse
    message: str = "Registration successful"
