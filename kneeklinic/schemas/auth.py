"""
kneeklinic/schemas/auth.py

Purpose: Auth request/response schemas

- Login, signup, OTP and password reset payloads
- User profile as returned by the backend
"""

from datetime import datetime
from pydantic import Field
from typing import Optional, Literal

from kneeklinic.schemas.response import ApiModel

UserType = Literal["patient", "doctor"]


class User(ApiModel):
    """Logged-in user profile."""

    id: str = Field(..., alias="_id")
    email: str
    first_name: str
    last_name: str
    user_type: UserType = "patient"
    profile_image_url: Optional[str] = None
    is_email_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class LoginCredentials(ApiModel):
    email: str
    password: str


class SignupData(ApiModel):
    """Signup form; the backend answers by emailing an OTP."""

    email: str
    password: str
    confirm_password: str
    first_name: str
    last_name: str
    user_type: Literal["patient"] = "patient"


class OTPVerification(ApiModel):
    email: str
    otp: str


class ResetPasswordRequest(ApiModel):
    email: str
    otp: str
    new_password: str


class ChangePasswordRequest(ApiModel):
    current_password: str
    new_password: str


class AuthResponse(ApiModel):
    """Returned by login and OTP verification."""

    user: User
    token: str
    authenticated: bool = True
    message: Optional[str] = None


class CurrentUserResponse(ApiModel):
    user: Optional[User] = None
    authenticated: bool = False
    has_completed_registration: bool = False


class ProfileResponse(ApiModel):
    """Returned by profile update and picture deletion."""

    user: Optional[User] = None
    message: Optional[str] = None
