"""
kneeklinic/services/auth_service.py

Purpose: Auth endpoints

- Login and signup (signup emails an OTP)
- OTP verification and resend
- Forgot / reset password
- Profile update, picture deletion, password change
- Logout
"""

from pathlib import Path
from typing import Dict, Optional

from kneeklinic.core.errors import parse_response
from kneeklinic.core.exceptions import KneeKlinicError
from kneeklinic.core.logging import get_logger, LogContext
from kneeklinic.schemas.auth import (
    LoginCredentials,
    SignupData,
    OTPVerification,
    ResetPasswordRequest,
    ChangePasswordRequest,
    AuthResponse,
    CurrentUserResponse,
    ProfileResponse,
)
from kneeklinic.schemas.response import ApiResponse
from kneeklinic.services.api_client import ApiClient
from kneeklinic.utils.constants import PROFILE_PICTURE_FIELD
from kneeklinic.utils.validation_utils import normalize_email, guess_image_content_type

logger = get_logger(__name__)


class AuthService:
    """Service for the /auth endpoints."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def login(self, credentials: LoginCredentials) -> AuthResponse:
        """
        Signs a patient in.

        Returns:
            AuthResponse with the user and bearer token
        """
        with LogContext(email=credentials.email):
            logger.info("Login attempt")
            data = await self.client.post("auth/login", json=credentials.to_payload())
            response = parse_response(AuthResponse, data)
            logger.info("Login successful", extra={"user_id": response.user.id})
            return response

    async def signup(self, data: SignupData) -> ApiResponse:
        """
        Step 1 of signup: the backend stores the pending account and emails an OTP.
        """
        with LogContext(email=data.email):
            logger.info("Signup attempt")
            result = await self.client.post("auth/signup", json=data.to_payload())
            logger.info("OTP sent")
            return parse_response(ApiResponse, result)

    async def verify_otp(self, data: OTPVerification) -> AuthResponse:
        """
        Step 2 of signup: confirms the emailed code and returns a session.
        """
        result = await self.client.post("auth/verify-otp", json=data.to_payload())
        return parse_response(AuthResponse, result)

    async def resend_otp(self, email: str) -> ApiResponse:
        result = await self.client.post("auth/resend-otp", json={"email": email})
        return parse_response(ApiResponse, result)

    async def forgot_password(self, email: str) -> ApiResponse:
        """Emails a password reset code."""
        result = await self.client.post("auth/forgot-password", json={"email": normalize_email(email)})
        return parse_response(ApiResponse, result)

    async def verify_reset_otp(self, email: str, otp: str) -> ApiResponse:
        result = await self.client.post(
            "auth/verify-reset-otp",
            json={"email": normalize_email(email), "otp": otp}
        )
        return parse_response(ApiResponse, result)

    async def reset_password(self, email: str, otp: str, new_password: str) -> ApiResponse:
        payload = ResetPasswordRequest(email=normalize_email(email), otp=otp, new_password=new_password)
        result = await self.client.post("auth/reset-password", json=payload.to_payload())
        return parse_response(ApiResponse, result)

    async def get_current_user(self) -> CurrentUserResponse:
        result = await self.client.get("auth/user")
        return parse_response(CurrentUserResponse, result)

    async def update_profile(
        self,
        first_name: str,
        last_name: str,
        email: str,
        picture: Optional[Path] = None
    ) -> ProfileResponse:
        """
        Updates profile fields, optionally with a new profile picture.
        Multipart when a picture is attached, form-encoded otherwise.
        """
        fields: Dict[str, str] = {
            "firstName": first_name.strip(),
            "lastName": last_name.strip(),
            "email": email.strip(),
        }
        files = None
        if picture is not None:
            picture = Path(picture)
            files = {
                PROFILE_PICTURE_FIELD: (
                    picture.name,
                    picture.read_bytes(),
                    guess_image_content_type(picture.name),
                )
            }

        result = await self.client.put("auth/update-profile", data=fields, files=files)
        return parse_response(ProfileResponse, result)

    async def change_password(self, current_password: str, new_password: str) -> ApiResponse:
        payload = ChangePasswordRequest(current_password=current_password, new_password=new_password)
        result = await self.client.put("auth/change-password", json=payload.to_payload())
        return parse_response(ApiResponse, result)

    async def delete_profile_picture(self) -> ProfileResponse:
        result = await self.client.delete("auth/delete-profile-picture")
        return parse_response(ProfileResponse, result)

    async def logout(self) -> None:
        """
        Tells the backend the session is over.
        Failures are logged and ignored; local state is cleared by the caller regardless.
        """
        try:
            await self.client.post("auth/logout")
        except KneeKlinicError as e:
            logger.error(f"Logout API error: {e.message}")
