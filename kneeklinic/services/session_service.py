"""
kneeklinic/services/session_service.py

Purpose: Logged-in session management

- Holds the current user and bearer token
- Persists both to local storage and restores them on startup
- Login, OTP verification, logout
- Profile changes keep the cached user in sync
- Resets itself when the backend answers 401
"""

from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from kneeklinic.core.exceptions import KneeKlinicError, ValidationError
from kneeklinic.core.logging import get_logger, LogContext
from kneeklinic.schemas.auth import (
    AuthResponse,
    LoginCredentials,
    OTPVerification,
    SignupData,
    User,
)
from kneeklinic.schemas.response import ApiResponse
from kneeklinic.services.auth_service import AuthService
from kneeklinic.utils.constants import (
    EMAIL_REQUIRED,
    PASSWORD_REQUIRED,
    STORAGE_KEY_HAS_ONBOARDED,
    STORAGE_KEY_TOKEN,
    STORAGE_KEY_USER,
)
from kneeklinic.utils.validation_utils import (
    normalize_email,
    validate_change_password_form,
    validate_profile_form,
)

logger = get_logger(__name__)


class AuthSession:
    """
    The patient's authentication state.

    `load()` must run once at startup; until then `is_loading` is True.
    """

    def __init__(self, store, auth_service: AuthService):
        self.store = store
        self.auth_service = auth_service
        self.user: Optional[User] = None
        self.token: Optional[str] = None
        self.is_loading = True
        auth_service.client.on_unauthorized(self._reset)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and bool(self.token)

    def load(self) -> Optional[User]:
        """
        Restores token and user from local storage.
        A corrupt cached user is discarded together with its token.
        """
        try:
            stored = dict(self.store.multi_get([STORAGE_KEY_TOKEN, STORAGE_KEY_USER]))
            token = stored.get(STORAGE_KEY_TOKEN)
            user_json = stored.get(STORAGE_KEY_USER)

            if token and user_json:
                try:
                    self.user = User.model_validate_json(user_json)
                    self.token = token
                    logger.info("Restored stored session", extra={"user_id": self.user.id})
                except PydanticValidationError as e:
                    logger.error(f"Error loading stored auth: {e}")
                    self.clear()
            return self.user
        finally:
            self.is_loading = False

    def save(self, token: str, user: User) -> None:
        self.store.multi_set([
            (STORAGE_KEY_TOKEN, token),
            (STORAGE_KEY_USER, user.model_dump_json(by_alias=True)),
        ])
        self.token = token
        self.user = user

    def clear(self) -> None:
        self.store.multi_remove([STORAGE_KEY_TOKEN, STORAGE_KEY_USER])
        self._reset()

    def _reset(self) -> None:
        self.user = None
        self.token = None

    def _accept(self, response: AuthResponse) -> User:
        self.save(response.token, response.user)
        return response.user

    async def login(self, email: str, password: str) -> User:
        """
        Raises:
            ValidationError: If email or password is empty
            KneeKlinicError subclass: If the backend refuses the login
        """
        email = normalize_email(email)
        if not email:
            raise ValidationError(EMAIL_REQUIRED, details={"email": EMAIL_REQUIRED})
        if not password or not password.strip():
            raise ValidationError(PASSWORD_REQUIRED, details={"password": PASSWORD_REQUIRED})

        response = await self.auth_service.login(LoginCredentials(email=email, password=password))
        return self._accept(response)

    async def signup(self, data: SignupData) -> str:
        """Starts signup; returns the email the OTP was sent to."""
        await self.auth_service.signup(data)
        return data.email

    async def verify_otp(self, email: str, otp: str) -> User:
        response = await self.auth_service.verify_otp(OTPVerification(email=email, otp=otp))
        user = self._accept(response)
        logger.info("Email verified, session started", extra={"user_id": user.id})
        return user

    async def resend_otp(self, email: str) -> ApiResponse:
        return await self.auth_service.resend_otp(email)

    async def logout(self) -> None:
        """Ends the session; local state is cleared even if the backend call fails."""
        user_id = self.user.id if self.user else None
        try:
            await self.auth_service.logout()
        finally:
            self.clear()
            logger.info("Logged out", extra={"user_id": user_id})

    def update_user(self, user: User) -> None:
        self.user = user
        self.store.set_item(STORAGE_KEY_USER, user.model_dump_json(by_alias=True))

    async def refresh_user(self) -> Optional[User]:
        """Re-reads the profile from the backend and caches it."""
        try:
            response = await self.auth_service.get_current_user()
        except KneeKlinicError as e:
            logger.error(f"Error refreshing user: {e.message}")
            raise
        if response.user is not None:
            self.update_user(response.user)
        return response.user

    # Profile screen

    async def update_profile(
        self,
        first_name: str,
        last_name: str,
        email: str,
        picture: Optional[Path] = None
    ) -> User:
        error = validate_profile_form(first_name, last_name, email)
        if error:
            raise ValidationError(error)

        with LogContext(user_id=self.user.id if self.user else None):
            response = await self.auth_service.update_profile(first_name, last_name, email, picture)
            if response.user is not None:
                self.update_user(response.user)
            logger.info("Profile updated")
        return self.user

    async def delete_profile_picture(self) -> Optional[User]:
        response = await self.auth_service.delete_profile_picture()
        if response.user is not None:
            self.update_user(response.user)
        return self.user

    async def change_password(self, current_password: str, new_password: str, confirm_password: str) -> ApiResponse:
        error = validate_change_password_form(current_password, new_password, confirm_password)
        if error:
            raise ValidationError(error)
        return await self.auth_service.change_password(current_password, new_password)

    # Onboarding

    def has_onboarded(self) -> bool:
        return self.store.get_item(STORAGE_KEY_HAS_ONBOARDED) == "true"

    def mark_onboarded(self) -> None:
        self.store.set_item(STORAGE_KEY_HAS_ONBOARDED, "true")


# Process-wide session
_session: Optional[AuthSession] = None


def init_auth_session(store, auth_service: AuthService) -> AuthSession:
    global _session
    _session = AuthSession(store, auth_service)
    return _session


def get_auth_session() -> AuthSession:
    """
    Returns the process-wide session.

    Raises:
        RuntimeError: If the session was never initialized
    """
    if _session is None:
        raise RuntimeError("Auth session not initialized. Call init_auth_session() during startup.")
    return _session


def reset_auth_session() -> None:
    global _session
    _session = None
