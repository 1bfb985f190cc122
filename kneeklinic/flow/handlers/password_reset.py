"""
kneeklinic/flow/handlers/password_reset.py

Handles: forgot password

Flow:
1. Patient enters the account email
2. Backend emails a 6-digit reset code
3. Code is verified on its own before a new password is asked for
4. New password is sent together with the verified code
"""

from datetime import datetime
from typing import Callable, Optional

from kneeklinic.core.exceptions import ValidationError
from kneeklinic.core.logging import get_logger, LogContext
from kneeklinic.flow.handlers.base import OtpFlow
from kneeklinic.flow.states import AuthFlowState
from kneeklinic.services.auth_service import AuthService
from kneeklinic.utils.constants import OTP_RESEND_COOLDOWN_SECONDS
from kneeklinic.utils.time_utils import utcnow
from kneeklinic.utils.validation_utils import (
    check_email,
    normalize_email,
    validate_reset_password_form,
)

logger = get_logger(__name__)


class PasswordResetFlow(OtpFlow):
    initial_state = AuthFlowState.ENTER_EMAIL

    def __init__(
        self,
        auth_service: AuthService,
        now: Callable[[], datetime] = utcnow,
        resend_cooldown_seconds: int = OTP_RESEND_COOLDOWN_SECONDS
    ):
        super().__init__(now=now, resend_cooldown_seconds=resend_cooldown_seconds)
        self.auth_service = auth_service
        self.verified_otp: Optional[str] = None

    async def request_code(self, email: str) -> str:
        """
        Sends the reset code to a trimmed, lowercased email.
        """
        self._require_state(AuthFlowState.ENTER_EMAIL)

        error = check_email(email)
        if error:
            raise ValidationError(error, details={"email": error})

        self.email = normalize_email(email)
        with LogContext(email=self.email):
            await self.auth_service.forgot_password(self.email)
            self._mark_otp_sent()
            self._transition(AuthFlowState.AWAIT_RESET_OTP)
            logger.info("Password reset code requested")
        return self.email

    async def verify(self, otp: str) -> None:
        self._require_state(AuthFlowState.AWAIT_RESET_OTP)
        code = self._check_otp(otp)

        await self.auth_service.verify_reset_otp(self.email, code)
        self.verified_otp = code
        self._transition(AuthFlowState.NEW_PASSWORD)

    async def resend(self) -> None:
        self._require_state(AuthFlowState.AWAIT_RESET_OTP)
        self._check_resend_allowed()

        await self.auth_service.forgot_password(self.email)
        self._mark_otp_sent()
        self._transition(AuthFlowState.AWAIT_RESET_OTP)

    async def set_new_password(self, new_password: str, confirm_password: str) -> None:
        """
        Raises:
            ValidationError: With per-field details when the passwords are
                too short or do not match
        """
        self._require_state(AuthFlowState.NEW_PASSWORD)

        errors = validate_reset_password_form(new_password, confirm_password)
        if errors:
            raise ValidationError(next(iter(errors.values())), details=errors)

        await self.auth_service.reset_password(self.email, self.verified_otp, new_password)
        self._transition(AuthFlowState.RESET_COMPLETED)
        logger.info("Password reset completed", extra={"email": self.email})

    def go_back(self) -> AuthFlowState:
        state = super().go_back()
        if state == AuthFlowState.AWAIT_RESET_OTP:
            self.verified_otp = None
        return state
