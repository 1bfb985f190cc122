"""
kneeklinic/flow/handlers/signup.py

Handles: account creation with email verification

Flow:
1. Patient fills in name, email and password
2. Backend emails a 6-digit code
3. Patient enters the code (or asks for a new one after 60 seconds)
4. Verified account is logged in and the session is saved
"""

from datetime import datetime
from typing import Callable

from kneeklinic.core.exceptions import ValidationError
from kneeklinic.core.logging import get_logger, LogContext
from kneeklinic.flow.handlers.base import OtpFlow
from kneeklinic.flow.states import AuthFlowState
from kneeklinic.schemas.auth import SignupData, User
from kneeklinic.services.session_service import AuthSession
from kneeklinic.utils.constants import OTP_RESEND_COOLDOWN_SECONDS
from kneeklinic.utils.time_utils import utcnow
from kneeklinic.utils.validation_utils import normalize_email, validate_signup_form

logger = get_logger(__name__)


class SignupFlow(OtpFlow):
    """
    Drives signup against the auth session.

    Form errors raise ValidationError with `details` mapping each field to
    its message; backend errors propagate unchanged.
    """

    initial_state = AuthFlowState.SIGNUP_FORM

    def __init__(
        self,
        session: AuthSession,
        now: Callable[[], datetime] = utcnow,
        resend_cooldown_seconds: int = OTP_RESEND_COOLDOWN_SECONDS
    ):
        super().__init__(now=now, resend_cooldown_seconds=resend_cooldown_seconds)
        self.session = session

    async def submit_form(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        confirm_password: str
    ) -> str:
        """
        Validates the form and requests the verification code.

        Returns:
            Email the code was sent to
        """
        self._require_state(AuthFlowState.SIGNUP_FORM)

        errors = validate_signup_form(first_name, last_name, email, password, confirm_password)
        if errors:
            raise ValidationError(next(iter(errors.values())), details=errors)

        data = SignupData(
            email=normalize_email(email),
            password=password,
            confirm_password=confirm_password,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
        )
        with LogContext(email=data.email):
            self.email = await self.session.signup(data)
            self._mark_otp_sent()
            self._transition(AuthFlowState.AWAIT_SIGNUP_OTP)
            logger.info("Signup OTP requested")
        return self.email

    async def verify(self, otp: str) -> User:
        self._require_state(AuthFlowState.AWAIT_SIGNUP_OTP)
        code = self._check_otp(otp)

        user = await self.session.verify_otp(self.email, code)
        self._transition(AuthFlowState.SIGNUP_COMPLETED)
        return user

    async def resend(self) -> None:
        """
        Raises:
            ValidationError: If the 60 second countdown has not run out
        """
        self._require_state(AuthFlowState.AWAIT_SIGNUP_OTP)
        self._check_resend_allowed()

        await self.session.resend_otp(self.email)
        self._mark_otp_sent()
        self._transition(AuthFlowState.AWAIT_SIGNUP_OTP)
        logger.info("Signup OTP resent", extra={"email": self.email})
