"""
kneeklinic/flow/handlers/base.py

Shared machinery for the OTP-based auth flows:
state tracking with transition checks, back navigation and the resend cooldown.
"""

import math
from datetime import datetime
from typing import Callable, Optional

from kneeklinic.core.exceptions import InvalidFlowTransition, ValidationError
from kneeklinic.core.logging import get_logger
from kneeklinic.flow.states import (
    AuthFlowState,
    PREVIOUS_STATE,
    get_progress_message,
    get_state_metadata,
    is_valid_transition,
)
from kneeklinic.utils.constants import OTP_INCOMPLETE, OTP_RESEND_COOLDOWN_SECONDS, RESEND_TOO_SOON
from kneeklinic.utils.time_utils import utcnow
from kneeklinic.utils.validation_utils import clean_otp, validate_otp_format

logger = get_logger(__name__)


class OtpFlow:
    initial_state: AuthFlowState

    def __init__(
        self,
        now: Callable[[], datetime] = utcnow,
        resend_cooldown_seconds: int = OTP_RESEND_COOLDOWN_SECONDS
    ):
        self._now = now
        self.resend_cooldown_seconds = resend_cooldown_seconds
        self.state = self.initial_state
        self.email: Optional[str] = None
        self.otp_sent_at: Optional[datetime] = None

    @property
    def progress(self) -> str:
        return get_progress_message(self.state)

    def _transition(self, to_state: AuthFlowState) -> None:
        if not is_valid_transition(self.state, to_state):
            logger.warning(f"Invalid flow transition attempted: {self.state.value} -> {to_state.value}")
            raise InvalidFlowTransition(
                f"Invalid flow transition: {self.state.value} -> {to_state.value}",
                details={"from": self.state.value, "to": to_state.value}
            )
        logger.debug(f"Flow state: {self.state.value} -> {to_state.value}")
        self.state = to_state

    def _require_state(self, *states: AuthFlowState) -> None:
        if self.state not in states:
            raise InvalidFlowTransition(
                f"Action not allowed in state {self.state.value}",
                details={"state": self.state.value}
            )

    def go_back(self) -> AuthFlowState:
        if not get_state_metadata(self.state).can_go_back:
            raise InvalidFlowTransition(f"Cannot go back from {self.state.value}")
        self._transition(PREVIOUS_STATE[self.state])
        return self.state

    # Resend cooldown

    def _mark_otp_sent(self) -> None:
        self.otp_sent_at = self._now()

    def seconds_until_resend(self) -> int:
        """Seconds left on the resend countdown; 0 when a resend is allowed."""
        if self.otp_sent_at is None:
            return 0
        elapsed = (self._now() - self.otp_sent_at).total_seconds()
        return max(0, math.ceil(self.resend_cooldown_seconds - elapsed))

    @property
    def can_resend(self) -> bool:
        return self.seconds_until_resend() == 0

    def _check_resend_allowed(self) -> None:
        remaining = self.seconds_until_resend()
        if remaining > 0:
            message = RESEND_TOO_SOON.format(seconds=remaining)
            raise ValidationError(message, details={"otp": message})

    @staticmethod
    def _check_otp(otp: str) -> str:
        code = clean_otp(otp)
        if not validate_otp_format(code):
            raise ValidationError(OTP_INCOMPLETE, details={"otp": OTP_INCOMPLETE})
        return code
