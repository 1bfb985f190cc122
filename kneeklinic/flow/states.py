"""
kneeklinic/flow/states.py

Purpose: Defines the auth flow states

- Enum for each step of signup and password reset
  (SIGNUP_FORM, AWAIT_SIGNUP_OTP, ENTER_EMAIL, AWAIT_RESET_OTP, ...)
- Single source of truth for flow stages
- State transition validation
- Metadata for each state (step number, back navigation)
"""

from enum import Enum
from typing import Dict, List, Optional
from dataclasses import dataclass


class AuthFlowState(str, Enum):
    """
    All states of the signup and password reset flows.
    """

    # Signup
    SIGNUP_FORM = "SIGNUP_FORM"
    AWAIT_SIGNUP_OTP = "AWAIT_SIGNUP_OTP"
    SIGNUP_COMPLETED = "SIGNUP_COMPLETED"

    # Password reset
    ENTER_EMAIL = "ENTER_EMAIL"
    AWAIT_RESET_OTP = "AWAIT_RESET_OTP"
    NEW_PASSWORD = "NEW_PASSWORD"
    RESET_COMPLETED = "RESET_COMPLETED"


@dataclass
class StateMetadata:
    """
    Metadata associated with each flow state.
    """
    name: AuthFlowState
    display_name: str
    step_number: Optional[int] = None  # For progress tracking
    total_steps: int = 2
    can_go_back: bool = False
    description: str = ""


STATE_METADATA: Dict[AuthFlowState, StateMetadata] = {
    AuthFlowState.SIGNUP_FORM: StateMetadata(
        name=AuthFlowState.SIGNUP_FORM,
        display_name="Create Account",
        step_number=1,
        description="Collect name, email and password"
    ),
    AuthFlowState.AWAIT_SIGNUP_OTP: StateMetadata(
        name=AuthFlowState.AWAIT_SIGNUP_OTP,
        display_name="Verify Email",
        step_number=2,
        can_go_back=True,
        description="Enter the 6-digit code emailed at signup"
    ),
    AuthFlowState.SIGNUP_COMPLETED: StateMetadata(
        name=AuthFlowState.SIGNUP_COMPLETED,
        display_name="Welcome",
        description="Email verified and session saved"
    ),
    AuthFlowState.ENTER_EMAIL: StateMetadata(
        name=AuthFlowState.ENTER_EMAIL,
        display_name="Forgot Password",
        step_number=1,
        total_steps=3,
        description="Collect the account email"
    ),
    AuthFlowState.AWAIT_RESET_OTP: StateMetadata(
        name=AuthFlowState.AWAIT_RESET_OTP,
        display_name="Verify Code",
        step_number=2,
        total_steps=3,
        can_go_back=True,
        description="Enter the 6-digit reset code"
    ),
    AuthFlowState.NEW_PASSWORD: StateMetadata(
        name=AuthFlowState.NEW_PASSWORD,
        display_name="New Password",
        step_number=3,
        total_steps=3,
        can_go_back=True,
        description="Choose and confirm the new password"
    ),
    AuthFlowState.RESET_COMPLETED: StateMetadata(
        name=AuthFlowState.RESET_COMPLETED,
        display_name="Password Reset",
        description="Password changed; log in again"
    ),
}


# Valid state transitions - prevents skipping verification
STATE_TRANSITIONS: Dict[AuthFlowState, List[AuthFlowState]] = {
    AuthFlowState.SIGNUP_FORM: [
        AuthFlowState.AWAIT_SIGNUP_OTP,
    ],
    AuthFlowState.AWAIT_SIGNUP_OTP: [
        AuthFlowState.SIGNUP_COMPLETED,
        AuthFlowState.AWAIT_SIGNUP_OTP,  # Resend
        AuthFlowState.SIGNUP_FORM,  # Go back
    ],
    AuthFlowState.SIGNUP_COMPLETED: [],
    AuthFlowState.ENTER_EMAIL: [
        AuthFlowState.AWAIT_RESET_OTP,
    ],
    AuthFlowState.AWAIT_RESET_OTP: [
        AuthFlowState.NEW_PASSWORD,
        AuthFlowState.AWAIT_RESET_OTP,  # Resend
        AuthFlowState.ENTER_EMAIL,  # Go back
    ],
    AuthFlowState.NEW_PASSWORD: [
        AuthFlowState.RESET_COMPLETED,
        AuthFlowState.AWAIT_RESET_OTP,  # Go back
    ],
    AuthFlowState.RESET_COMPLETED: [],
}


# Where "back" leads from each state that allows it
PREVIOUS_STATE: Dict[AuthFlowState, AuthFlowState] = {
    AuthFlowState.AWAIT_SIGNUP_OTP: AuthFlowState.SIGNUP_FORM,
    AuthFlowState.AWAIT_RESET_OTP: AuthFlowState.ENTER_EMAIL,
    AuthFlowState.NEW_PASSWORD: AuthFlowState.AWAIT_RESET_OTP,
}


def is_valid_transition(from_state: AuthFlowState, to_state: AuthFlowState) -> bool:
    """
    Checks if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Target state

    Returns:
        True if transition is allowed, False otherwise
    """
    allowed_transitions = STATE_TRANSITIONS.get(from_state, [])
    return to_state in allowed_transitions


def get_state_metadata(state: AuthFlowState) -> StateMetadata:
    return STATE_METADATA.get(state, StateMetadata(
        name=state,
        display_name=state.value,
        description="Unknown state"
    ))


def get_progress_message(state: AuthFlowState) -> str:
    """
    Progress label for the current state, e.g. "Step 2 of 3".
    Empty for terminal states.
    """
    metadata = get_state_metadata(state)
    if metadata.step_number and metadata.step_number > 0:
        return f"Step {metadata.step_number} of {metadata.total_steps}"
    return ""
