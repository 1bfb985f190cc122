"""
kneeklinic/utils/validation_utils.py

Purpose: Input validation

- Email format
- Signup password complexity rules
- OTP format
- Reset / change password rules
- X-ray image checks
- Text cleanup for posts and messages
"""

import re
from pathlib import Path
from typing import Dict, Optional

from kneeklinic.utils.constants import (
    OTP_LENGTH,
    SIGNUP_PASSWORD_MIN_LENGTH,
    RESET_PASSWORD_MIN_LENGTH,
    CHANGE_PASSWORD_MIN_LENGTH,
    MAX_IMAGE_SIZE,
    ALLOWED_IMAGE_TYPES,
    FIRST_NAME_REQUIRED,
    LAST_NAME_REQUIRED,
    EMAIL_REQUIRED,
    EMAIL_INVALID,
    PASSWORD_REQUIRED,
    PASSWORD_TOO_SHORT,
    PASSWORD_TOO_WEAK,
    PASSWORD_HAS_SPACES,
    CONFIRM_PASSWORD_REQUIRED,
    PASSWORDS_DO_NOT_MATCH,
    PROFILE_FIELDS_REQUIRED,
    PASSWORD_FIELDS_REQUIRED,
    NEW_PASSWORDS_DO_NOT_MATCH,
    NEW_PASSWORD_TOO_SHORT,
    NO_IMAGE_SELECTED,
    IMAGE_TOO_LARGE,
    IMAGE_TYPE_NOT_ALLOWED,
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_COMPLEXITY_PATTERN = re.compile(r"(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[^A-Za-z0-9])")


def validate_email(email: str) -> bool:
    """
    Validates email format.

    Args:
        email: Email address as typed

    Returns:
        True if it looks like local@domain.tld
    """
    if not email:
        return False
    return bool(EMAIL_PATTERN.match(email.strip()))


def normalize_email(email: str) -> str:
    """Trims and lowercases an email before it is sent to the backend."""
    return (email or "").strip().lower()


def check_email(email: str) -> Optional[str]:
    """Returns the error message for an email field, or None if valid."""
    if not email or not email.strip():
        return EMAIL_REQUIRED
    if not validate_email(email):
        return EMAIL_INVALID
    return None


def check_signup_password(password: str) -> Optional[str]:
    """
    Applies the signup password rules in order and returns the first failure.

    Rules: required, minimum length, mixed case + digit + special
    character, no whitespace.
    """
    if not password:
        return PASSWORD_REQUIRED
    if len(password) < SIGNUP_PASSWORD_MIN_LENGTH:
        return PASSWORD_TOO_SHORT.format(min_length=SIGNUP_PASSWORD_MIN_LENGTH)
    if not PASSWORD_COMPLEXITY_PATTERN.search(password):
        return PASSWORD_TOO_WEAK
    if re.search(r"\s", password):
        return PASSWORD_HAS_SPACES
    return None


def check_password_confirmation(password: str, confirm_password: str) -> Optional[str]:
    """Returns the error for the confirmation field, or None if it matches."""
    if not confirm_password:
        return CONFIRM_PASSWORD_REQUIRED
    if password != confirm_password:
        return PASSWORDS_DO_NOT_MATCH
    return None


def validate_signup_form(
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    confirm_password: str
) -> Dict[str, str]:
    """
    Validates the signup form.

    Returns:
        Dict of field name -> error message (empty when the form is valid)
    """
    errors: Dict[str, str] = {}

    if not (first_name or "").strip():
        errors["first_name"] = FIRST_NAME_REQUIRED

    if not (last_name or "").strip():
        errors["last_name"] = LAST_NAME_REQUIRED

    email_error = check_email(email)
    if email_error:
        errors["email"] = email_error

    password_error = check_signup_password(password)
    if password_error:
        errors["password"] = password_error

    confirm_error = check_password_confirmation(password, confirm_password)
    if confirm_error:
        errors["confirm_password"] = confirm_error

    return errors


def validate_otp_format(otp: str, length: int = OTP_LENGTH) -> bool:
    """
    Validates OTP format (exactly `length` digits).

    Args:
        otp: OTP string

    Returns:
        True if valid
    """
    if not otp:
        return False
    return bool(re.fullmatch(rf"\d{{{length}}}", otp.strip()))


def clean_otp(otp: str) -> str:
    """Drops spaces and dashes users paste in from email clients."""
    return re.sub(r"[\s\-]", "", otp or "")


def validate_reset_password_form(new_password: str, confirm_password: str) -> Dict[str, str]:
    """
    Validates the new-password step of the forgot-password flow.
    """
    errors: Dict[str, str] = {}

    if not new_password:
        errors["new_password"] = PASSWORD_REQUIRED
    elif len(new_password) < RESET_PASSWORD_MIN_LENGTH:
        errors["new_password"] = PASSWORD_TOO_SHORT.format(min_length=RESET_PASSWORD_MIN_LENGTH)

    confirm_error = check_password_confirmation(new_password, confirm_password)
    if confirm_error:
        errors["confirm_password"] = confirm_error

    return errors


def validate_change_password_form(
    current_password: str,
    new_password: str,
    confirm_password: str
) -> Optional[str]:
    """
    Validates the change-password form on the profile screen.

    Returns:
        The single error message to alert, or None
    """
    if not current_password or not new_password or not confirm_password:
        return PASSWORD_FIELDS_REQUIRED
    if new_password != confirm_password:
        return NEW_PASSWORDS_DO_NOT_MATCH
    if len(new_password) < CHANGE_PASSWORD_MIN_LENGTH:
        return NEW_PASSWORD_TOO_SHORT.format(min_length=CHANGE_PASSWORD_MIN_LENGTH)
    return None


def validate_profile_form(first_name: str, last_name: str, email: str) -> Optional[str]:
    """All profile fields are required."""
    if not (first_name or "").strip() or not (last_name or "").strip() or not (email or "").strip():
        return PROFILE_FIELDS_REQUIRED
    return None


def guess_image_content_type(filename: str) -> str:
    """
    Derives the upload content type from the file extension.
    Files without an extension are sent as image/jpeg.
    """
    match = re.search(r"\.(\w+)$", filename or "")
    return f"image/{match.group(1).lower()}" if match else "image/jpeg"


def check_image_file(path: Optional[Path]) -> Optional[str]:
    """
    Checks an image selected for upload.

    Returns:
        Error message, or None if the file can be uploaded
    """
    if path is None or not Path(path).is_file():
        return NO_IMAGE_SELECTED

    path = Path(path)
    if guess_image_content_type(path.name) not in ALLOWED_IMAGE_TYPES:
        return IMAGE_TYPE_NOT_ALLOWED
    if path.stat().st_size > MAX_IMAGE_SIZE:
        return IMAGE_TOO_LARGE
    return None


def clean_text(text: str, max_length: int = 5000) -> str:
    """
    Trims user-written content for posts, replies and messages.

    Args:
        text: Input text
        max_length: Maximum allowed length

    Returns:
        Stripped text, cut at max_length
    """
    if not text:
        return ""
    return text.strip()[:max_length]
