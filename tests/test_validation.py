import pytest

from kneeklinic.utils.constants import MAX_IMAGE_SIZE
from kneeklinic.utils.time_utils import format_appointment_date, format_duration, to_iso
from kneeklinic.utils.validation_utils import (
    check_image_file,
    check_signup_password,
    clean_otp,
    clean_text,
    guess_image_content_type,
    normalize_email,
    validate_change_password_form,
    validate_email,
    validate_otp_format,
    validate_profile_form,
    validate_reset_password_form,
    validate_signup_form,
)


@pytest.mark.parametrize("email, valid", [
    ("jane@example.com", True),
    ("  jane@example.com ", True),
    ("jane.doe+knee@clinic.co.uk", True),
    ("jane@example", False),
    ("jane example@x.com", False),
    ("@example.com", False),
    ("", False),
])
def test_validate_email(email, valid):
    assert validate_email(email) is valid


def test_normalize_email():
    assert normalize_email("  Jane@Example.COM ") == "jane@example.com"


@pytest.mark.parametrize("password, expected", [
    ("", "Password is required"),
    ("Ab1!", "Password must be at least 8 characters"),
    ("abcdefgh", "Password must include uppercase, lowercase, number, and special character"),
    ("Abcdefg1", "Password must include uppercase, lowercase, number, and special character"),
    ("Abc def1!", "Password cannot contain spaces"),
    ("Secret1!", None),
])
def test_signup_password_rules(password, expected):
    assert check_signup_password(password) == expected


def test_signup_form_collects_every_field_error():
    errors = validate_signup_form("", " ", "bad", "short", "")
    assert errors == {
        "first_name": "First name is required",
        "last_name": "Last name is required",
        "email": "Invalid email format",
        "password": "Password must be at least 8 characters",
        "confirm_password": "Please confirm your password",
    }


def test_signup_form_password_mismatch():
    errors = validate_signup_form("Jane", "Doe", "jane@example.com", "Secret1!", "Secret2!")
    assert errors == {"confirm_password": "Passwords do not match"}


def test_signup_form_valid():
    assert validate_signup_form("Jane", "Doe", "jane@example.com", "Secret1!", "Secret1!") == {}


@pytest.mark.parametrize("otp, valid", [
    ("123456", True),
    ("12345", False),
    ("1234567", False),
    ("12a456", False),
    ("", False),
])
def test_validate_otp_format(otp, valid):
    assert validate_otp_format(otp) is valid


def test_clean_otp_strips_separators():
    assert clean_otp("123 456") == "123456"
    assert clean_otp("123-456") == "123456"


def test_reset_password_minimum_is_six():
    assert validate_reset_password_form("abcdef", "abcdef") == {}
    assert validate_reset_password_form("abcde", "abcde") == {
        "new_password": "Password must be at least 6 characters"
    }
    assert validate_reset_password_form("abcdef", "abcdeg") == {
        "confirm_password": "Passwords do not match"
    }


def test_change_password_form():
    assert validate_change_password_form("", "newpass12", "newpass12") == "Please fill in all password fields"
    assert validate_change_password_form("old", "newpass12", "newpass13") == "New passwords do not match"
    assert validate_change_password_form("old", "short", "short") == "New password must be at least 8 characters long"
    assert validate_change_password_form("old", "newpass12", "newpass12") is None


def test_profile_form_requires_all_fields():
    assert validate_profile_form("Jane", "", "jane@example.com") == "Please fill in all fields"
    assert validate_profile_form("Jane", "Doe", "jane@example.com") is None


@pytest.mark.parametrize("filename, content_type", [
    ("knee.png", "image/png"),
    ("KNEE.JPG", "image/jpg"),
    ("scan.jpeg", "image/jpeg"),
    ("scan", "image/jpeg"),
])
def test_guess_image_content_type(filename, content_type):
    assert guess_image_content_type(filename) == content_type


def test_check_image_file(tmp_path):
    assert check_image_file(None) == "Please select an X-ray image first."
    assert check_image_file(tmp_path / "missing.png") == "Please select an X-ray image first."

    pdf = tmp_path / "report.pdf"
    pdf.write_bytes(b"%PDF")
    assert check_image_file(pdf) == "Only JPEG and PNG images are supported."

    big = tmp_path / "big.png"
    big.write_bytes(b"\0" * (MAX_IMAGE_SIZE + 1))
    assert check_image_file(big) == "Image is too large. Maximum size is 10MB."

    ok = tmp_path / "knee.png"
    ok.write_bytes(b"\x89PNG")
    assert check_image_file(ok) is None


def test_clean_text():
    assert clean_text("  hello  ") == "hello"
    assert clean_text("   ") == ""


def test_format_duration():
    assert format_duration(0) == "00:00:00"
    assert format_duration(75) == "00:01:15"
    assert format_duration(3 * 3600 + 5) == "03:00:05"


def test_to_iso_uses_utc_z_suffix():
    from datetime import datetime, timedelta, timezone

    dt = datetime(2026, 3, 2, 11, 30, tzinfo=timezone(timedelta(hours=2)))
    assert to_iso(dt) == "2026-03-02T09:30:00.000Z"
    assert to_iso(None) is None


def test_format_appointment_date():
    from datetime import datetime

    assert format_appointment_date(datetime(2026, 3, 2)) == "Monday, March 2, 2026"
