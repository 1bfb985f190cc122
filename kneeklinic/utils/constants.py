"""
kneeklinic/utils/constants.py

Purpose: Centralized static content

- Storage keys and product limits
- Step detection constants
- KL grade reference table
- All user-facing alert messages

(Prevents hardcoding across the codebase)
"""

# ============================================================
# APP
# ============================================================

APP_NAME = "KneeKlinic"
APP_VERSION = "1.0.0"

STORAGE_KEY_TOKEN = "@kneeklinic:token"
STORAGE_KEY_USER = "@kneeklinic:user"
STORAGE_KEY_HAS_ONBOARDED = "@kneeklinic:hasOnboarded"

# ============================================================
# AUTH / OTP
# ============================================================

OTP_LENGTH = 6
OTP_RESEND_COOLDOWN_SECONDS = 60

SIGNUP_PASSWORD_MIN_LENGTH = 8
RESET_PASSWORD_MIN_LENGTH = 6
CHANGE_PASSWORD_MIN_LENGTH = 8

# ============================================================
# UPLOADS
# ============================================================

MAX_IMAGE_SIZE = 10 * 1024 * 1024  # 10MB
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/jpg")
XRAY_UPLOAD_FIELD = "xray"
PROFILE_PICTURE_FIELD = "profilePicture"

# ============================================================
# STEP COUNTER
# ============================================================

GRAVITY_G = 1.0
STEP_THRESHOLD_G = 0.08
MIN_STEP_INTERVAL_MS = 250
STEP_LENGTH_METERS = 0.762
CALORIES_PER_STEP = 0.04

# ============================================================
# ACTIVITY
# ============================================================

WATER_INTAKE_MIN = 0
WATER_INTAKE_MAX = 12
ACTIVITY_HISTORY_DAYS = 30
PROGRESS_HISTORY_DAYS = 14
WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

# ============================================================
# APPOINTMENTS
# ============================================================

DEFAULT_DOCTOR_NAME = "Dr. Habib Khan"
DEFAULT_SPECIALTY = "Orthopedic Specialist"
DEFAULT_APPOINTMENT_TIME = "10:00 AM"
DEFAULT_APPOINTMENT_TYPE = "Consultation"
DEFAULT_APPOINTMENT_NOTES = "Booked via Cal.com"

# ============================================================
# KL GRADE REFERENCE
# ============================================================

KL_GRADE_INFO = {
    0: {
        "label": "Normal",
        "description": "No signs of osteoarthritis detected.",
        "recommendations": [
            "Maintain a healthy weight to reduce joint stress",
            "Continue regular low-impact exercises (swimming, cycling)",
            "Eat a balanced diet rich in calcium and vitamin D",
            "Stay active to keep joints flexible",
            "Schedule annual check-ups to monitor joint health",
        ],
    },
    1: {
        "label": "Doubtful",
        "description": "Minor changes detected, but likely normal aging.",
        "recommendations": [
            "Maintain regular physical activity",
            "Focus on strengthening exercises for leg muscles",
            "Keep a healthy body weight",
            "Consider glucosamine supplements (consult doctor)",
            "Monitor for any new symptoms",
        ],
    },
    2: {
        "label": "Mild OA",
        "description": "Mild osteoarthritis with minimal joint space narrowing.",
        "recommendations": [
            "Consult an orthopedic specialist for evaluation",
            "Start physical therapy exercises",
            "Consider anti-inflammatory medications if needed",
            "Use supportive footwear and knee braces",
            "Avoid high-impact activities (running, jumping)",
            "Apply ice/heat therapy for pain relief",
        ],
    },
    3: {
        "label": "Moderate OA",
        "description": "Moderate osteoarthritis with noticeable joint damage.",
        "recommendations": [
            "Schedule appointment with orthopedic specialist immediately",
            "Regular physical therapy is essential",
            "Consider corticosteroid injections for pain relief",
            "Use walking aids if needed (cane, walker)",
            "Weight management is critical",
            "Avoid prolonged standing or walking",
            "Discuss viscosupplementation with your doctor",
        ],
    },
    4: {
        "label": "Severe OA",
        "description": "Severe osteoarthritis with significant joint damage.",
        "recommendations": [
            "Urgent consultation with orthopedic surgeon required",
            "Discuss surgical options (knee replacement)",
            "Pain management with specialist guidance",
            "Use mobility aids to reduce joint stress",
            "Consider aquatic therapy for gentle exercise",
            "Prepare for potential surgical intervention",
            "Arrange support for daily activities if needed",
        ],
    },
}

KL_GRADE_UNKNOWN = {
    "label": "Unknown",
    "description": "Unable to determine KL grade.",
    "recommendations": ["Please consult a healthcare professional."],
}

# ============================================================
# FORM VALIDATION MESSAGES
# ============================================================

FIRST_NAME_REQUIRED = "First name is required"
LAST_NAME_REQUIRED = "Last name is required"
EMAIL_REQUIRED = "Email is required"
EMAIL_INVALID = "Invalid email format"
PASSWORD_REQUIRED = "Password is required"
PASSWORD_TOO_SHORT = "Password must be at least {min_length} characters"
PASSWORD_TOO_WEAK = "Password must include uppercase, lowercase, number, and special character"
PASSWORD_HAS_SPACES = "Password cannot contain spaces"
CONFIRM_PASSWORD_REQUIRED = "Please confirm your password"
PASSWORDS_DO_NOT_MATCH = "Passwords do not match"
OTP_INCOMPLETE = "Please enter the complete OTP code"
PROFILE_FIELDS_REQUIRED = "Please fill in all fields"
PASSWORD_FIELDS_REQUIRED = "Please fill in all password fields"
NEW_PASSWORDS_DO_NOT_MATCH = "New passwords do not match"
NEW_PASSWORD_TOO_SHORT = "New password must be at least {min_length} characters long"
EMPTY_CONTENT = "Message cannot be empty"

# ============================================================
# ALERTS
# ============================================================

NO_STEPS_RECORDED = "No steps were recorded during this session."
STEP_SAVE_SESSION_EXPIRED = "Your session has expired. Please log in again."
STEP_SAVE_NOT_LOGGED_IN = "You are not logged in. Please log in to save your steps."
STEP_SAVE_OFFLINE = "Could not connect to the server. Check your internet connection."

NO_IMAGE_SELECTED = "Please select an X-ray image first."
IMAGE_TOO_LARGE = "Image is too large. Maximum size is 10MB."
IMAGE_TYPE_NOT_ALLOWED = "Only JPEG and PNG images are supported."

RESEND_TOO_SOON = "Please wait {seconds} seconds before requesting a new code."
