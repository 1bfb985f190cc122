"""
kneeklinic/core/errors.py

Purpose: Translate transport failures into the KneeKlinic error taxonomy

- Maps non-2xx backend responses to typed exceptions
- Maps httpx timeouts / connection failures to NetworkError
- Maps malformed response bodies to ApiError
- Produces the alert text shown to the patient
"""

from typing import Any, Optional, Type, TypeVar
import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from kneeklinic.core.exceptions import (
    KneeKlinicError,
    ApiError,
    AuthenticationError,
    SessionExpiredError,
    ResourceNotFoundError,
    ValidationError,
    NetworkError,
    RequestTimeoutError,
)
from kneeklinic.core.logging import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"
UNEXPECTED_RESPONSE_MESSAGE = "Unexpected response from server"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _response_payload(response: httpx.Response) -> Optional[Any]:
    try:
        return response.json()
    except ValueError:
        return None


def extract_error_message(response: httpx.Response) -> str:
    """
    Pulls the human-readable message out of an error response.

    The backend answers errors with {"message": ...} and occasionally
    {"error": ...}; anything else falls back to the status line.
    """
    payload = _response_payload(response)
    if isinstance(payload, dict):
        for key in ("message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value
    reason = response.reason_phrase or GENERIC_ERROR_MESSAGE
    return f"Request failed with status code {response.status_code}: {reason}"


def error_from_response(response: httpx.Response) -> KneeKlinicError:
    """
    Builds the exception matching a non-2xx response.
    """
    status = response.status_code
    message = extract_error_message(response)
    details = _response_payload(response)

    if status == 401:
        return AuthenticationError(message, details=details)
    if status == 403:
        return SessionExpiredError(message, details=details)
    if status == 404:
        return ResourceNotFoundError(message, details=details)
    if status in (400, 422):
        return ValidationError(message, details=details)
    return ApiError(message, status_code=status, details=details)


def error_from_transport(exc: httpx.HTTPError, endpoint: str = "") -> KneeKlinicError:
    """
    Builds the exception matching an httpx transport failure.
    """
    if isinstance(exc, httpx.TimeoutException):
        logger.error(f"Request timeout: {endpoint}")
        return RequestTimeoutError(details={"endpoint": endpoint})

    logger.error(
        f"Network error - check backend server and IP address ({endpoint}): {exc}"
    )
    return NetworkError(details={"endpoint": endpoint, "reason": str(exc)})


def handle_api_error(error: BaseException) -> str:
    """
    Turns any exception into the alert text shown to the patient.
    """
    if isinstance(error, KneeKlinicError):
        return error.message or GENERIC_ERROR_MESSAGE
    if isinstance(error, httpx.HTTPStatusError):
        return extract_error_message(error.response)
    message = str(error)
    return message or GENERIC_ERROR_MESSAGE


def parse_response(model: Type[ModelT], data: Any) -> ModelT:
    """
    Validates a decoded response body against its DTO.

    Raises:
        ApiError: If the body does not have the shape the DTO expects
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        logger.error(f"Unexpected {model.__name__} payload ({e.error_count()} validation errors)")
        raise ApiError(UNEXPECTED_RESPONSE_MESSAGE, details={"model": model.__name__}) from e
