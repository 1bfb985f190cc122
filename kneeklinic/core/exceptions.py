from typing import Optional, Any

class KneeKlinicError(Exception):
    """
    Base exception for the KneeKlinic client.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ValidationError(KneeKlinicError):
    """
    Raised when form input fails client-side checks.
    `details` maps field name to the message shown next to it.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)

class AuthenticationError(KneeKlinicError):
    """
    Raised when the backend rejects the credentials or token (401).
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)

class SessionExpiredError(KneeKlinicError):
    """
    Raised when the backend refuses a stale session (403).
    """
    def __init__(self, message: str = "Your session has expired. Please log in again.", details: Optional[Any] = None):
        super().__init__(message, code="SESSION_EXPIRED", status_code=403, details=details)

class ResourceNotFoundError(KneeKlinicError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class ApiError(KneeKlinicError):
    """
    Raised for any other non-2xx backend response.
    """
    def __init__(self, message: str = "An unexpected error occurred", status_code: int = 500, details: Optional[Any] = None):
        super().__init__(message, code="API_ERROR", status_code=status_code, details=details)

class NetworkError(KneeKlinicError):
    """
    Raised when the backend cannot be reached.
    """
    def __init__(self, message: str = "Network error - check backend server and IP address", details: Optional[Any] = None):
        super().__init__(message, code="NETWORK_ERROR", status_code=503, details=details)

class RequestTimeoutError(NetworkError):
    """
    Raised when the backend does not answer within the configured timeout.
    """
    def __init__(self, message: str = "Request timeout", details: Optional[Any] = None):
        super().__init__(message, details=details)
        self.code = "TIMEOUT"
        self.status_code = 504

class StepSessionError(KneeKlinicError):
    """
    Raised when the step counter is driven out of order.
    """
    def __init__(self, message: str = "Step session error", details: Optional[Any] = None):
        super().__init__(message, code="STEP_SESSION_ERROR", status_code=409, details=details)

class InvalidFlowTransition(KneeKlinicError):
    """
    Raised when an auth flow is asked to skip a step.
    """
    def __init__(self, message: str = "Invalid flow transition", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_TRANSITION", status_code=409, details=details)
