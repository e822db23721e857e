from typing import Optional, Any

class RiddleBotError(Exception):
    """
    Base exception for the riddle bot application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ResourceNotFoundError(RiddleBotError):
    """
    Raised when a requested resource (e.g. persona) is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class SignatureVerificationError(RiddleBotError):
    """
    Raised when a request signature is missing, stale or does not match.
    """
    def __init__(self, message: str = "Request signature verification failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=400, details=details)

class NotAuthorizedError(RiddleBotError):
    """
    Raised when a user is not on the command allow-list.
    """
    def __init__(self, message: str = "Not authorized", details: Optional[Any] = None):
        super().__init__(message, code="NOT_AUTHORIZED", status_code=403, details=details)

class ValidationError(RiddleBotError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)

class ExternalServiceError(RiddleBotError):
    """
    Raised when an external service (Slack, secret store, MongoDB) fails.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None):
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR", status_code=502, details=details)

class ConfigurationError(RiddleBotError):
    """
    Raised when static configuration (e.g. reply templates) is inconsistent.
    """
    def __init__(self, message: str = "Configuration error", details: Optional[Any] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", status_code=500, details=details)
