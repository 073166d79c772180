from linktoqr.constants import ErrorCode


class LinkToQRError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:linktoqr_error'


class ValidationError(LinkToQRError):
    """Raised when caller-supplied input fails validation."""

    error_code = ErrorCode.VALIDATION_ERROR


class InvalidDestinationError(ValidationError):
    """Raised when a destination URL is missing, not http(s), or too long."""


class QuotaExceededError(LinkToQRError):
    """Raised when an owner already holds as many active codes as their plan allows."""

    error_code = ErrorCode.QUOTA_EXCEEDED

    def __init__(self, message: str = '', *, limit: int | None = None):
        super().__init__(message)
        self.limit = limit


class CreateFailedError(LinkToQRError):
    """Raised when a short code could not be allocated (transient, safe to retry)."""

    error_code = ErrorCode.CREATE_FAILED


class ConfigurationError(LinkToQRError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
