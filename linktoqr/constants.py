from enum import StrEnum


class Plan(StrEnum):
    """Subscription tiers an account can be on."""

    FREE = 'free'
    PRO = 'pro'
    BUSINESS = 'business'


# Maximum number of active dynamic codes per plan (None = unlimited)
PLAN_LIMITS: dict[Plan, int | None] = {
    Plan.FREE: 2,
    Plan.PRO: 50,
    Plan.BUSINESS: None,
}


class ShortCode:
    """Short code generation parameters."""

    LENGTH = 8
    MAX_CREATE_ATTEMPTS = 5  # Regenerate on collision at most this many times


class Limits:
    """Input bounds enforced at the request boundary."""

    MAX_DESTINATION_LENGTH = 2048
    MIN_PASSWORD_LENGTH = 6
    MAX_PASSWORD_LENGTH = 72  # bcrypt ignores everything past 72 bytes
    BCRYPT_ROUNDS = 12


class Surface:
    """Relative paths of the front-end surfaces the redirect handler falls back to."""

    LANDING = '/'
    PASSWORD_PROMPT = '/password/{code}'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        PUBLIC_BASE_URL = 'PUBLIC_BASE_URL'
        BCRYPT_ROUNDS = 'BCRYPT_ROUNDS'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


class ErrorCode(StrEnum):
    """Machine-readable error kinds returned in API payloads."""

    VALIDATION_ERROR = 'VALIDATION_ERROR'
    QUOTA_EXCEEDED = 'QUOTA_EXCEEDED'
    NOT_FOUND = 'NOT_FOUND'
    NOT_FOUND_OR_NOT_OWNED = 'NOT_FOUND_OR_NOT_OWNED'
    EXPIRED = 'EXPIRED'
    PASSWORD_REQUIRED = 'PASSWORD_REQUIRED'
    RESOLUTION_FAILED = 'RESOLUTION_FAILED'
    CREATE_FAILED = 'CREATE_FAILED'
    UNAUTHORIZED = 'UNAUTHORIZED'
    EMAIL_TAKEN = 'EMAIL_TAKEN'
    INVALID_CREDENTIALS = 'INVALID_CREDENTIALS'
    UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'


# Seconds a client should wait before retrying after a transient storage failure
RETRY_AFTER_SECONDS = 1
