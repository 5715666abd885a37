from enum import StrEnum


class Defaults:
    """Default engine settings."""

    VALIDITY_MINUTES = 30  # Lifetime of a short URL when the submitter omits it
    SHORTCODE_LENGTH = 6  # Length of generated shortcodes
    MAX_GENERATION_ATTEMPTS = 1_000  # Upper bound on shortcode generation retries
    MAX_BATCH_SIZE = 5  # Maximum number of URLs submitted at once
    COMMIT_ATTEMPTS = 3  # Batch commit retries when a generated shortcode is claimed concurrently
    BASE_URL = 'http://localhost:3000'  # Public base URL used to render short URLs


class ClickDefaults:
    """Placeholder values recorded with every click event."""

    SOURCE = 'Direct'  # No referrer available
    LOCATION = 'Local'  # No geolocation source wired in


class Shortcode:
    """Shortcode format rules."""

    PATTERN = r'^[A-Za-z0-9_-]{4,12}$'
    MIN_LENGTH = 4
    MAX_LENGTH = 12


class Backend(StrEnum):
    """Supported record store backends."""

    MEMORY = 'memory'
    FILE = 'file'
    REDIS = 'redis'
    S3 = 's3'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        LOG_LEVEL = 'LOG_LEVEL'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'

    class ShortLink(StrEnum):
        CONFIG = 'SHORTLINK_CONFIG'  # path to the YAML configuration document
        BACKEND = 'SHORTLINK_BACKEND'  # overrides `active_backend`

    class LocalStack(StrEnum):
        ENDPOINT = 'LOCALSTACK_ENDPOINT'  # usually http://localstack:4566


# Error codes
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
SHORT_URL_EXPIRED = 'SHORT_URL_EXPIRED'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
INVALID_SUBMISSION = 'INVALID_SUBMISSION'
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
