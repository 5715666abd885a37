class ShortLinkError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:shortlink_error'


class SubmissionValidationError(ShortLinkError):
    """Raised when a submission batch fails validation.

    Attributes:
        errors (dict[str, str]):
            Every validation error of the batch keyed by '<field>-<index>'
            (e.g. 'url-0', 'shortcode-3'). Batch-level problems use the 'batch' key.
    """

    error_code = 'app:submission_validation_error'

    def __init__(self, errors: dict[str, str], message: str | None = None):
        self.errors = dict(errors)
        super().__init__(message or f'Submission rejected with {len(self.errors)} error(s).')


class ResolutionError(ShortLinkError):
    """Base exception for shortcodes which can't be resolved to a target URL."""

    error_code = 'app:resolution_error'

    def __init__(self, shortcode: str, message: str | None = None):
        self.shortcode = shortcode
        super().__init__(message or f"Short URL with code '{shortcode}' can't be resolved.")


class ShortcodeNotFoundError(ResolutionError):
    """Raised when resolving a shortcode which was never created."""

    error_code = 'app:shortcode_not_found_error'


class ShortcodeExpiredError(ResolutionError):
    """Raised when resolving a shortcode past its expiry time."""

    error_code = 'app:shortcode_expired_error'


class GenerationExhaustedError(ShortLinkError):
    """Raised when no free shortcode was found within the retry budget."""

    error_code = 'app:generation_exhausted_error'


class ConfigurationError(ShortLinkError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
