class LinkShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:linkshortener_error'


class InvalidArgumentError(LinkShortenerError, ValueError):
    """Raised when the shortcode codec receives a value outside its domain."""

    error_code = 'app:invalid_argument_error'


class URLValidationError(LinkShortenerError, ValueError):
    """Raised when a target URL is malformed or too long.

    Attributes:
        url: the rejected input
        reason: human readable cause, safe to show to clients
    """

    error_code = 'app:url_validation_error'

    def __init__(self, url: object, reason: str):
        super().__init__(f'Invalid URL {url!r}: {reason}')
        self.url = url
        self.reason = reason


class ConfigurationError(LinkShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError, KeyError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
