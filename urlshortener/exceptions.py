class URLShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:urlshortener_error'


class InvalidURLError(URLShortenerError):
    """Raised when the URL to shorten is not an absolute HTTP/HTTPS URL."""

    error_code = 'app:invalid_url_error'


class InvalidDeepLinkError(URLShortenerError):
    """Raised when a deep-link target is not an absolute URL or uses a disallowed scheme."""

    error_code = 'app:invalid_deep_link_error'


class InvalidExpiryError(URLShortenerError):
    """Raised when the requested expiry is not in the future."""

    error_code = 'app:invalid_expiry_error'


class ShortcodeGenerationExhaustedError(URLShortenerError):
    """Raised when every shortcode generation attempt collided with an existing shortcode.

    Signals data store saturation or a misconfigured alphabet/length pair.
    """

    error_code = 'app:shortcode_generation_exhausted_error'


class ConfigurationError(URLShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
