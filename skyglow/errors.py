"""Exception hierarchy shared by the clients, normalizer and controllers."""


class SkyglowError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(SkyglowError):
    """Raised when required configuration (e.g. the API key) is missing or invalid."""


class NetworkError(SkyglowError):
    """Raised when a request could not reach the provider."""


class ProviderError(SkyglowError):
    """Raised when the provider answers with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidLocationError(ProviderError):
    """The current-conditions payload carried a non-success ``cod``."""


class MalformedResponseError(ProviderError):
    """A provider payload lacked a field the normalizer consumes."""


class GeolocationUnavailable(SkyglowError):
    """Raised when the device position cannot be determined."""


class MalformedPersistedState(SkyglowError):
    """Raised when a persisted recent-search payload cannot be decoded."""
