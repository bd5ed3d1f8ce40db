# src/errors.py

"""Exception hierarchy shared by sources, services and the API layer."""


class NaftasError(Exception):
    """Base class for all application errors.

    ``status_code`` is the HTTP status the API layer maps the error to.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DataSourceError(NaftasError):
    """An upstream fetch failed or returned an unexpected payload."""

    status_code = 500


class ValidationError(NaftasError):
    """A request parameter is missing or invalid."""

    status_code = 400


class NotFoundError(NaftasError):
    """Nothing matched the request (no city, no nearby station)."""

    status_code = 404


class ConfigurationError(NaftasError):
    """The server is configured with an unknown or unusable setting."""

    status_code = 500
