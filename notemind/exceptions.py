"""Domain errors raised by services and rendered by the API layer."""


class NoteMindError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 400
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(Exception):
    """Missing or invalid process configuration. Fatal at startup."""


class DuplicateEmail(NoteMindError):
    status_code = 400
    default_message = "User already exists with this email"


class DuplicateTag(NoteMindError):
    status_code = 400
    default_message = "You already have a tag with this name"


class InvalidCredentials(NoteMindError):
    status_code = 401
    default_message = "Invalid credentials"


class InvalidOrExpiredToken(NoteMindError):
    status_code = 400
    default_message = "Invalid or expired token"


class Unauthorized(NoteMindError):
    status_code = 401
    default_message = "Not authorized to access this route"


class Forbidden(NoteMindError):
    status_code = 403
    default_message = "Not allowed to access this route"


class NotFound(NoteMindError):
    status_code = 404
    default_message = "Not found"


class AIServiceError(NoteMindError):
    """Failure talking to the language-model provider."""

    status_code = 500
    default_message = "Failed to summarize text"

    def __init__(self, message: str | None = None, code: str = "UNKNOWN_ERROR", status_code: int | None = None) -> None:
        super().__init__(message)
        self.code = code
        if status_code is not None:
            self.status_code = status_code
