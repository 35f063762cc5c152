"""Application error taxonomy.

Services raise these; the handlers registered in ``main.py`` turn them into
``{"statusCode", "message", "success"}`` JSON responses.
"""


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code: int = 500
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ApiError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "Invalid request"


class ConflictError(ApiError):
    """Duplicate user. Reported as 400 to match the register contract."""

    status_code = 400
    default_message = "User already exists"


class AuthError(ApiError):
    """Bad credentials or unusable session token."""

    status_code = 401
    default_message = "Unauthorized request"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Not found"


class InternalError(ApiError):
    status_code = 500


class MailDeliveryError(InternalError):
    """The mail transport refused or failed to deliver a message."""

    default_message = "Failed to send email"
