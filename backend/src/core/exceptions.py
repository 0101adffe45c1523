"""
Domain exceptions raised by the service layer.

Every exception carries a stable machine-readable ``code`` and the HTTP status it maps to.
They are rendered by the handler registered in api/main.py as::

    {"detail": "Human-readable message", "code": "MACHINE_READABLE_CODE"}
"""
from core.constants import BLURB_MAX_LENGTH, LINK_MAX_LENGTH, TITLE_MAX_LENGTH, TITLE_MIN_LENGTH


class HypeShelfError(Exception):
    """Base class for all errors surfaced to API callers."""

    code: str = "INTERNAL_ERROR"
    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthRequiredError(HypeShelfError):
    """No verified identity, or the identity has not been provisioned as a user yet."""

    code = "AUTH_REQUIRED"
    status_code = 401
    default_message = "Authentication required"


class PermissionDeniedError(HypeShelfError):
    """Authenticated, but lacking ownership or role for the action."""

    code = "PERMISSION_DENIED"
    status_code = 403
    default_message = "You don't have permission to perform this action"


class NotFoundError(HypeShelfError):
    """Referenced recommendation does not exist."""

    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class ValidationError(HypeShelfError):
    """Field-level validation failure."""

    status_code = 400
    field: str = ""


class InvalidTitleError(ValidationError):
    code = "INVALID_TITLE"
    field = "title"
    default_message = (
        f"Title must be between {TITLE_MIN_LENGTH} and {TITLE_MAX_LENGTH} characters"
    )


class InvalidBlurbError(ValidationError):
    code = "INVALID_BLURB"
    field = "blurb"
    default_message = f"Description must be {BLURB_MAX_LENGTH} characters or less"


class InvalidLinkError(ValidationError):
    code = "INVALID_LINK"
    field = "link"
    default_message = f"URL must be a valid link (max {LINK_MAX_LENGTH} characters)"


class InvalidGenreError(ValidationError):
    code = "INVALID_GENRE"
    field = "genre"
    default_message = "Invalid genre selected"
