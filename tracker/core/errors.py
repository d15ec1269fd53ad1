"""Error taxonomy. Each error carries the HTTP status it is rendered with."""


class TrackerError(Exception):
    """Base class for errors rendered to clients as {"error": message}."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TrackerError):
    """Missing or malformed input (required fields, weak password)."""

    status_code = 400


class AuthenticationError(TrackerError):
    """Identity could not be established."""

    status_code = 400


class InvalidCredentials(AuthenticationError):
    """Unknown username or wrong password."""

    status_code = 400


class AccessDenied(AuthenticationError):
    """Identity is known but may not log in or hold a session (viewer, pending, blocked, bad token)."""

    status_code = 403


class AuthorizationError(TrackerError):
    """Authenticated role lacks the capability for this operation."""

    status_code = 403


class NotFound(TrackerError):
    status_code = 404


class DuplicateEntity(TrackerError):
    """Unique constraint would be violated."""

    status_code = 400


class DuplicateUser(DuplicateEntity):
    pass


class IngestFormatError(TrackerError):
    """Uploaded workbook is unreadable or has no recognizable header row."""

    status_code = 400


class StorageError(TrackerError):
    status_code = 500


class TooManyRequests(TrackerError):
    """Client exceeded the attempt budget for a throttled endpoint."""

    status_code = 429
