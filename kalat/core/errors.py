"""Error taxonomy shared by services and the HTTP layer.

Each error carries the HTTP status it maps to. Validation and authorization
messages are safe to show verbatim; TransientError messages are not, so the
exception handler replaces them with a generic one.
"""


class ArchiveError(Exception):
    """Base class for errors raised by the archive services."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(ArchiveError):
    """Missing or invalid input; correctable by the caller."""

    status_code = 400


class MissingField(ValidationError):
    """A required field is absent or blank."""

    def __init__(self, *fields: str) -> None:
        self.fields = fields
        names = ", ".join(fields[:-1]) + (" and " if len(fields) > 1 else "") + fields[-1]
        verb = "are" if len(fields) > 1 else "is"
        super().__init__(f"{names} {verb} required")


class InvalidFragmentType(ValidationError):
    """Fragment type is not one of the supported kinds."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__("Unsupported fragment type")


class AuthenticationError(ArchiveError):
    """Missing, invalid or expired credentials; the caller must log in again."""

    status_code = 401


class NoSuchAccount(AuthenticationError):
    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("Invalid username or password")


class BadCredentials(AuthenticationError):
    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("Invalid username or password")


class InvalidToken(AuthenticationError):
    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


class Unauthorized(AuthenticationError):
    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class AuthorizationError(ArchiveError):
    """Valid session without the required role."""

    status_code = 403


class Forbidden(AuthorizationError):
    def __init__(self, message: str = "Admin privileges required") -> None:
        super().__init__(message)


class NotFoundError(ArchiveError):
    status_code = 404


class AccountExists(ArchiveError):
    """Username already taken (provisioning only)."""

    status_code = 409

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"User '{username}' already exists.")


class TransientError(ArchiveError):
    """Database or network failure; logged in detail, reported generically."""

    status_code = 500
