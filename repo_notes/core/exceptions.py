__all__ = [
    "NotesError",
    "ConfigurationError",
    "TransportError",
    "ContentEmptyError",
    "EncodingError",
    "RemoteError",
    "NotFoundError",
    "ConflictError",
    "AuthError",
]


class NotesError(Exception):
    """
    Base class of all errors raised by this package.
    """


class ConfigurationError(NotesError):
    """
    Raised when required settings (token, owner, repository) are missing.
    Always raised before any request is issued.
    """

    missing: list[str]

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            f"Missing required configuration: {', '.join(missing)}"
        )


class TransportError(NotesError):
    """
    Raised when the host could not be reached, e.g. DNS failure, refused
    connection or a timeout enforced by the transport.
    """


class ContentEmptyError(NotesError):
    """
    Raised when a fetch succeeded but the response has no content field.
    """

    path: str

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No content returned for '{path}'")


class EncodingError(NotesError):
    """
    Raised when a payload is not base64-encoded UTF-8 text.
    """


class RemoteError(NotesError):
    """
    Raised when the host responds with a non-success status.

    Subclasses distinguish the statuses callers typically need to handle;
    anything else is raised as this class.
    """

    status: int | None
    """HTTP status code, if the error came from a response"""

    message: str
    """Message provided by the host, or the HTTP reason"""

    def __init__(self, status: int | None, message: str):
        self.status = status
        self.message = message
        super().__init__(f"status={status}, message={message}")


class NotFoundError(RemoteError):
    """
    Raised when the requested resource does not exist (404).
    """


class ConflictError(RemoteError):
    """
    Raised when a write or delete was rejected because the supplied revision
    token is stale or missing (409, or 422 on a mutating request).

    Nothing is retried; callers decide whether to re-read and try again.
    """


class AuthError(RemoteError):
    """
    Raised when the host rejects the credentials or denies access (401/403).
    """
