"""Client-side exceptions raised by the registry HTTP collaborator."""


class ClientError(Exception):
    """Base exception for registry client operations."""

    pass


class AuthenticationError(ClientError):
    """The session token is missing, invalid or expired."""

    pass


class SessionExpiredError(AuthenticationError):
    """Start-up verification failed; the UI session must end."""

    def __init__(self, message: str, redirect_url: str):
        super().__init__(message)
        self.redirect_url = redirect_url


class RecordNotFoundError(ClientError):
    """The server has no record with the requested ID."""

    def __init__(self, record_id: str):
        super().__init__(f"Record {record_id} not found")
        self.record_id = record_id


class RemoteError(ClientError):
    """Any other failed call: transport error, 4xx/5xx, malformed reply."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
