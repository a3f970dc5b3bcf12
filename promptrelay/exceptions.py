"""Exception hierarchy for prompt resolution and the remote client.

Read operations absorb RemoteServiceError and fall back to local defaults.
Mutating operations surface every error. Cancellation is plain
asyncio.CancelledError and is never wrapped.
"""


class PromptRelayError(Exception):
    """Base exception for all promptrelay errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidArgumentError(PromptRelayError, ValueError):
    """Raised when caller input is malformed.

    Blank prompt key, non-positive version, empty label list, missing content.
    """


class NotConfiguredError(PromptRelayError):
    """Raised when an operation needs the remote service but it is not configured."""


class RemoteServiceError(PromptRelayError):
    """Base exception for remote prompt service failures."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteNotFoundError(RemoteServiceError):
    """Raised when a mutation targets a prompt or version that does not exist.

    Fetches report absence as None instead.
    """


class RemoteTransportError(RemoteServiceError):
    """Raised on connection errors or 408/429/5xx after retries are exhausted."""


class RemoteRequestError(RemoteServiceError):
    """Raised on a non-retryable error status other than 404."""


class RemoteProtocolError(RemoteServiceError):
    """Raised when a response body is not in the expected shape."""
