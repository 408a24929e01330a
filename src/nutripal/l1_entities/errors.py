"""Domain error types."""

from __future__ import annotations


# --- Raised by the text-generation gateway for a single attempt ---


class RetryableUpstreamError(Exception):
    """HTTP 429 or 5xx from the text-generation endpoint."""

    def __init__(self, status: int, message: str = '') -> None:
        super().__init__(message or f'API call failed with status {status}')
        self.status = status


class ConnectionFailedError(Exception):
    """The endpoint could not be reached (refused, DNS, timeout)."""


class MalformedResponseError(Exception):
    """A 2xx response whose body does not carry generated text."""


# --- Terminal outcomes of a conversation turn ---


class BridgeError(Exception):
    """Base for errors a conversation turn can end with."""


class RateLimitExhausted(BridgeError):
    """Every attempt was answered with 429/5xx."""

    def __init__(self, attempts: int, last_status: int) -> None:
        super().__init__(f'Gave up after {attempts} attempts (last status {last_status})')
        self.attempts = attempts
        self.last_status = last_status


class UpstreamRejected(BridgeError):
    """Non-retryable 4xx from the endpoint."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class TransportFailure(BridgeError):
    """The endpoint stayed unreachable across all attempts."""

    def __init__(self, attempts: int, cause: Exception | None = None) -> None:
        super().__init__(f'Could not reach the model after {attempts} attempts: {cause}')
        self.attempts = attempts
        self.cause = cause


class ActionMutationFailed(BridgeError):
    """The model asked to log a meal and the backend refused it."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(f'Meal logging failed: {cause}')
        self.cause = cause


# --- Backend / session ---


class BackendError(Exception):
    """Raised when the nutrition backend rejects a request or cannot be reached."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class NotLoggedInError(Exception):
    """Raised when a session operation needs a logged-in user."""


class ChatBusyError(Exception):
    """Raised when a chat turn is submitted while another is still outstanding."""
