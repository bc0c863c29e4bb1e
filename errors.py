# errors.py
"""Error taxonomy for the relay.

Every failure a request can hit is raised as one of these classes at the
place it happens. The HTTP layer never inspects messages; it asks the error
for its status code and body.
"""

from typing import Any

AUTH_FAILED_MESSAGE = "Authentication failed: Invalid or missing API credentials"


class RelayError(Exception):
    """Base class, also used for failures nobody classified."""

    status_code = 500

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response(self) -> dict:
        return {"error": f"Relay error: {self.message}"}


class InvalidInput(RelayError):
    """Request body failed validation. Raised before any network call."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field

    def to_response(self) -> dict:
        return {"error": self.message}


class MalformedSignature(RelayError):
    status_code = 400

    def to_response(self) -> dict:
        return {"error": "Invalid signature format"}


class UnknownContract(RelayError):
    status_code = 500

    def __init__(self, address: str):
        super().__init__("Unknown contract address")
        self.address = address

    def to_response(self) -> dict:
        return {"error": "Unknown contract address"}


class ProviderUnavailable(RelayError):
    """The relayer provider could not be reached during the liveness check."""

    status_code = 500

    def to_response(self) -> dict:
        return {"error": AUTH_FAILED_MESSAGE}


class AuthenticationFailed(RelayError):
    status_code = 500

    def to_response(self) -> dict:
        return {"error": AUTH_FAILED_MESSAGE}


class InsufficientFunds(RelayError):
    status_code = 403

    def to_response(self) -> dict:
        return {"error": "Relayer has insufficient funds"}


class RejectedByChain(RelayError):
    """The provider or node refused the transaction parameters.

    `details` carries the provider payload when there is one.
    """

    status_code = 400

    def to_response(self) -> dict:
        details = self.details if self.details is not None else self.message
        return {"error": "Invalid transaction parameters", "details": details}


class ConfigError(ValueError):
    """Bad or missing startup configuration. Fatal, never a per-request error."""


def classify(exc: BaseException) -> tuple[int, dict]:
    """Map any exception to (status code, response body)."""
    if not isinstance(exc, RelayError):
        exc = RelayError(str(exc))
    return exc.status_code, exc.to_response()
