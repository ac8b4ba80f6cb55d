"""
Error taxonomy for exercise generation and answer validation.

Every error carries an ErrorKind tag and a retryable flag so callers can
branch on the kind of failure instead of parsing message strings.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(Enum):
    """Tagged failure kinds."""
    CONFIGURATION = "configuration_error"
    INVALID_INPUT = "invalid_input"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    MALFORMED_RESPONSE = "malformed_response"


class KidGuardError(Exception):
    """Base class for all errors raised by the package."""
    kind: ErrorKind = ErrorKind.INVALID_INPUT
    retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        status_code: Optional[int] = None,
        elapsed_ms: Optional[int] = None,
        attempts: int = 0,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.status_code = status_code
        self.elapsed_ms = elapsed_ms
        self.attempts = attempts

    def context(self) -> Dict[str, Any]:
        """Structured context for logs and metrics failure records."""
        return {
            "kind": self.kind.value,
            "operation": self.operation,
            "status_code": self.status_code,
            "elapsed_ms": self.elapsed_ms,
            "attempts": self.attempts,
        }


class ConfigurationError(KidGuardError, ValueError):
    """Missing or invalid configuration. Fatal, raised at construction."""
    kind = ErrorKind.CONFIGURATION


class InvalidInputError(KidGuardError, ValueError):
    """Caller input outside the contract. Never retried."""
    kind = ErrorKind.INVALID_INPUT


class InvalidCountError(InvalidInputError):
    """Requested exercise count outside [1, 10]."""


class InvalidSubjectError(InvalidInputError):
    """Unknown subject type."""


class InvalidDifficultyError(InvalidInputError):
    """Unknown difficulty level."""


class OutOfRangeError(InvalidInputError):
    """Child age outside the supported [6, 14] range."""


class GatewayError(KidGuardError):
    """Failure of a call to the upstream chat-completion provider.

    ``terminal`` is set once the retry policy has given up on the call.
    """

    def __init__(self, message: str, **kwargs: Any):
        self.terminal = kwargs.pop("terminal", False)
        super().__init__(message, **kwargs)


class RateLimited(GatewayError):
    """HTTP 429 from the provider."""
    kind = ErrorKind.RATE_LIMITED
    retryable = True


class ServerError(GatewayError):
    """HTTP 5xx from the provider, or an unusable 2xx body."""
    kind = ErrorKind.SERVER_ERROR
    retryable = True


class ClientError(GatewayError):
    """HTTP 4xx other than 429. Surfaced immediately."""
    kind = ErrorKind.CLIENT_ERROR


class Timeout(GatewayError):
    """A single attempt exceeded the configured timeout."""
    kind = ErrorKind.TIMEOUT
    retryable = True


class NetworkError(GatewayError):
    """Transport-level failure (DNS, refused or reset connection)."""
    kind = ErrorKind.NETWORK_ERROR
    retryable = True


class ExerciseGenerationFailed(KidGuardError):
    """Exercise generation could not produce a result.

    Takes the kind of the underlying failure when one is given.
    """
    kind = ErrorKind.SERVER_ERROR

    def __init__(self, message: str, *, cause: Optional[KidGuardError] = None, **kwargs: Any):
        if cause is not None:
            kwargs.setdefault("status_code", cause.status_code)
            kwargs.setdefault("elapsed_ms", cause.elapsed_ms)
            kwargs.setdefault("attempts", cause.attempts)
            self.kind = cause.kind
            self.retryable = cause.retryable
        kwargs.setdefault("operation", "generate")
        super().__init__(message, **kwargs)
        self.cause = cause


class MalformedExerciseError(ExerciseGenerationFailed):
    """Model output failed JSON parsing or the exercise schema."""
    kind = ErrorKind.MALFORMED_RESPONSE


class MalformedVerdictError(KidGuardError):
    """Model output failed the verdict schema. Absorbed by the fallback."""
    kind = ErrorKind.MALFORMED_RESPONSE

    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("operation", "validate")
        super().__init__(message, **kwargs)
