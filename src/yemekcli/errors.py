from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    CHALLENGE_EXHAUSTED = "CHALLENGE_EXHAUSTED"
    HTTP_ERROR = "HTTP_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    MISSING_CREDENTIALS = "MISSING_CREDENTIALS"


class YemekCliError(Exception):
    """Base class for every expected failure raised by the data-access layer.

    The client never catches these itself. The presentation layer branches on
    the concrete subclass (or ``code``) to decide what to tell the user.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }


class ChallengeExhaustedError(YemekCliError):
    """Every attempt was answered with the anti-bot challenge page."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            code=ErrorCode.CHALLENGE_EXHAUSTED,
            message=f"Blocked by the anti-bot challenge after {attempts} attempts",
            suggestion="Wait a few minutes or switch network before trying again.",
            recoverable=True,
        )
        self.attempts = attempts


class HttpStatusError(YemekCliError):
    """Non-2xx response that is not a challenge page."""

    def __init__(self, status: int, body_prefix: str) -> None:
        super().__init__(
            code=ErrorCode.HTTP_ERROR,
            message=f"API {status}: {body_prefix}",
            suggestion=(
                "The service may be temporarily unavailable."
                if status >= 500
                else "Check that your token is still valid."
            ),
            recoverable=status >= 500,
        )
        self.status = status
        self.body_prefix = body_prefix


class NetworkError(YemekCliError):
    def __init__(self, url: str, reason: str) -> None:
        super().__init__(
            code=ErrorCode.NETWORK_ERROR,
            message=f"Network error fetching {url}: {reason}",
            suggestion="Check your internet connection.",
            recoverable=True,
        )


class InvalidResponseError(YemekCliError):
    def __init__(self, message: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_RESPONSE,
            message=message,
            suggestion="The upstream API format may have changed.",
            recoverable=False,
        )


class ConfigurationError(YemekCliError):
    def __init__(self, message: str) -> None:
        super().__init__(
            code=ErrorCode.MISSING_CREDENTIALS,
            message=message,
            suggestion="Set YEMEKCLI__CREDENTIALS__TOKEN or add it to yemekcli.yaml.",
            recoverable=False,
        )
