from __future__ import annotations

"""Structured exception hierarchy for Tokenize.

Every error carries a machine-readable `code` for programmatic handling and a
human-readable `message` for logging. Format and signature failures are raised
before any account lookup happens; revoked or unknown accounts are not errors
and surface as a `None` validation result instead.
"""

from typing import Final

__all__: Final = [
    "TokenizeError",
    "ConfigurationError",
    "ValidationError",
    "InvalidPrefixError",
    "InvalidTokenError",
    "TokenFormatError",
    "TokenSignatureError",
]


class TokenizeError(Exception):
    """Base exception class for all custom errors raised by Tokenize.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Configuration errors (fatal, abort startup)
# ---------------------------------------------------------------------------


class ConfigurationError(TokenizeError):
    """Raised when the signer cannot operate in this environment.

    Covers a missing HMAC-SHA256 primitive and an empty signing secret. These
    are not meant to be handled per call.
    """

    def __init__(self, message: str, code: str = "configuration_error"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Input validation errors
# ---------------------------------------------------------------------------


class ValidationError(TokenizeError, ValueError):
    """Raised when values handed to the token builder are unusable."""

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


class InvalidPrefixError(ValidationError):
    """Raised when a token prefix is empty or contains the delimiter."""

    def __init__(self, message: str = "Prefix cannot contain dots.", code: str = "invalid_prefix"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Wire token errors
# ---------------------------------------------------------------------------


class InvalidTokenError(TokenizeError):
    """Base for every reason a wire token cannot be trusted."""

    def __init__(self, message: str, code: str = "invalid_token"):
        super().__init__(message, code)


class TokenFormatError(InvalidTokenError):
    """Raised when a wire token is structurally malformed.

    Either it does not split into 3 or 4 segments, or one of its segments
    fails base64 or integer decoding.
    """

    def __init__(self, message: str = "Malformed token.", code: str = "token_format_error"):
        super().__init__(message, code)


class TokenSignatureError(InvalidTokenError):
    """Raised when the recomputed signature does not match the supplied one."""

    def __init__(self, message: str = "Token signature mismatch.", code: str = "token_signature_error"):
        super().__init__(message, code)
