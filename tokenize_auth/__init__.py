"""
Tokenize: compact, signed authentication tokens without server-side sessions.

A token binds an account id and its issuance time, optionally behind a prefix,
and is signed with HMAC-SHA256. Validation recomputes the signature, then asks
the host application for the account and checks the token against the
account's `tokens_valid_since` watermark.

Usage:
    from tokenize_auth import TokenService
    service = TokenService("my-secret")
    token = service.generate_token("user-42")
    service.validate_token(str(token), accounts.fetch)
"""

from tokenize_auth.core.exceptions import (
    ConfigurationError,
    InvalidPrefixError,
    InvalidTokenError,
    TokenFormatError,
    TokenizeError,
    TokenSignatureError,
    ValidationError,
)
from tokenize_auth.domain.interfaces import (
    IAccount,
    IAccountFetcher,
    IAsyncAccountFetcher,
    IOtpVerifier,
)
from tokenize_auth.domain.services import OtpVerifier, TokenService, TokenSigner
from tokenize_auth.domain.value_objects import (
    TOKEN_FORMAT_VERSION,
    TOKENIZE_EPOCH,
    OtpKey,
    ParsedToken,
    Token,
    TokenSecret,
    current_token_time,
    token_time_to_datetime,
)

__version__ = "1.0.0"
__all__ = [
    "ConfigurationError",
    "IAccount",
    "IAccountFetcher",
    "IAsyncAccountFetcher",
    "IOtpVerifier",
    "InvalidPrefixError",
    "InvalidTokenError",
    "OtpKey",
    "OtpVerifier",
    "ParsedToken",
    "TOKENIZE_EPOCH",
    "TOKEN_FORMAT_VERSION",
    "Token",
    "TokenFormatError",
    "TokenSecret",
    "TokenService",
    "TokenSignatureError",
    "TokenSigner",
    "TokenizeError",
    "ValidationError",
    "current_token_time",
    "token_time_to_datetime",
]
