"""Value objects for the token domain."""

from .otp_key import OtpKey
from .parsed_token import ParsedToken
from .prefix import DELIMITER, validate_prefix
from .secret import TokenSecret
from .token import Token
from .token_time import (
    TOKEN_FORMAT_VERSION,
    TOKENIZE_EPOCH,
    current_token_time,
    token_time_to_datetime,
)

__all__ = [
    "DELIMITER",
    "OtpKey",
    "ParsedToken",
    "TOKEN_FORMAT_VERSION",
    "TOKENIZE_EPOCH",
    "Token",
    "TokenSecret",
    "current_token_time",
    "token_time_to_datetime",
    "validate_prefix",
]
