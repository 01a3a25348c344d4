"""Token codec and signer.

Wire format (ASCII, dot delimited, base64 without padding):

    [<prefix>.]<b64(account id)>.<b64(decimal issued_at)>.<b64(hmac)>

The HMAC-SHA256 is computed over ``"TTF.<version>." + <unsigned part>``. The
unsigned part is re-derived verbatim from the received string when verifying,
so verification never depends on re-encoding the decoded fields.
"""

import base64
import binascii
import hashlib
import hmac
import re
from typing import Optional, Union

import structlog

from tokenize_auth.core.exceptions import (
    ConfigurationError,
    TokenFormatError,
    TokenSignatureError,
    ValidationError,
)
from tokenize_auth.domain.security.masking import mask_token
from tokenize_auth.domain.value_objects.parsed_token import ParsedToken
from tokenize_auth.domain.value_objects.prefix import DELIMITER, validate_prefix
from tokenize_auth.domain.value_objects.secret import TokenSecret
from tokenize_auth.domain.value_objects.token_time import TOKEN_FORMAT_VERSION

logger = structlog.get_logger(__name__)

SIGNATURE_DOMAIN = "TTF"
_TOKEN_TIME_PATTERN = re.compile(r"-?[0-9]+")


def b64encode_unpadded(data: bytes) -> str:
    """Standard alphabet base64 with the trailing '=' padding removed."""
    return base64.b64encode(data).decode("ascii").rstrip("=")


def b64decode_unpadded(segment: str) -> bytes:
    """Strict standard alphabet base64 decode, with or without padding.

    Raises:
        TokenFormatError: If the segment is not valid base64.
    """
    stripped = segment.rstrip("=")
    if not stripped:
        raise TokenFormatError("Malformed token segment.")
    padded = stripped + "=" * (-len(stripped) % 4)
    try:
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise TokenFormatError("Malformed token segment.") from exc


class TokenSigner:
    """Encodes, signs and verifies wire tokens with a single secret.

    Signers hold no mutable state and are safe to share between threads and
    tasks. Use one instance per secret.

    Args:
        secret: Signing key, as a `TokenSecret`, str or bytes.
        version: Wire format version mixed into the signed material.

    Raises:
        ConfigurationError: If HMAC-SHA256 is unavailable or the secret is empty.
    """

    def __init__(self, secret: Union[TokenSecret, str, bytes], version: int = TOKEN_FORMAT_VERSION):
        if "sha256" not in hashlib.algorithms_available:
            raise ConfigurationError(
                "Tokenize is unable to function if the HMAC-SHA256 algorithm isn't present!"
            )
        self._secret = TokenSecret.from_value(secret)
        self.version = version
        self._domain = f"{SIGNATURE_DOMAIN}.{version}."

    def encode_unsigned(self, account_id: str, issued_at: int, prefix: Optional[str] = None) -> str:
        """Builds the unsigned part of a token.

        Raises:
            ValidationError: If the account id is empty.
            InvalidPrefixError: If the prefix is empty or contains a dot.
        """
        prefix = validate_prefix(prefix)
        if not account_id:
            raise ValidationError("Account id cannot be empty.")
        if isinstance(issued_at, bool) or not isinstance(issued_at, int):
            raise ValidationError("Token time must be an integer.")

        account_part = b64encode_unpadded(account_id.encode("utf-8"))
        time_part = b64encode_unpadded(str(issued_at).encode("ascii"))
        unsigned = f"{account_part}{DELIMITER}{time_part}"
        if prefix is not None:
            unsigned = f"{prefix}{DELIMITER}{unsigned}"
        return unsigned

    def sign(self, unsigned: str) -> str:
        """Returns the unpadded base64 HMAC-SHA256 of the domain separated string."""
        message = (self._domain + unsigned).encode("utf-8", "surrogatepass")
        digest = hmac.new(self._secret.value, message, hashlib.sha256).digest()
        return b64encode_unpadded(digest)

    def build_token(self, account_id: str, issued_at: int, prefix: Optional[str] = None) -> str:
        unsigned = self.encode_unsigned(account_id, issued_at, prefix)
        return f"{unsigned}{DELIMITER}{self.sign(unsigned)}"

    def parse_and_verify(self, token: str) -> ParsedToken:
        """Verifies a wire token and decodes its fields.

        The segment count is checked first, then the signature. No field is
        decoded until the signature matched.

        Raises:
            TokenFormatError: Wrong segment count, or an undecodable field.
            TokenSignatureError: The signature does not match.
        """
        if not isinstance(token, str):
            raise TokenFormatError("Token must be a string.")
        parts = token.split(DELIMITER)
        if len(parts) not in (3, 4):
            logger.debug("Token rejected: bad segment count", segments=len(parts))
            raise TokenFormatError("Token must have 3 or 4 segments.")

        unsigned = DELIMITER.join(parts[:-1])
        expected = self.sign(unsigned)
        if not hmac.compare_digest(expected.encode("ascii"), parts[-1].encode("utf-8", "surrogatepass")):
            logger.warning("Token signature mismatch", token=mask_token(token))
            raise TokenSignatureError()

        prefix: Optional[str] = None
        if len(parts) == 4:
            prefix = parts[0]
            if not prefix:
                raise TokenFormatError("Token prefix cannot be empty.")
        account_segment, time_segment = parts[-3], parts[-2]

        try:
            account_id = b64decode_unpadded(account_segment).decode("utf-8")
            raw_time = b64decode_unpadded(time_segment).decode("ascii")
        except UnicodeDecodeError as exc:
            raise TokenFormatError("Malformed token segment.") from exc
        if not account_id:
            raise TokenFormatError("Token account id is empty.")
        if not _TOKEN_TIME_PATTERN.fullmatch(raw_time):
            raise TokenFormatError("Token time is not an integer.")

        return ParsedToken(account_id=account_id, issued_at=int(raw_time), prefix=prefix)

    def __repr__(self) -> str:
        return f"TokenSigner(version={self.version})"
