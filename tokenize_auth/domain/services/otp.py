"""HOTP / TOTP verification for the MFA upgrade path.

Implements RFC 4226 (HOTP) and RFC 6238 (TOTP) with Google Authenticator
defaults: base32 secrets, 6 digits, 30 second steps, HMAC-SHA1. A code that
was accepted once for a given secret and counter is never accepted again.
"""

import base64
import binascii
import hashlib
import hmac
import secrets
import threading
import time
from typing import Callable, Dict, Optional, Set
from urllib.parse import quote, urlencode

import structlog

from tokenize_auth.domain.interfaces.otp import IOtpVerifier
from tokenize_auth.domain.value_objects.otp_key import OtpKey

logger = structlog.get_logger(__name__)

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"


def decode_base32_secret(secret: str) -> bytes:
    """Decode a user facing base32 secret (case and padding insensitive).

    Raises:
        ValueError: If the secret is not valid base32.
    """
    normalized = secret.replace(" ", "").upper().rstrip("=")
    padded = normalized + "=" * (-len(normalized) % 8)
    try:
        return base64.b32decode(padded, casefold=True)
    except binascii.Error as exc:
        raise ValueError("OTP secret is not valid base32") from exc


class OtpVerifier(IOtpVerifier):
    """Verifies one-time codes and issues new OTP keys.

    Args:
        digits: Code length.
        interval: TOTP step in seconds.
        window: Number of steps accepted on either side of the current one.
        digest: Hash algorithm name for the HMAC.
        clock: Returns the current Unix time in seconds.
    """

    def __init__(
        self,
        digits: int = 6,
        interval: int = 30,
        window: int = 0,
        digest: str = "sha1",
        clock: Callable[[], float] = time.time,
    ):
        if digits < 6 or digits > 8:
            raise ValueError("digits must be between 6 and 8")
        if interval < 1:
            raise ValueError("interval must be positive")
        self.digits = digits
        self.interval = interval
        self.window = max(0, window)
        self.digest = digest
        self._clock = clock
        self._used: Dict[str, Set[int]] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "OtpVerifier":
        return cls(
            digits=settings.OTP_DIGITS,
            interval=settings.OTP_INTERVAL_SECONDS,
            window=settings.OTP_VALID_WINDOW,
        )

    def generate_hotp(self, secret: str, counter: int) -> str:
        """Computes the code for `counter`."""
        key = decode_base32_secret(secret)
        digest = hmac.new(key, counter.to_bytes(8, "big"), self.digest).digest()
        offset = digest[-1] & 0x0F
        code_int = int.from_bytes(digest[offset : offset + 4], "big") & 0x7FFFFFFF
        return str(code_int % (10 ** self.digits)).zfill(self.digits)

    def generate_totp(self, secret: str, at: Optional[float] = None) -> str:
        """Computes the code for the time step containing `at` (default: now)."""
        return self.generate_hotp(secret, self._counter_at(self._clock() if at is None else at))

    def verify_hotp(self, code: str, secret: str, counter: int) -> bool:
        return self._verify_counter(code, secret, counter)

    def verify_totp(self, code: str, secret: str) -> bool:
        if not self._well_formed(code, secret):
            return False
        current = self._counter_at(self._clock())
        oldest = current - self.window
        for counter in range(oldest, current + self.window + 1):
            if counter >= 0 and self._verify_counter(code, secret, counter, oldest=oldest):
                return True
        return False

    def generate_key(self, name: str = "Secret Key", issuer: Optional[str] = None, hotp: bool = False) -> OtpKey:
        """Creates a random 16 character base32 secret and its provisioning URI."""
        base32 = "".join(secrets.choice(BASE32_ALPHABET) for _ in range(16))
        params = {"secret": base32}
        if issuer:
            params["issuer"] = issuer
        if hotp:
            params["counter"] = "0"
        if self.digits != 6:
            params["digits"] = str(self.digits)
        if not hotp and self.interval != 30:
            params["period"] = str(self.interval)
        uri = f"otpauth://{'h' if hotp else 't'}otp/{quote(name)}?{urlencode(params, quote_via=quote)}"
        return OtpKey(base32=base32, provisioning_uri=uri)

    def _counter_at(self, timestamp: float) -> int:
        return int(timestamp // self.interval)

    def _well_formed(self, code: str, secret: str) -> bool:
        return (
            bool(secret)
            and isinstance(code, str)
            and len(code) == self.digits
            and code.isascii()
            and code.isdigit()
        )

    def _verify_counter(self, code: str, secret: str, counter: int, oldest: Optional[int] = None) -> bool:
        if not self._well_formed(code, secret) or counter < 0:
            return False
        try:
            key = decode_base32_secret(secret)
            expected = self.generate_hotp(secret, counter)
        except ValueError:
            logger.warning("OTP secret invalid")
            return False
        if not hmac.compare_digest(expected, code):
            return False
        return self._consume(hashlib.sha256(key).hexdigest(), counter, oldest)

    def _consume(self, key_id: str, counter: int, oldest: Optional[int]) -> bool:
        # Time-based codes below `oldest` can no longer verify, so they are dropped.
        with self._lock:
            used = self._used.setdefault(key_id, set())
            if oldest is not None:
                used.difference_update([seen for seen in used if seen < oldest])
            if counter in used:
                logger.info("OTP code replay refused")
                return False
            used.add(counter)
            return True
