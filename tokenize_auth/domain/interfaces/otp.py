"""One-time password verification port."""

from abc import ABC, abstractmethod


class IOtpVerifier(ABC):
    """Verifies user supplied one-time codes for the MFA upgrade path."""

    @abstractmethod
    def verify_totp(self, code: str, secret: str) -> bool:
        """Checks a time-based code against a base32 secret."""
        raise NotImplementedError

    @abstractmethod
    def verify_hotp(self, code: str, secret: str, counter: int) -> bool:
        """Checks a counter-based code against a base32 secret."""
        raise NotImplementedError
