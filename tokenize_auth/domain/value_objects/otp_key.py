"""One-time password key value object."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class OtpKey:
    """A freshly generated OTP secret and its provisioning URI.

    Attributes:
        base32: Base32 encoded shared secret, to be stored with the account.
        provisioning_uri: `otpauth://` URI that authenticator apps can import.
    """

    base32: str = field(repr=False)
    provisioning_uri: str = field(repr=False)
