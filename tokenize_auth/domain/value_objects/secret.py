"""Signing secret value object."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from tokenize_auth.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from tokenize_auth.core.config.settings import TokenizeSettings


@dataclass(frozen=True)
class TokenSecret:
    """Immutable HMAC key used to sign and verify tokens.

    The raw bytes are excluded from `repr` so the secret never
    ends up in logs or tracebacks by accident.

    Attributes:
        value: Raw key bytes. Strings are encoded as UTF-8.
    """

    value: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.value, str):
            object.__setattr__(self, "value", self.value.encode("utf-8"))
        if not isinstance(self.value, (bytes, bytearray)):
            raise ConfigurationError("Token secret must be str or bytes")
        if not self.value:
            raise ConfigurationError("Token secret cannot be empty")
        object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def from_value(cls, value: Union[str, bytes, "TokenSecret"]) -> "TokenSecret":
        if isinstance(value, TokenSecret):
            return value
        return cls(value)

    @classmethod
    def from_settings(cls, settings: "TokenizeSettings") -> "TokenSecret":
        """Build the secret from `TOKENIZE_SECRET`.

        Raises:
            ConfigurationError: If the setting is empty.
        """
        raw = settings.TOKENIZE_SECRET.get_secret_value()
        if not raw:
            raise ConfigurationError(
                "TOKENIZE_SECRET is not set. Provide it via environment or .env file."
            )
        return cls(raw)

    def __str__(self) -> str:
        return "**********"
