"""Tokenize settings.

Loads configuration from environment variables and `.env` files. The signing
secret lives here only as a source; services receive it explicitly as a
`TokenSecret` so several signers with different secrets can coexist.

Security Note:
    - TOKENIZE_SECRET must be a high-entropy random value and must never be
      logged or committed to version control.
    - Rotating the secret invalidates every outstanding token at once.
"""

import logging

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class TokenizeSettings(BaseSettings):
    """Settings for token signing, the MFA upgrade path and logging."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    # Signing
    TOKENIZE_SECRET: SecretStr = SecretStr("")
    TOKENIZE_MFA_PREFIX: str = "mfa"

    # One-time passwords
    OTP_DIGITS: int = Field(default=6, ge=6, le=8)
    OTP_INTERVAL_SECONDS: int = Field(default=30, ge=1)
    OTP_VALID_WINDOW: int = Field(default=0, ge=0)  # accepted steps either side of now

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @field_validator("TOKENIZE_MFA_PREFIX")
    @classmethod
    def _validate_mfa_prefix(cls, value: str) -> str:
        if not value or "." in value:
            raise ValueError("TOKENIZE_MFA_PREFIX must be non-empty and cannot contain dots")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


settings = TokenizeSettings()
