from .otp import OtpVerifier
from .signer import TokenSigner
from .token_service import TokenService

__all__ = ["OtpVerifier", "TokenSigner", "TokenService"]
