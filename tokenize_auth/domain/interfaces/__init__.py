from .accounts import IAccount, IAccountFetcher, IAsyncAccountFetcher
from .otp import IOtpVerifier

__all__ = ["IAccount", "IAccountFetcher", "IAsyncAccountFetcher", "IOtpVerifier"]
