import inspect
from typing import Any, Callable, Optional, Union

import structlog

from tokenize_auth.core.config.settings import TokenizeSettings
from tokenize_auth.domain.interfaces.accounts import IAccountFetcher, IAsyncAccountFetcher
from tokenize_auth.domain.interfaces.otp import IOtpVerifier
from tokenize_auth.domain.security.masking import mask_identifier
from tokenize_auth.domain.services.otp import OtpVerifier
from tokenize_auth.domain.services.signer import TokenSigner
from tokenize_auth.domain.value_objects.parsed_token import ParsedToken
from tokenize_auth.domain.value_objects.prefix import validate_prefix
from tokenize_auth.domain.value_objects.secret import TokenSecret
from tokenize_auth.domain.value_objects.token import Token
from tokenize_auth.domain.value_objects.token_time import current_token_time

logger = structlog.get_logger(__name__)

AccountFetcher = Union[IAccountFetcher, IAsyncAccountFetcher, Callable[[str], Any]]


class TokenService:
    """Issues and validates Tokenize tokens.

    Tokens are stateless: revocation relies entirely on the account's
    `tokens_valid_since` watermark, which the host application stores and
    bumps whenever all tokens of an account must stop working.

    Validation first parses and verifies the token without any I/O, then
    fetches the account. Format and signature problems raise; a missing or
    revoked account is an ordinary `None` result. The sync and async entry
    points share the same verification routine and differ only in how they
    call the fetcher.

    Attributes:
        signer (TokenSigner): Codec bound to this service's secret.
        mfa_prefix (str): Prefix given to tokens upgraded through MFA.
        otp_verifier (IOtpVerifier): Verifier used by `upgrade`.
    """

    def __init__(
        self,
        secret: Union[TokenSecret, str, bytes],
        *,
        otp_verifier: Optional[IOtpVerifier] = None,
        mfa_prefix: str = "mfa",
        clock: Callable[[], int] = current_token_time,
    ):
        self.signer = TokenSigner(secret)
        self.mfa_prefix = validate_prefix(mfa_prefix)
        self.otp_verifier = otp_verifier or OtpVerifier()
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Optional[TokenizeSettings] = None) -> "TokenService":
        """Builds a service from `TokenizeSettings` (the module default if omitted).

        Raises:
            ConfigurationError: If `TOKENIZE_SECRET` is not set.
        """
        if settings is None:
            from tokenize_auth.core.config.settings import settings as default_settings

            settings = default_settings
        return cls(
            TokenSecret.from_settings(settings),
            otp_verifier=OtpVerifier.from_settings(settings),
            mfa_prefix=settings.TOKENIZE_MFA_PREFIX,
        )

    def current_token_time(self) -> int:
        """Current token time based on the Tokenize epoch."""
        return self._clock()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate_token(self, account: Any, prefix: Optional[str] = None) -> Token:
        """Generates a token for an account, issued now.

        Args:
            account: The account id, or an object exposing `account_id`.
            prefix: Optional prefix for the token.

        Returns:
            Token: The new token. `str(token)` gives its wire form.

        Raises:
            InvalidPrefixError: If the prefix contains a dot.
            ValidationError: If the account id is empty.
        """
        account_id = _account_id_of(account)
        token = Token(
            self,
            account_id,
            self.current_token_time(),
            prefix,
            account=None if isinstance(account, str) else account,
        )
        # Encoding validates the account id.
        self.signer.encode_unsigned(token.account_id, token.issued_at, token.prefix)
        logger.debug(
            "Token generated",
            account_id=mask_identifier(account_id),
            issued_at=token.issued_at,
            prefixed=token.prefix is not None,
        )
        return token

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def verify(self, token: str) -> ParsedToken:
        """Parses and signature-checks a wire token without fetching the account.

        Raises:
            TokenFormatError: If the token is malformed.
            TokenSignatureError: If the signature does not match.
        """
        return self.signer.parse_and_verify(token)

    def validate_token(self, token: str, fetcher: AccountFetcher) -> Optional[Token]:
        """Validates a token, fetching its account synchronously.

        Args:
            token: The wire token.
            fetcher: `IAccountFetcher` or a callable taking the account id.

        Returns:
            The token with its resolved `account`, or `None` if the account does
            not exist or its tokens were invalidated after issuance.

        Raises:
            TokenFormatError: If the token is malformed.
            TokenSignatureError: If the signature does not match.
            TypeError: If the fetcher returns an awaitable.
        """
        parsed = self.verify(token)
        return self._accept(parsed, _fetch_sync(fetcher, parsed.account_id))

    async def validate_token_async(self, token: str, fetcher: AccountFetcher) -> Optional[Token]:
        """Validates a token, awaiting the account fetch.

        Format and signature checks run before the fetch is issued. Accepts
        both async and sync fetchers. Exceptions raised by the fetcher
        propagate to the caller.
        """
        parsed = self.verify(token)
        return self._accept(parsed, await _fetch_async(fetcher, parsed.account_id))

    def _accept(self, parsed: ParsedToken, account: Any) -> Optional[Token]:
        if account is None:
            logger.info("Token rejected: account not found", account_id=mask_identifier(parsed.account_id))
            return None
        valid_since = _tokens_valid_since(account)
        if parsed.issued_at <= valid_since:
            logger.info(
                "Token rejected: issued before account watermark",
                account_id=mask_identifier(parsed.account_id),
                issued_at=parsed.issued_at,
                valid_since=valid_since,
            )
            return None
        return Token(self, parsed.account_id, parsed.issued_at, parsed.prefix, account=account)

    # ------------------------------------------------------------------
    # MFA upgrade
    # ------------------------------------------------------------------

    def upgrade(
        self,
        token: str,
        code: str,
        otp_secret: str,
        fetcher: AccountFetcher,
        counter: Optional[int] = None,
    ) -> Optional[Token]:
        """Upgrades a token to an MFA token.

        The token goes through the same account and watermark checks as
        `validate_token` before the code is looked at, so a revoked token
        cannot be turned into a fresh MFA token.

        Args:
            token: The wire token of the user.
            code: User-provided one-time code.
            otp_secret: Base32 OTP secret bound to the user.
            fetcher: `IAccountFetcher` or a callable taking the account id.
            counter: If None a TOTP check is performed, a HOTP check otherwise.

        Returns:
            A fresh token carrying the MFA prefix, or `None` if the token is
            revoked, the account is gone, or the code is wrong.

        Raises:
            TokenFormatError: If the token is malformed.
            TokenSignatureError: If the signature does not match.
            TypeError: If the fetcher returns an awaitable.
        """
        parsed = self.verify(token)
        current = self._accept(parsed, _fetch_sync(fetcher, parsed.account_id))
        return self._upgrade_accepted(current, code, otp_secret, counter)

    async def upgrade_async(
        self,
        token: str,
        code: str,
        otp_secret: str,
        fetcher: AccountFetcher,
        counter: Optional[int] = None,
    ) -> Optional[Token]:
        """Same as `upgrade`, awaiting the account fetch."""
        parsed = self.verify(token)
        current = self._accept(parsed, await _fetch_async(fetcher, parsed.account_id))
        return self._upgrade_accepted(current, code, otp_secret, counter)

    def _upgrade_accepted(
        self, current: Optional[Token], code: str, otp_secret: str, counter: Optional[int]
    ) -> Optional[Token]:
        if current is None:
            return None
        if counter is None:
            accepted = self.otp_verifier.verify_totp(code, otp_secret)
        else:
            accepted = self.otp_verifier.verify_hotp(code, otp_secret, counter)
        if not accepted:
            logger.info("MFA upgrade refused", account_id=mask_identifier(current.account_id))
            return None
        logger.debug("MFA upgrade accepted", account_id=mask_identifier(current.account_id))
        return Token(
            self, current.account_id, self.current_token_time(), self.mfa_prefix, account=current.account
        )


def _fetch_sync(fetcher: AccountFetcher, account_id: str) -> Any:
    account = _fetch_function(fetcher)(account_id)
    if inspect.isawaitable(account):
        if inspect.iscoroutine(account):
            account.close()
        raise TypeError("Fetcher returned an awaitable; use the async variant instead")
    return account


async def _fetch_async(fetcher: AccountFetcher, account_id: str) -> Any:
    account = _fetch_function(fetcher)(account_id)
    if inspect.isawaitable(account):
        account = await account
    return account


def _account_id_of(account: Any) -> str:
    if isinstance(account, str):
        return account
    account_id = getattr(account, "account_id", None)
    if callable(account_id):
        account_id = account_id()
    if not isinstance(account_id, str):
        raise TypeError("account must be a string id or expose a string account_id")
    return account_id


def _fetch_function(fetcher: AccountFetcher) -> Callable[[str], Any]:
    fetch = getattr(fetcher, "fetch", None)
    if callable(fetch):
        return fetch
    if callable(fetcher):
        return fetcher
    raise TypeError("fetcher must be callable or expose a fetch(account_id) method")


def _tokens_valid_since(account: Any) -> int:
    value = getattr(account, "tokens_valid_since")
    if callable(value):
        value = value()
    return int(value)
