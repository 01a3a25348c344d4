"""Token value object.

A `Token` binds an account id, an issuance time and an optional prefix. Its
wire form is derived on demand, so the two mutators below only ever touch the
fields and the signature follows automatically.
"""

from typing import TYPE_CHECKING, Any, Optional

from tokenize_auth.domain.value_objects.prefix import validate_prefix

if TYPE_CHECKING:
    from tokenize_auth.domain.services.token_service import TokenService


class Token:
    """A Tokenize token.

    Tokens are owned by a single request context: `regenerate()` and
    `set_prefix()` mutate in place without locking, so callers sharing a token
    across threads must serialize access themselves.

    Attributes:
        account_id: Opaque identifier of the owning account.
        issued_at: Token time (seconds since the Tokenize epoch) of issuance.
        prefix: Optional label embedded in front of the token.
        account: The account resolved during validation, if any.
    """

    __slots__ = ("_service", "account_id", "_issued_at", "_prefix", "account")

    def __init__(
        self,
        service: "TokenService",
        account_id: str,
        issued_at: int,
        prefix: Optional[str] = None,
        account: Any = None,
    ):
        self._service = service
        self.account_id = account_id
        self._issued_at = issued_at
        self._prefix = validate_prefix(prefix)
        self.account = account

    @property
    def issued_at(self) -> int:
        return self._issued_at

    @property
    def prefix(self) -> Optional[str]:
        return self._prefix

    @property
    def is_mfa(self) -> bool:
        """Whether this token carries the service's MFA prefix."""
        return self._prefix is not None and self._prefix == self._service.mfa_prefix

    @property
    def value(self) -> str:
        """The signed wire string."""
        return self._service.signer.build_token(self.account_id, self._issued_at, self._prefix)

    def regenerate(self) -> None:
        """Resets the issuance time of the token to now."""
        self._issued_at = self._service.current_token_time()

    def set_prefix(self, prefix: Optional[str]) -> None:
        """Sets the prefix of the token, and resets the issuance time.

        Raises:
            InvalidPrefixError: If the prefix contains a dot. The token is left
                untouched in that case.
        """
        self._prefix = validate_prefix(prefix)
        self._issued_at = self._service.current_token_time()

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return (
            f"Token(account_id={self.account_id!r}, issued_at={self._issued_at}, "
            f"prefix={self._prefix!r})"
        )
