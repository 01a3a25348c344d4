"""Account ports consumed by the token service.

Tokenize never stores accounts. The host application implements these
interfaces (or passes duck-typed equivalents) and the token service calls
them after a token's signature has been verified.
"""

from abc import ABC, abstractmethod
from typing import Optional


class IAccount(ABC):
    """Interface an account entity implements to work with Tokenize."""

    @property
    @abstractmethod
    def account_id(self) -> str:
        """The id embedded in the token. Not secret."""
        raise NotImplementedError

    @abstractmethod
    def tokens_valid_since(self) -> int:
        """Token time since which tokens are valid.

        Any token issued at or before this value is rejected. Store
        `current_token_time()` here when creating the account, and again
        whenever all of its tokens must be invalidated (password change,
        logout everywhere).
        """
        raise NotImplementedError

    def has_mfa(self) -> bool:
        """Whether the account has multi-factor authentication enabled."""
        return False


class IAccountFetcher(ABC):
    """Synchronous account lookup."""

    @abstractmethod
    def fetch(self, account_id: str) -> Optional[IAccount]:
        """Returns the account for `account_id`, or `None` if it does not exist."""
        raise NotImplementedError


class IAsyncAccountFetcher(ABC):
    """Asynchronous account lookup."""

    @abstractmethod
    async def fetch(self, account_id: str) -> Optional[IAccount]:
        """Returns the account for `account_id`, or `None` if it does not exist."""
        raise NotImplementedError
