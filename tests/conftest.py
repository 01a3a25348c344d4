from dataclasses import dataclass

import pytest

from tokenize_auth.domain.interfaces.accounts import IAccount, IAccountFetcher
from tokenize_auth.domain.services.token_service import TokenService

TEST_SECRET = "s3cr3t"


class FakeClock:
    """Controllable token time source."""

    def __init__(self, now: int = 12345):
        self.now = now

    def __call__(self) -> int:
        return self.now


@dataclass
class FakeAccount(IAccount):
    id: str
    valid_since: int = 0
    mfa: bool = False

    @property
    def account_id(self) -> str:
        return self.id

    def tokens_valid_since(self) -> int:
        return self.valid_since

    def has_mfa(self) -> bool:
        return self.mfa


class InMemoryAccounts(IAccountFetcher):
    def __init__(self, *accounts: FakeAccount):
        self.accounts = {account.id: account for account in accounts}
        self.calls = []

    def fetch(self, account_id: str):
        self.calls.append(account_id)
        return self.accounts.get(account_id)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_service(clock):
    return TokenService(TEST_SECRET, clock=clock)


@pytest.fixture
def account():
    return FakeAccount("user-42", valid_since=100)


@pytest.fixture
def accounts(account):
    return InMemoryAccounts(account)
