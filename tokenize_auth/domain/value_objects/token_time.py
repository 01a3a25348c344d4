"""Token time: whole seconds elapsed since the Tokenize epoch.

Counting from 2019-01-01T00:00:00Z instead of the Unix epoch keeps the
decimal representation, and therefore the wire token, shorter.
"""

from datetime import datetime, timedelta, timezone
from typing import Final, Optional

TOKEN_FORMAT_VERSION: Final[int] = 1
"""Wire format version, part of the signed material. Bump on breaking changes."""

TOKENIZE_EPOCH: Final[int] = 1546300800000
"""First millisecond of 2019 (UTC), in milliseconds since the Unix epoch."""

_EPOCH_DATETIME: Final[datetime] = datetime(2019, 1, 1, tzinfo=timezone.utc)


def current_token_time(now: Optional[datetime] = None) -> int:
    """Return the token time for `now` (defaults to the current UTC time)."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    now_ms = int(now.timestamp() * 1000)
    return (now_ms - TOKENIZE_EPOCH) // 1000


def token_time_to_datetime(value: int) -> datetime:
    """Convert a token time back to an aware UTC datetime."""
    return _EPOCH_DATETIME + timedelta(seconds=value)
