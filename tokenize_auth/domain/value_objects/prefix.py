"""Token prefix rules."""

from typing import Final, Optional

from tokenize_auth.core.exceptions import InvalidPrefixError

DELIMITER: Final[str] = "."


def validate_prefix(prefix: Optional[str]) -> Optional[str]:
    """Return `prefix` unchanged if it can be embedded in a wire token.

    `None` means "no prefix". An empty string would produce a leading
    delimiter and is refused together with prefixes containing the delimiter.

    Raises:
        InvalidPrefixError: If the prefix is empty or contains a dot.
    """
    if prefix is None:
        return None
    if not isinstance(prefix, str):
        raise InvalidPrefixError("Prefix must be a string.")
    if not prefix:
        raise InvalidPrefixError("Prefix cannot be empty.")
    if DELIMITER in prefix:
        raise InvalidPrefixError()
    return prefix
