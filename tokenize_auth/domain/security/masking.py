"""Masking helpers for log output.

Wire tokens are bearer credentials and account ids may be personal data, so
neither is written to logs verbatim.
"""


def mask_token(token: str) -> str:
    """Apply token masking for security compliance.

    Args:
        token: Raw wire token to mask

    Returns:
        str: Masked token showing only the first and last 4 characters
    """
    if not token:
        return "[empty]"

    if len(token) <= 8:
        return "*" * len(token)

    return f"{token[:4]}***{token[-4:]}"


def mask_identifier(identifier: str) -> str:
    """Mask an account identifier, keeping its first two characters."""
    if not identifier:
        return "[empty]"
    if len(identifier) <= 2:
        return "*" * len(identifier)
    return identifier[:2] + "*" * (len(identifier) - 2)
