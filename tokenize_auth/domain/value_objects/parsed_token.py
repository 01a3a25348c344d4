"""Fields recovered from a wire token whose signature checked out."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ParsedToken:
    """Decoded, signature-verified token fields.

    Only ever produced after the signature matched, so every field here can
    be trusted to have been issued by a holder of the secret.
    """

    account_id: str
    issued_at: int
    prefix: Optional[str] = None
