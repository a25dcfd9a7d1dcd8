"""Password digests for the local credential store."""

import hashlib
import re

DIGEST_PATTERN = re.compile(r"^[0-9a-f]{64}$")


def digest(password: str) -> str:
    """Return the SHA-256 of the UTF-8 encoded password as 64 lowercase hex characters."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def is_digest(value: object) -> bool:
    """Check whether value has the shape of a stored password digest."""
    return isinstance(value, str) and DIGEST_PATTERN.match(value) is not None
