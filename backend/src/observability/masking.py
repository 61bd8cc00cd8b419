"""PII masking for log output."""

import hashlib
from typing import Optional


def mask_email(email: Optional[str]) -> str:
    """Partially redact an email address for logging.

    Keeps the first two characters of the local part (one if it is that
    short) and the full domain:

        mask_email("johndoe@example.com") -> "jo***@example.com"
        mask_email("jd@example.com")      -> "j***@example.com"
        mask_email("nodomain")            -> "no***"
        mask_email(None)                  -> "***"
    """
    if not email or len(email) < 3:
        return "***"

    at_index = email.find("@")
    if at_index == -1:
        return email[:2] + "***"

    local_part = email[:at_index]
    domain_part = email[at_index:]

    if len(local_part) <= 2:
        return local_part[:1] + "***" + domain_part
    return local_part[:2] + "***" + domain_part


def hash_email(email: str) -> str:
    """SHA-256 hex digest of the normalized email (for tombstones)."""
    return hashlib.sha256(email.strip().lower().encode("utf-8")).hexdigest()
