"""
VAPID key helpers.
"""

import base64


def url_base64_to_bytes(value: str) -> bytes:
    """
    Decode base64url text, restoring any stripped padding.

    Browsers expect the application server key as raw bytes, while keys are
    distributed as unpadded base64url.
    """
    value = value.strip()
    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(value + padding)


def is_valid_public_key(value: str) -> bool:
    """An uncompressed P-256 point: 65 bytes starting with 0x04."""
    try:
        raw = url_base64_to_bytes(value)
    except (ValueError, TypeError):
        return False
    return len(raw) == 65 and raw[0] == 0x04
