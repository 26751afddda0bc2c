"""
Discord request signature verification.

Discord signs every interaction with the application's Ed25519 key over
``timestamp + raw_body``. Requests that fail the check must get a 401, or
Discord refuses to save the interactions endpoint URL.

See: https://discord.com/developers/docs/interactions/overview#setting-up-an-endpoint-validating-security-request-headers
"""

import logging
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Signature-Ed25519"
TIMESTAMP_HEADER = "X-Signature-Timestamp"


def extract_signature_data(headers) -> Optional[tuple[str, str]]:
    """Return ``(signature, timestamp)`` or None if either header is missing."""
    signature = headers.get(SIGNATURE_HEADER)
    timestamp = headers.get(TIMESTAMP_HEADER)
    if not signature or not timestamp:
        return None
    return signature, timestamp


def verify_key(body: bytes, signature: str, timestamp: str, public_key: str) -> bool:
    """Check a Discord signature. Any malformed input reads as invalid."""
    try:
        key = Ed25519PublicKey.from_public_bytes(bytes.fromhex(public_key))
        key.verify(bytes.fromhex(signature), timestamp.encode("utf-8") + body)
    except InvalidSignature:
        return False
    except ValueError as e:
        logger.warning("[DISCORD] Malformed signature material: %s", e)
        return False
    return True
