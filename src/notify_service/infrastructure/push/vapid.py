"""VAPID key pair used to sign every outgoing push request."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from py_vapid import Vapid
from py_vapid.utils import b64urlencode

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VapidKeys:
    public_key: str  # base64url, uncompressed P-256 point
    private_key: str  # base64url, raw 32-byte scalar
    generated: bool = False


def generate_vapid_keys() -> VapidKeys:
    vapid = Vapid()
    vapid.generate_keys()

    private_value = vapid.private_key.private_numbers().private_value
    private_key = b64urlencode(private_value.to_bytes(32, "big"))
    public_key = b64urlencode(
        vapid.public_key.public_bytes(Encoding.X962, PublicFormat.UncompressedPoint)
    )
    return VapidKeys(public_key=public_key, private_key=private_key, generated=True)


def load_vapid_keys(public_key: str | None, private_key: str | None) -> VapidKeys:
    """Return the configured key pair, or generate one for this process.

    A generated pair changes on every restart, which invalidates every
    subscription issued against the previous public key.
    """
    if public_key and private_key:
        return VapidKeys(public_key=public_key.strip(), private_key=private_key.strip())

    keys = generate_vapid_keys()
    logger.warning(
        "VAPID keys were auto-generated for this process. Set VAPID_PUBLIC_KEY and "
        "VAPID_PRIVATE_KEY for stable subscriptions across restarts."
    )
    return keys
