"""Ghost webhook signatures (HMAC-SHA256 over body + timestamp)."""
from __future__ import annotations

import hashlib
import hmac
import logging
import string
import time

from ghost_bunny_purge.errors import SignatureFormatError
from ghost_bunny_purge.models.purge import SignatureToken

log = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Ghost-Signature"

# Accepted clock skew between the signed timestamp and now, in milliseconds
REPLAY_WINDOW_MS = 5 * 60 * 1000


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def parse_signature_header(header: str | None) -> SignatureToken:
    """Parse ``sha256=<hex>, t=<millis>`` into a SignatureToken."""
    if not header:
        raise SignatureFormatError("Signature header is missing")

    parts = header.split(", ")
    if len(parts) != 2:
        raise SignatureFormatError(f"Expected hash and timestamp parts, got {len(parts)}")

    sig_key, _, sig_hash = parts[0].partition("=")
    ts_key, _, ts_value = parts[1].partition("=")
    if sig_key != "sha256" or ts_key != "t":
        raise SignatureFormatError("Unknown signature header keys")
    if not sig_hash:
        raise SignatureFormatError("Signature hash is empty")
    if not all(c in string.hexdigits for c in sig_hash):
        raise SignatureFormatError("Signature hash is not hex")

    # Canonical decimal only: no sign, underscores or leading zeros
    if not (ts_value.isascii() and ts_value.isdigit()) or ts_value != str(int(ts_value)):
        raise SignatureFormatError(f"Timestamp is not a plain integer: {ts_value!r}")
    timestamp = int(ts_value)

    return SignatureToken(hash=sig_hash, timestamp=timestamp)


def compute_signature(body: bytes, timestamp: int, secret: str) -> str:
    """Lowercase hex HMAC-SHA256 of body followed by the decimal timestamp."""
    message = body + str(timestamp).encode("ascii")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def sign_payload(body: bytes, secret: str, now: int | None = None) -> str:
    """Produce a header value the way Ghost signs outgoing webhooks."""
    timestamp = now_ms() if now is None else now
    return f"sha256={compute_signature(body, timestamp, secret)}, t={timestamp}"


def verify_signature(
    raw_body: bytes,
    signature_header: str | None,
    secret: str | None,
    now: int | None = None,
) -> bool:
    """
    Verify a Ghost webhook signature.
    Returns False for anything missing, malformed, expired or mismatched.
    """
    try:
        token = parse_signature_header(signature_header)
    except SignatureFormatError as e:
        log.debug("Rejecting signature: %s", e)
        return False

    current = now_ms() if now is None else now
    if abs(current - token.timestamp) > REPLAY_WINDOW_MS:
        log.debug("Rejecting signature: timestamp outside replay window")
        return False

    if not secret:
        return False

    expected = compute_signature(raw_body, token.timestamp, secret)
    return hmac.compare_digest(expected.encode("ascii"), token.hash.encode("ascii"))
