"""
Module: codewars_bot/auth.py

Verifies that inbound HTTP requests were signed by Slack and are not replays.

Slack signs every request with an HMAC-SHA256 over "v0:<timestamp>:<body>"
using the app's signing secret and sends the result as "v0=<hex digest>" in the
X-Slack-Signature header, next to the X-Slack-Request-Timestamp header.
"""
import hashlib
import hmac
import time
from datetime import timedelta

VERSION = "v0"
DEFAULT_TOLERANCE = timedelta(minutes=5)


class AuthError(Exception):
    """Raised when an inbound request cannot be authenticated."""
    pass


class MalformedRequest(AuthError):
    """Signature or timestamp header missing or unparsable."""
    pass


class StaleRequest(AuthError):
    """Timestamp lies outside the freshness window."""
    pass


class SignatureMismatch(AuthError):
    """Signature does not match the request body."""
    pass


def compute_signature(secret, timestamp, raw_body):
    """
    Compute the "v0=<hex>" signature Slack would send for the given request.

    Args:
        secret (str | bytes): The app's signing secret.
        timestamp (str | int): Value of the X-Slack-Request-Timestamp header.
        raw_body (bytes): The exact request body.
    """
    if isinstance(secret, str):
        secret = secret.encode()
    base = f"{VERSION}:{timestamp}:".encode() + raw_body
    digest = hmac.new(secret, base, hashlib.sha256).hexdigest()
    return f"{VERSION}={digest}"


def verify(signature, timestamp, raw_body, secret, now=None, tolerance=DEFAULT_TOLERANCE):
    """
    Verify a Slack request signature.

    Staleness is checked before the signature, so a replayed request is
    rejected even when it carries a valid signature.

    Args:
        signature (str | None): X-Slack-Signature header value.
        timestamp (str | None): X-Slack-Request-Timestamp header value (Unix seconds).
        raw_body (bytes): The exact request body, before any parsing.
        secret (str | bytes): The shared signing secret.
        now (float, optional): Current Unix time, defaults to time.time().
        tolerance (timedelta): Maximum allowed clock distance.

    Raises:
        MalformedRequest, StaleRequest, SignatureMismatch
    """
    if not signature or not timestamp:
        raise MalformedRequest("missing signature or timestamp header")
    try:
        ts = int(timestamp)
    except (TypeError, ValueError):
        raise MalformedRequest(f"invalid timestamp {timestamp!r}") from None

    now = time.time() if now is None else now
    if abs(now - ts) > tolerance.total_seconds():
        raise StaleRequest(f"timestamp {ts} is outside the {tolerance} window")

    prefix = f"{VERSION}="
    if not signature.startswith(prefix):
        raise MalformedRequest("unsupported signature version")
    try:
        bytes.fromhex(signature[len(prefix):])
    except ValueError:
        raise MalformedRequest("signature is not hex encoded") from None

    expected = compute_signature(secret, timestamp, raw_body)
    if not hmac.compare_digest(expected.encode(), signature.encode()):
        raise SignatureMismatch("signature does not match request body")
