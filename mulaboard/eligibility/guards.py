"""Anti-bot checks run on a submission before it reaches the eligibility gate."""

import hashlib
import time


def hash_ip(ip_address: str) -> str:
    """SHA-256 hex digest of an IP address. Raw IPs are never stored."""
    return hashlib.sha256(ip_address.encode("utf-8")).hexdigest()


def validate_honeypot(value: str | None) -> bool:
    """The hidden honeypot field is valid only when empty or whitespace."""
    return not value or value.strip() == ""


def validate_submission_timing(
    form_load_time_ms: float,
    min_seconds: float = 30.0,
    now_ms: float | None = None,
) -> bool:
    """Check that enough time passed between form load and submission.

    Args:
        form_load_time_ms: Client-reported form load time, epoch milliseconds.
        min_seconds: Minimum elapsed seconds for a valid submission.
        now_ms: Current time in epoch milliseconds (defaults to wall clock).

    Returns:
        True if at least ``min_seconds`` elapsed.
    """
    if now_ms is None:
        now_ms = time.time() * 1000
    elapsed = (now_ms - form_load_time_ms) / 1000
    return elapsed >= min_seconds
