"""Canonical-message HMAC signatures for proxied requests."""

import hashlib
import hmac
from collections.abc import Iterable

SIGNATURE_PARAM = "signature"


def build_canonical_message(params: Iterable[tuple[str, str]]) -> str:
    """Build the string a proxy signature is computed over.

    Values of a repeated key are joined with ``,`` in arrival order, keys are
    sorted by byte value and the ``key=value`` pairs are concatenated with no
    separator.

    Args:
        params: Query parameters as ``(key, value)`` pairs, signature excluded.

    Returns:
        The canonical message.
    """
    grouped: dict[str, list[str]] = {}
    for key, value in params:
        grouped.setdefault(key, []).append(value)

    keys = sorted(grouped, key=lambda k: k.encode("utf-8"))
    return "".join(f"{key}={','.join(grouped[key])}" for key in keys)


def compute_signature(params: Iterable[tuple[str, str]], secret: str) -> str:
    """Compute the hex HMAC-SHA256 of the canonical message."""
    message = build_canonical_message(params)
    return hmac.new(
        secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def verify_signature(params: Iterable[tuple[str, str]], signature: str, secret: str) -> bool:
    """Verify a proxy signature against the request's query parameters.

    Args:
        params: All query parameters; any ``signature`` entries are ignored.
        signature: The signature the caller supplied.
        secret: The shared signing secret.

    Returns:
        True only if the secret and signature are non-empty and the digests match.
    """
    if not secret or not signature:
        return False

    expected = compute_signature(
        ((key, value) for key, value in params if key != SIGNATURE_PARAM),
        secret,
    )
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
