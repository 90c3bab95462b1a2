"""Signed request payloads for the Sunvoy settings API."""

import hashlib
import hmac
import time
from dataclasses import dataclass
from urllib.parse import quote

SHARED_SECRET = "mys3cr3t"

# Characters encodeURIComponent leaves alone beyond quote()'s own safe set
_COMPONENT_SAFE = "!*'()"


@dataclass(frozen=True)
class SignedPayload:
    """A canonical query string together with its checkcode."""

    payload: str
    checkcode: str
    full_payload: str
    timestamp: int


def encode_component(value: str) -> str:
    """Percent-encode a query value the way browsers encode URI components."""
    return quote(value, safe=_COMPONENT_SAFE)


def canonical_query(fields: dict[str, str]) -> str:
    """Join ``key=value`` pairs with ``&`` in ascending key order."""
    return "&".join(f"{key}={encode_component(fields[key])}" for key in sorted(fields))


def compute_checkcode(payload: str, secret: str = SHARED_SECRET) -> str:
    """Return the uppercase hex HMAC-SHA1 of ``payload``."""
    digest = hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha1)
    return digest.hexdigest().upper()


def sign(
    fields: dict[str, str], secret: str = SHARED_SECRET, now: int | None = None
) -> SignedPayload:
    """Build a signed payload from form fields.

    A ``timestamp`` field set to ``now`` (seconds since the epoch, current
    time if omitted) replaces any timestamp already present in ``fields``.
    The result is deterministic for a fixed ``now``.

    Args:
        fields: Field names and values to sign, usually hidden form inputs
        secret: HMAC key shared with the API host
        now: Unix timestamp in seconds

    Returns:
        SignedPayload whose ``full_payload`` is ready to POST
    """
    timestamp = int(time.time()) if now is None else int(now)
    signed_fields = dict(fields)
    signed_fields["timestamp"] = str(timestamp)

    payload = canonical_query(signed_fields)
    checkcode = compute_checkcode(payload, secret)

    return SignedPayload(
        payload=payload,
        checkcode=checkcode,
        full_payload=f"{payload}&checkcode={checkcode}",
        timestamp=timestamp,
    )
