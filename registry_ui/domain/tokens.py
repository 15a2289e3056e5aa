import base64
import binascii
import json
import time
from typing import Any, Optional


def decode_token_payload(token: Any) -> Optional[dict]:
    """
    Decode the payload segment of a JWT-shaped ``header.payload.signature``
    token. Returns None when the token has no decodable JSON object payload.
    """
    if not isinstance(token, str) or not token:
        return None

    parts = token.split(".")
    if len(parts) < 2 or not parts[1]:
        return None

    segment = parts[1]
    # base64url payloads are sent without padding
    segment += "=" * (-len(segment) % 4)
    try:
        raw = base64.urlsafe_b64decode(segment.encode("ascii"))
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError):
        return None

    if not isinstance(payload, dict):
        return None
    return payload


def token_expiry(token: Any) -> Optional[float]:
    """Return the ``exp`` claim of a token in epoch seconds, if any."""
    payload = decode_token_payload(token)
    if payload is None:
        return None
    exp = payload.get("exp")
    # bool is an int subclass but never a valid timestamp
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    return float(exp)


def is_token_expired(token: Any, now: Optional[float] = None, leeway: float = 0) -> bool:
    """
    Check whether a token can no longer be used.

    Pure function of the token value and the current time. Tokens without a
    readable ``exp`` claim are treated as expired. ``leeway`` reports the
    token as expired that many seconds before its real expiry.
    """
    exp = token_expiry(token)
    if exp is None:
        return True
    current = time.time() if now is None else now
    return exp - leeway <= current
