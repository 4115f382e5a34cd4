"""Content fingerprints and notification tags."""

from typing import Optional

DEFAULT_TAG_PREFIX = "peppermint"

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_int32(value: int) -> int:
    """Wrap an integer to signed 32-bit two's complement."""
    value &= 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def fingerprint(title: str, body: str) -> str:
    """
    Compute a short, stable token for a notification's text.

    Runs ``h = h * 31 + code_point`` over ``title + body`` with signed
    32-bit wraparound and renders ``abs(h)`` in base 36. Identical text
    always gives the same token; collisions are rare and harmless.

    Args:
        title: Notification title.
        body: Notification body.

    Returns:
        Lowercase base-36 token.
    """
    h = 0
    for char in title + body:
        h = _to_int32((h << 5) - h + ord(char))
    return _to_base36(abs(h))


def make_tag(prefix: str, token: str) -> str:
    """Build the platform tag for a fingerprint."""
    return f"{prefix}-{token}"


def fingerprint_from_tag(tag: str, prefix: str = DEFAULT_TAG_PREFIX) -> Optional[str]:
    """
    Recover the fingerprint from a tag built by :func:`make_tag`.

    Returns None when the tag belongs to a different prefix.
    """
    head = f"{prefix}-"
    if not tag.startswith(head) or len(tag) == len(head):
        return None
    return tag[len(head):]
