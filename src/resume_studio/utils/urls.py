"""Link normalization shared by every renderer.

Stored values are never rewritten; renderers call these helpers at draw time.
"""

from __future__ import annotations

import re

_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")


def has_scheme(url: str) -> bool:
    return bool(_SCHEME.match(url.strip()))


def normalize_url(url: str | None) -> str | None:
    """Prefix ``https://`` when the value carries no scheme.

    Returns None for missing or blank values so callers can omit the link.

    >>> normalize_url("linkedin.com/in/jane")
    'https://linkedin.com/in/jane'
    """
    if url is None:
        return None
    value = url.strip()
    if not value:
        return None
    if has_scheme(value):
        return value
    return f"https://{value}"


def mailto_url(email: str | None) -> str | None:
    if email is None or not email.strip():
        return None
    value = email.strip()
    if value.lower().startswith("mailto:"):
        return value
    return f"mailto:{value}"
