"""Deterministic canonicalization helpers shared by matching and intake.

Every function here is idempotent: feeding its output back in returns the same value.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

_ADDRESS_PUNCTUATION = re.compile(r"[.,#]")
_WHITESPACE = re.compile(r"\s+")
_NON_DIGITS = re.compile(r"\D")
_SCHEME = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)
_LEADING_WWW = re.compile(r"^(?:www\.)+")


def normalize_name(name: str | None) -> str:
    if not name:
        return ""
    return _WHITESPACE.sub(" ", name.lower()).strip()


def normalize_address(address: str | None) -> str:
    """Lowercase, turn ``.``, ``,`` and ``#`` into spaces and collapse whitespace."""

    if not address:
        return ""
    return _WHITESPACE.sub(" ", _ADDRESS_PUNCTUATION.sub(" ", address.lower())).strip()


def normalize_phone(phone: str | None) -> str:
    if not phone:
        return ""
    return _NON_DIGITS.sub("", phone)


def normalize_domain(website: str | None) -> str | None:
    """Return the bare host of ``website`` without a leading ``www.``.

    Scheme-less values are read as ``https://``. Returns ``None`` for blank or
    unparsable input.
    """

    if not website or not website.strip():
        return None
    candidate = website.strip()
    if not _SCHEME.match(candidate):
        candidate = f"https://{candidate}"
    try:
        host = urlsplit(candidate).hostname
    except ValueError:
        return None
    if not host:
        return None
    return _LEADING_WWW.sub("", host) or None


def normalize_state(state: str | None) -> str:
    if not state:
        return ""
    return state.strip().casefold()


def average_price(
    average: float | None,
    price_min: float | None,
    price_max: float | None,
) -> float | None:
    """Explicit average, else the midpoint of min/max, else whichever bound is known."""

    if average is not None:
        return average
    if price_min is not None and price_max is not None:
        return (price_min + price_max) / 2
    if price_min is not None:
        return price_min
    return price_max
