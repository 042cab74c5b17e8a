"""Binary size conversion between display strings and byte counts.

Display strings are a number followed by an optional base-1024 magnitude
suffix: ``4MiB``, ``512 KiB``, ``1.5g``, ``8192``. Conversion goes through
``Fraction`` so boundary comparisons in the validator are exact at any
magnitude.
"""

from __future__ import annotations

import re
from fractions import Fraction

from rbd_form.exceptions import UnitConversionError

BASE = 1024

_MAGNITUDES = "bkmgtpezy"
_DISPLAY_UNITS = ["B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB"]

_SIZE_RE = re.compile(
    rf"^(?P<number>\d+(?:\.\d+)?) ?(?P<unit>[{_MAGNITUDES}](?:i?b)?)?$",
    re.IGNORECASE,
)


def parse_bytes(value: str | int) -> int:
    """Convert a display string to an exact byte count.

    Fractional results are rounded half-up to the nearest byte.

    Raises:
        UnitConversionError: If *value* is empty or not a size string.
    """
    if isinstance(value, bool):
        raise UnitConversionError(f"Not a size: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise UnitConversionError(f"Negative size: {value}")
        return value

    match = _SIZE_RE.match(value.strip())
    if match is None:
        raise UnitConversionError(f"Not a size: {value!r}")

    unit = match.group("unit")
    exponent = _MAGNITUDES.index(unit[0].lower()) if unit else 0
    scaled = Fraction(match.group("number")) * BASE**exponent
    # half-up; scaled is never negative
    return int((2 * scaled + 1) // 2)


def to_bytes(value: str | int | None) -> int | None:
    """Lenient variant of :func:`parse_bytes`.

    Returns None for missing, blank, or malformed input so callers can
    treat those uniformly as an absent field.
    """
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        return parse_bytes(value)
    except UnitConversionError:
        return None


def from_bytes(value: int, decimals: int = 1, *, exact: bool = False) -> str:
    """Render a byte count with the largest binary unit not exceeding it.

    The mantissa is truncated (not rounded) to *decimals* places and
    trailing zeros are dropped: ``from_bytes(1610612736) == "1.5GiB"``.
    With *exact*, as many places are used as needed for the result to
    parse back to *value*: ``from_bytes(1664090112, exact=True)`` is
    ``"1.5498046875GiB"``.
    """
    if value < 0:
        raise UnitConversionError(f"Negative size: {value}")

    exponent = 0
    while exponent < len(_DISPLAY_UNITS) - 1 and value >= BASE ** (exponent + 1):
        exponent += 1

    mantissa = Fraction(value, BASE**exponent)
    if exact:
        # denominator is 2**n, whose reciprocal has exactly n decimal places
        decimals = max(decimals, mantissa.denominator.bit_length() - 1)
    scale = 10**decimals
    truncated = (mantissa.numerator * scale) // mantissa.denominator
    whole, frac = divmod(truncated, scale)

    text = str(whole)
    if decimals and frac:
        text += "." + str(frac).rjust(decimals, "0").rstrip("0")
    return f"{text}{_DISPLAY_UNITS[exponent]}"
