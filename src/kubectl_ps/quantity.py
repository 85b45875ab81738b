"""Parse Kubernetes resource quantities into bytes and millicores."""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation

_QUANTITY_RE = re.compile(
    r"^([+-]?(?:\d+\.?\d*|\.\d+))(?:([eE][+-]?\d+)|(Ki|Mi|Gi|Ti|Pi|Ei|n|u|m|k|M|G|T|P|E))?$"
)

_BINARY = {
    "Ki": Decimal(1024),
    "Mi": Decimal(1024) ** 2,
    "Gi": Decimal(1024) ** 3,
    "Ti": Decimal(1024) ** 4,
    "Pi": Decimal(1024) ** 5,
    "Ei": Decimal(1024) ** 6,
}

_DECIMAL = {
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "k": Decimal("1e3"),
    "M": Decimal("1e6"),
    "G": Decimal("1e9"),
    "T": Decimal("1e12"),
    "P": Decimal("1e15"),
    "E": Decimal("1e18"),
}


def parse_quantity(value: str) -> Decimal:
    """
    Parse a quantity string ("512Mi", "250m", "1.5", "1e3") to its base value.

    Raises:
        ValueError: The string is not a Kubernetes quantity.
    """
    text = str(value).strip()
    m = _QUANTITY_RE.match(text)
    if not m:
        raise ValueError(f"invalid quantity {value!r}")
    number, exponent, suffix = m.groups()
    try:
        base = Decimal(number)
        if exponent:
            return base * (Decimal(10) ** int(exponent[1:]))
    except InvalidOperation as exc:
        raise ValueError(f"invalid quantity {value!r}") from exc
    if suffix in _BINARY:
        return base * _BINARY[suffix]
    if suffix in _DECIMAL:
        return base * _DECIMAL[suffix]
    return base


def memory_bytes(value: str) -> int:
    """Memory quantity in bytes, rounded up like the API server does."""
    return math.ceil(parse_quantity(value))


def cpu_millicores(value: str) -> int:
    """CPU quantity in millicores, rounded up ("1" -> 1000, "100m" -> 100)."""
    return math.ceil(parse_quantity(value) * 1000)
