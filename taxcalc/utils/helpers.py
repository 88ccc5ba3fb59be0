"""Shared utility functions: numeric normalization, bound parsing, rounding."""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any, Optional

# Everything except digits, the decimal point and the minus sign is dropped
_NON_NUMERIC = re.compile(r"[^0-9.\-]+")

# Tokens a caller may use for "no upper bound"
UNBOUNDED_TOKENS = frozenset({"∞", "inf", "infinity", "unbounded"})


def parse_number(value: Any) -> float:
    """Normalise an arbitrary raw value to a finite float.

    Strings are stripped of every character that is not a digit, ``.`` or
    ``-`` before parsing, so ``"400,000 THB"`` becomes ``400000.0``.
    Anything that does not yield a finite number (``None``, ``"abc"``,
    ``"1.2.3"``, NaN, infinities) normalises to ``0.0``.  Never raises.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except (OverflowError, ValueError):
            # ints beyond float range
            return 0.0
        return number if math.isfinite(number) else 0.0

    cleaned = _NON_NUMERIC.sub("", str(value))
    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_upper_bound(value: Any) -> Optional[float]:
    """Parse a bracket upper bound; ``None`` means unbounded.

    Accepts ``None``, a float infinity, or one of the unbounded tokens
    (``∞``, ``inf``, ``infinity``, ``unbounded``) for the open top band.
    Every other value goes through :func:`parse_number`.
    """
    if value is None:
        return None
    if isinstance(value, (float, Decimal)) and float(value) == math.inf:
        return None
    if isinstance(value, str) and value.strip().lower() in UNBOUNDED_TOKENS:
        return None
    return parse_number(value)


def parse_flag(value: Any) -> bool:
    """Coerce a raw yes/no field without ever failing validation."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on", "y")
    return bool(value)


def round_currency(value: float, decimals: int = 2) -> float:
    """Round to *decimals* places (standard banker-friendly rounding)."""
    return round(value, decimals)
