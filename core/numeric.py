"""Parse-or-zero numeric helpers shared by every form field."""
from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Dict, Mapping

_DISALLOWED = re.compile(r"[^\d,.]")


def finite_or_zero(value: float) -> float:
    """Return ``value`` unless it is NaN or infinite, in which case ``0.0``."""

    return value if math.isfinite(value) else 0.0


def parse_decimal(value: object) -> float:
    """Convert user input into a finite float, defaulting to ``0.0``.

    Comma is the decimal separator. When a comma is present any dot before it
    is treated as thousands grouping, so ``"1.234,5"`` parses as ``1234.5``.
    Extra commas after the first are stripped. The function never raises and
    never returns NaN or infinity.
    """

    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return finite_or_zero(number)
    if not isinstance(value, str):
        return 0.0

    text = value.strip()
    if not text:
        return 0.0

    sign = ""
    if text[0] in "+-":
        sign = "-" if text[0] == "-" else ""
        text = text[1:]
    cleaned = _DISALLOWED.sub("", text)

    comma = cleaned.find(",")
    if comma != -1:
        integer_part = cleaned[:comma].replace(".", "")
        fraction_part = cleaned[comma + 1:].replace(",", "")
        cleaned = f"{integer_part}.{fraction_part}"

    if not cleaned or cleaned == ".":
        return 0.0
    try:
        number = float(sign + cleaned)
    except ValueError:
        return 0.0
    return finite_or_zero(number)


def clean_percent_text(text: str, *, allow_decimal: bool = False) -> str:
    """Sanitise raw percentage text the way the artifact inputs accept it.

    Only digits survive, plus a single comma when ``allow_decimal`` is set.
    """

    if not isinstance(text, str):
        return ""
    if not allow_decimal:
        return re.sub(r"[^\d]", "", text)
    cleaned = re.sub(r"[^\d,]", "", text)
    comma = cleaned.find(",")
    if comma != -1:
        cleaned = cleaned[: comma + 1] + cleaned[comma + 1:].replace(",", "")
    return cleaned


def format_stat(value: object) -> str:
    """Render ``value`` with ``.`` thousands grouping, rounded half away from zero."""

    if value is None or isinstance(value, bool):
        return ""
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return ""
    if not math.isfinite(number):
        return ""
    with localcontext() as ctx:
        # Wide enough for every finite float.
        ctx.prec = 400
        rounded = int(Decimal(number).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return f"{rounded:,}".replace(",", ".")


def format_stats(values: Mapping[str, float]) -> Dict[str, str]:
    return {key: format_stat(amount) for key, amount in values.items()}


__all__ = [
    "clean_percent_text",
    "finite_or_zero",
    "format_stat",
    "format_stats",
    "parse_decimal",
]
