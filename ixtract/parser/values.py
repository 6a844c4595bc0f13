import math
import re
from typing import Optional, Union

from configs.labels import UNIT_DISPLAY_LABELS
from configs.parsing import NEGATIVE_GLYPHS
from ixtract.models.financial import Unit

Number = Union[int, float]

_SEPARATORS = re.compile(r"[,，\s　\xa0]")
_PARENS = re.compile(r"[()（）]")
_MINUS_SIGNS = ("−", "－", "‐", "–")
_NUMERIC_PREFIX = re.compile(r"(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def normalize_value(text) -> Optional[Number]:
    """
    Convert locale-formatted numeric text to a signed number.

    Only the leading number is read, so unit suffixes such as "%" or "円"
    are ignored. Returns None for empty, dash-only or non-numeric input.
    """
    if text is None or isinstance(text, bool):
        return None
    if isinstance(text, (int, float)):
        if isinstance(text, float) and math.isnan(text):
            return None
        return text

    raw = str(text).strip()
    if not raw or raw in ("-", "－", "—", "―"):
        return None

    cleaned = _SEPARATORS.sub("", raw)
    negative = bool(_PARENS.search(cleaned))
    cleaned = _PARENS.sub("", cleaned)

    for glyph in NEGATIVE_GLYPHS:
        cleaned = cleaned.replace(glyph, "-")
    for sign in _MINUS_SIGNS:
        cleaned = cleaned.replace(sign, "-")

    # "(△100)" and "--100" are still a single negative
    if cleaned.startswith("-"):
        negative = True
        cleaned = cleaned.lstrip("-")

    m = _NUMERIC_PREFIX.match(cleaned)
    if not m:
        return None

    value = float(m.group(0))

    if math.isnan(value) or math.isinf(value):
        return None

    return -value if negative else value


def apply_scale(value: Number, scale) -> float:
    """Multiply by 10**scale; a missing or malformed scale is ignored."""
    try:
        exponent = int(scale)
    except (TypeError, ValueError):
        return value
    return value * (10 ** exponent)


def format_financial_value(
    value,
    decimals=None,
    scale=None,
    unit: Optional[Unit] = None,
) -> str:
    if value is None or value == "":
        return ""

    number = normalize_value(value)
    if number is None:
        return str(value)

    number = apply_scale(number, scale)

    try:
        places = max(0, int(decimals))
    except (TypeError, ValueError):
        places = 0

    rendered = f"{number:,.{places}f}"

    if unit is not None:
        suffix = unit_display_label(unit)
        if suffix:
            rendered = f"{rendered}{suffix}"

    return rendered


def unit_display_label(unit: Unit) -> str:
    measure = unit.measure.split(":")[-1] if unit.measure else ""
    if measure in UNIT_DISPLAY_LABELS:
        return UNIT_DISPLAY_LABELS[measure]
    return unit.symbol
