# retireplan/core/formatting.py
"""
Number/currency text helpers for the planner UI.

Kept apart from the engine: nothing here feeds back into compute_plan.
Covers grouped-digit display, digit-only parsing of typed currency,
caret-preserving reformatting while editing, and safe fallbacks for
NaN/inf values before they reach a label or chart.
"""

from dataclasses import dataclass
from typing import Dict, Tuple
import math
import re


@dataclass(frozen=True)
class NumberLocale:
    """Separators and currency symbol for display."""

    thousands: str
    decimal: str
    currency: str
    currency_space: bool = False

LOCALES: Dict[str, NumberLocale] = {
    "en-US": NumberLocale(thousands=",", decimal=".", currency="$"),
    "pt-BR": NumberLocale(thousands=".", decimal=",", currency="R$", currency_space=True),
}

DEFAULT_LOCALE = "en-US"

_NON_DIGIT = re.compile(r"[^\d]")


def get_locale(name: str | None = None) -> NumberLocale:
    return LOCALES.get(name or DEFAULT_LOCALE, LOCALES[DEFAULT_LOCALE])


def is_finite_number(x) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool) and math.isfinite(x)


def safe(x, fallback: float = 0.0) -> float:
    """x if it is a finite number, else `fallback`."""
    return float(x) if is_finite_number(x) else fallback


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def format_number(value: float, decimals: int = 0, locale: str | None = None) -> str:
    """Grouped number, e.g. 1234567.8 -> '1,234,568' (en-US) / '1.234.568' (pt-BR)."""
    loc = get_locale(locale)
    text = f"{safe(value):,.{decimals}f}"
    # swap through a placeholder so '.' and ',' can trade places
    return text.replace(",", "\0").replace(".", loc.decimal).replace("\0", loc.thousands)


def format_currency(value: float, decimals: int = 0, locale: str | None = None) -> str:
    loc = get_locale(locale)
    v = safe(value)
    sign = "-" if v < 0 and round(abs(v), decimals) != 0 else ""
    sep = " " if loc.currency_space else ""
    return f"{sign}{loc.currency}{sep}{format_number(abs(v), decimals, locale)}"


def format_percent(value_pct: float, decimals: int = 1, locale: str | None = None) -> str:
    """Percent already on a 0-100 scale: 3.5 -> '3.5%'."""
    return f"{format_number(value_pct, decimals, locale)}%"


def format_duration_months(months: float, locale: str | None = None) -> str:
    """Up to 24 months shown in months, longer spans in years."""
    if not is_finite_number(months):
        return "—"
    if months > 24:
        return f"{format_number(months / 12, 1, locale)} years"
    return f"{format_number(months, 0, locale)} months"


def parse_digits(text: str) -> int:
    """Keep only the digits of `text`: '$1,2a3' -> 123; nothing -> 0."""
    digits = _NON_DIGIT.sub("", text or "")
    return int(digits) if digits else 0


def parse_number(text: str, locale: str | None = None) -> float:
    """Parse a grouped number with an optional decimal part and sign.

    Returns NaN for text that holds no digits at all.
    """
    loc = get_locale(locale)
    s = (text or "").strip()
    negative = s.startswith("-") or (s.startswith("(") and s.endswith(")"))
    s = s.replace(loc.thousands, "").replace(loc.decimal, ".")
    s = re.sub(r"[^\d.]", "", s)
    if not re.search(r"\d", s):
        return float("nan")
    try:
        value = float(s)
    except ValueError:
        return float("nan")
    return -value if negative else value


def reformat_with_caret(text: str, caret: int, locale: str | None = None) -> Tuple[str, int]:
    """Regroup digits while typing and keep the caret after the same digit.

    `caret` is the cursor position in `text`. The returned caret sits
    right after the n-th digit, where n is the number of digits that were
    to the left of the cursor before reformatting.
    """
    caret = int(clamp(caret, 0, len(text or "")))
    digits_left = len(_NON_DIGIT.sub("", (text or "")[:caret]))
    value = parse_digits(text)
    new_text = format_number(value, 0, locale) if _NON_DIGIT.sub("", text or "") else ""

    # leading zeros vanish on regrouping
    stripped = len(_NON_DIGIT.sub("", text or "")) - len(_NON_DIGIT.sub("", new_text))
    digits_left = max(0, digits_left - stripped)

    if digits_left == 0:
        return new_text, 0
    seen = 0
    for i, ch in enumerate(new_text):
        if ch.isdigit():
            seen += 1
            if seen == digits_left:
                return new_text, i + 1
    return new_text, len(new_text)


def parse_signed_digits(text: str) -> int:
    """Like `parse_digits`, negative when the text starts with '-'."""
    value = parse_digits(text)
    return -value if (text or "").lstrip().startswith("-") else value


def reformat_signed_with_caret(text: str, caret: int, locale: str | None = None) -> Tuple[str, int]:
    """`reformat_with_caret` keeping a leading minus sign (debt, withdrawals)."""
    text = text or ""
    stripped = text.lstrip()
    if not stripped.startswith("-"):
        return reformat_with_caret(text, caret, locale)
    sign_at = len(text) - len(stripped)
    body, body_caret = reformat_with_caret(stripped[1:], caret - sign_at - 1, locale)
    return "-" + body, (body_caret + 1 if caret > sign_at else 0)
