from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Optional, Union


_NON_PRICE_RE = re.compile(r"[^0-9.]")
_LEADING_DECIMAL_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")
_LEADING_INT_RE = re.compile(r"[+-]?\d+")

UNKNOWN_BUCKET = "unknown"


@dataclass(frozen=True)
class Parsed:
    """Outcome of a lenient numeric read.

    ``value`` is None when nothing numeric could be extracted. Callers pick
    their own fallback through ``or_default``.
    """

    value: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.value is not None

    def or_default(self, default: float) -> float:
        return default if self.value is None else self.value


FAILED = Parsed()


def _from_number(raw: Any) -> Optional[Parsed]:
    if isinstance(raw, bool):
        return FAILED
    if isinstance(raw, (int, float)):
        value = float(raw)
        return Parsed(value) if math.isfinite(value) else FAILED
    return None


def parse_number(raw: Any) -> Parsed:
    direct = _from_number(raw)
    if direct is not None:
        return direct
    if raw is None:
        return FAILED
    text = str(raw).strip()
    if not text:
        return FAILED
    try:
        value = float(text)
    except ValueError:
        return FAILED
    return Parsed(value) if math.isfinite(value) else FAILED


def parse_price(raw: Any) -> Parsed:
    """Read a currency string such as ``"$1,200.00"``.

    Everything except digits and ``.`` is dropped before reading the leading
    decimal number.
    """

    direct = _from_number(raw)
    if direct is not None:
        return direct
    if raw is None:
        return FAILED
    cleaned = _NON_PRICE_RE.sub("", str(raw))
    match = _LEADING_DECIMAL_RE.match(cleaned)
    if not match:
        return FAILED
    value = float(match.group(0))
    return Parsed(value) if math.isfinite(value) else FAILED


def parse_int(raw: Any) -> Parsed:
    direct = _from_number(raw)
    if direct is not None:
        return Parsed(float(math.trunc(direct.value))) if direct.ok else FAILED
    if raw is None:
        return FAILED
    match = _LEADING_INT_RE.match(str(raw).strip())
    if not match:
        return FAILED
    try:
        value = float(int(match.group(0)))
    except (OverflowError, ValueError):
        return FAILED
    return Parsed(value)


def bucket_key(raw: Any) -> Union[int, float, str]:
    parsed = parse_number(raw)
    if parsed.ok:
        value = parsed.value
        return int(value) if value.is_integer() else value
    if raw is None or isinstance(raw, bool):
        return UNKNOWN_BUCKET
    text = str(raw).strip()
    return text or UNKNOWN_BUCKET
