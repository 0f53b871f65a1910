"""
Dose Quantity Tool
Parses free-text dose quantities such as "1 tablet" or "1/2 tablet"
"""

import re
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional


_LEADING_INTEGER = re.compile(r"^(\d+)")
_AMOUNT = re.compile(r"^\s*(\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?|\.\d+)\s*(.*)$")


@dataclass(frozen=True)
class DoseQuantity:
    """
    Parsed dose quantity.

    ``count`` is the leading integer of the raw text (``None`` when the text
    does not start with a digit). ``amount`` is the full numeric amount,
    understanding fractions ("1/2"), mixed numbers ("1 1/2") and decimals.
    """
    raw: str
    count: Optional[int] = None
    amount: Optional[float] = None
    unit: str = ""

    @classmethod
    def parse(cls, text) -> "DoseQuantity":
        raw = "" if text is None else str(text).strip()

        leading = _LEADING_INTEGER.match(raw)
        count = int(leading.group(1)) if leading else None

        amount = None
        unit = raw
        match = _AMOUNT.match(raw)
        if match:
            amount = _to_number(match.group(1))
            unit = match.group(2).strip()

        return cls(raw=raw, count=count, amount=amount, unit=unit)

    @property
    def forecast_units(self) -> int:
        """Units consumed per dose for inventory forecasting (default 1)"""
        return self.count if self.count is not None else 1

    def __str__(self) -> str:
        return self.raw


def _to_number(token: str) -> Optional[float]:
    try:
        parts = token.split()
        if len(parts) == 2:
            return float(int(parts[0]) + Fraction(parts[1]))
        return float(Fraction(token))
    except (ValueError, ZeroDivisionError):
        return None
