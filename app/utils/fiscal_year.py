"""Fiscal-year helpers.

A fiscal year runs from April 1 to March 31 and is labelled ``YYYY-YY``,
e.g. ``"2024-25"`` covers 2024-04-01 .. 2025-03-31.
"""

from __future__ import annotations

import re
from datetime import date

from app.utils.constants import FISCAL_YEAR_PATTERN, FISCAL_YEAR_START_MONTH

_FY_RE = re.compile(FISCAL_YEAR_PATTERN)


def label_for_start_year(start_year: int) -> str:
    return f"{start_year}-{str(start_year + 1)[-2:]}"


def fiscal_year_for(day: date) -> str:
    """Return the fiscal-year label containing *day*."""
    if day.month >= FISCAL_YEAR_START_MONTH:
        return label_for_start_year(day.year)
    return label_for_start_year(day.year - 1)


def current_fiscal_year(today: date | None = None) -> str:
    return fiscal_year_for(today or date.today())


def is_valid_fiscal_year(value: str) -> bool:
    return bool(_FY_RE.match(value))


def next_fiscal_year(fiscal_year: str) -> str:
    """Return the label following *fiscal_year* (``"2024-25"`` → ``"2025-26"``).

    Raises:
        ValueError: If *fiscal_year* is not in ``YYYY-YY`` form.
    """
    if not is_valid_fiscal_year(fiscal_year):
        raise ValueError(f"Invalid fiscal year '{fiscal_year}', expected YYYY-YY")
    return label_for_start_year(int(fiscal_year[:4]) + 1)
