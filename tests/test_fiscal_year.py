"""Tests for the April-to-March fiscal year helpers."""
from datetime import date

import pytest

from app.utils.fiscal_year import (
    current_fiscal_year,
    fiscal_year_for,
    is_valid_fiscal_year,
    label_for_start_year,
    next_fiscal_year,
)


@pytest.mark.parametrize(
    'day, expected',
    [
        (date(2024, 4, 1), '2024-25'),
        (date(2024, 12, 31), '2024-25'),
        (date(2025, 1, 15), '2024-25'),
        (date(2025, 3, 31), '2024-25'),
        (date(2025, 4, 1), '2025-26'),
        (date(1999, 6, 30), '1999-00'),
    ],
)
def test_fiscal_year_for(day, expected):
    assert fiscal_year_for(day) == expected


def test_current_fiscal_year_uses_given_day():
    assert current_fiscal_year(date(2026, 10, 19)) == '2026-27'
    assert current_fiscal_year(date(2027, 2, 1)) == '2026-27'


def test_label_for_start_year_keeps_two_digit_suffix():
    assert label_for_start_year(2009) == '2009-10'
    assert label_for_start_year(2099) == '2099-00'


def test_next_fiscal_year():
    assert next_fiscal_year('2024-25') == '2025-26'
    assert next_fiscal_year('1999-00') == '2000-01'


@pytest.mark.parametrize('value', ['2024', '24-25', '2024/25', '2024-2025', ''])
def test_next_fiscal_year_rejects_bad_labels(value):
    assert not is_valid_fiscal_year(value)
    with pytest.raises(ValueError):
        next_fiscal_year(value)


def test_is_valid_fiscal_year():
    assert is_valid_fiscal_year('2024-25')
