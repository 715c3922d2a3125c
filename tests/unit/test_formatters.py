"""
Unit tests for money formatting.
"""

from decimal import Decimal

import pytest

from salon_pos.utils.formatters import money


@pytest.mark.parametrize('value, expected', [
    (24, '£24.00'),
    (Decimal('1234.5'), '£1,234.50'),
    ('9.999', '£10.00'),
    (-3, '-£3.00'),
])
def test_money(value, expected):
    assert money(value) == expected


def test_money_other_symbol():
    assert money(Decimal('5'), '€') == '€5.00'


@pytest.mark.parametrize('value', [None, '', 'abc'])
def test_money_invalid(value):
    assert money(value) == '-'
