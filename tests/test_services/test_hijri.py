"""Tests for Hijri date conversion."""
from datetime import date

import pytest

from zakatbook.services.hijri import format_hijri, to_hijri


@pytest.mark.parametrize('gregorian,expected', [
    (date(2025, 3, 1), (1446, 9, 1)),
    (date(2026, 3, 1), (1447, 9, 12)),
])
def test_to_hijri(gregorian, expected):
    assert to_hijri(gregorian) == expected


def test_format_hijri():
    assert format_hijri(date(2025, 3, 1)) == '1 Ramadan 1446'
