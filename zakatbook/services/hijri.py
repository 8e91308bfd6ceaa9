"""Gregorian to Hijri (tabular Islamic calendar) conversion."""
from datetime import date

HIJRI_MONTHS = [
    'Muharram', 'Safar', 'Rabi al-Awwal', 'Rabi al-Thani',
    'Jumada al-Awwal', 'Jumada al-Thani', 'Rajab', "Sha'ban",
    'Ramadan', 'Shawwal', 'Dhu al-Qadah', 'Dhu al-Hijjah',
]


def to_hijri(gregorian: date) -> tuple[int, int, int]:
    """Convert a Gregorian date to (year, month, day) in the Hijri calendar.

    Uses the Julian Day Number and the arithmetic (Kuwaiti) algorithm.
    """
    a = (14 - gregorian.month) // 12
    y = gregorian.year + 4800 - a
    m = gregorian.month + 12 * a - 3
    jdn = gregorian.day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045

    l = jdn - 1948440 + 10632
    n = (l - 1) // 10631
    l = l - 10631 * n + 354
    j = ((10985 - l) // 5316) * ((50 * l) // 17719) + (l // 5670) * ((43 * l) // 15238)
    l = l - ((30 - j) // 15) * ((17719 * j) // 50) - (j // 16) * ((15238 * j) // 43) + 29

    month = (24 * l) // 709
    day = l - (709 * month) // 24
    year = 30 * n + j - 30
    return year, month, day


def format_hijri(gregorian: date) -> str:
    """Format a Gregorian date as e.g. '1 Ramadan 1447'."""
    year, month, day = to_hijri(gregorian)
    return f"{day} {HIJRI_MONTHS[month - 1]} {year}"
