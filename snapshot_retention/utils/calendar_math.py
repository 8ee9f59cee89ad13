"""Calendar-unit subtraction used by the retention windows.

Weeks are plain day arithmetic. Months and years move along the calendar
and clamp the day to the last valid day of the target month, so that
``subtract_months(date(2024, 3, 31), 1) == date(2024, 2, 29)`` and
``subtract_years(date(2024, 2, 29), 1) == date(2023, 2, 28)``.

Windows reaching past year 1 saturate at ``date.min``.
"""
import calendar
from datetime import date, timedelta


def subtract_weeks(day: date, weeks: int) -> date:
    try:
        return day - timedelta(days=weeks * 7)
    except OverflowError:
        return date.min


def subtract_months(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    if year < 1:
        return date.min
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def subtract_years(day: date, years: int) -> date:
    return subtract_months(day, years * 12)
