"""Calendar-day helpers. Dates travel as YYYY-MM-DD strings with no time zone."""
from datetime import date, timedelta

MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(7)


def parse_date(value: str) -> date:
    return date.fromisoformat(value)


def format_date(day: date) -> str:
    return day.isoformat()


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def date_range(first: date, last: date) -> list[date]:
    """Every calendar day from first to last, both inclusive."""
    days = []
    current = first
    while current <= last:
        days.append(current)
        current = add_days(current, 1)
    return days
