"""
Contribution Schedule Module

Rebuilds the expected contribution dates of a committee from its start
date and frequency.
"""

import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Iterator

from .models import Committee, Frequency, to_date

logger = logging.getLogger(__name__)


def add_month(day: date) -> date:
    """Step one calendar month, keeping the day of month.

    A day that does not exist in the target month overflows into the
    following month, e.g. 2024-01-31 -> 2024-03-02.
    """
    year = day.year + day.month // 12
    month = day.month % 12 + 1
    days_in_month = calendar.monthrange(year, month)[1]

    if day.day <= days_in_month:
        return date(year, month, day.day)
    return date(year, month, days_in_month) + timedelta(days=day.day - days_in_month)


def next_due_date(current: date, frequency: Frequency) -> date:
    """Return the contribution date following ``current``."""
    if frequency == Frequency.MONTHLY:
        return add_month(current)
    if frequency == Frequency.WEEKLY:
        return current + timedelta(days=7)
    return current + timedelta(days=1)


def iter_schedule(
    committee: Committee,
    start: date | datetime | None = None,
    end: date | datetime | None = None,
    today: date | None = None,
) -> Iterator[date]:
    """Yield expected contribution dates from start through end inclusive.

    Args:
        committee: Committee whose frequency drives the stepping
        start: Override for the committee start date
        end: Last date to include (defaults to today)
        today: Clock override used when ``end`` is omitted

    Yields:
        Contribution dates in increasing order
    """
    current = to_date(start) if start is not None else to_date(committee.start_date)
    if end is not None:
        last = to_date(end)
    else:
        last = today or date.today()

    frequency = committee.cycle
    while current <= last:
        yield current
        current = next_due_date(current, frequency)


def generate_schedule(
    committee: Committee,
    start: date | datetime | None = None,
    end: date | datetime | None = None,
    today: date | None = None,
) -> list[date]:
    """Materialize the expected contribution dates for a committee."""
    dates = list(iter_schedule(committee, start=start, end=end, today=today))
    logger.debug(
        f"Schedule for {committee.code or committee.id}: {len(dates)} "
        f"{committee.cycle.value} cycles"
    )
    return dates
