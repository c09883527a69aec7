"""
Report Formatting Helpers

Rounding and display rules shared by the document and flat exports.
"""

import re
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

HIGHLIGHT_GOOD = "good"
HIGHLIGHT_POOR = "poor"
HIGHLIGHT_NEUTRAL = "neutral"

PAYOUT_DONE = "DONE"
PAYOUT_PENDING = "Pending"
NO_DATE = "-"


def floor_percentage(part: int, whole: int) -> int:
    """Integer percentage truncated toward zero, 0 for an empty whole."""
    if whole <= 0:
        return 0
    return part * 100 // whole


def collection_rate(paid: int, expected: int) -> str:
    """Percentage with one decimal, "0" when nothing was expected."""
    if expected <= 0:
        return "0"
    rate = Decimal(paid) * 100 / Decimal(expected)
    return str(rate.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def highlight_for(percentage: int, good: int = 80, poor: int = 50) -> str:
    if percentage >= good:
        return HIGHLIGHT_GOOD
    if percentage < poor:
        return HIGHLIGHT_POOR
    return HIGHLIGHT_NEUTRAL


def format_amount(amount: Decimal | int, label: str = "Rs.") -> str:
    """Whole currency units, fractional part dropped."""
    return f"{label} {int(amount)}"


def format_fraction(part: int, whole: int) -> str:
    return f"{part} / {whole}"


def format_percent(value: int | str) -> str:
    return f"{value}%"


def format_date(value: date | None, fmt: str) -> str:
    if value is None:
        return NO_DATE
    return value.strftime(fmt)


def payout_label(has_received_payout: bool) -> str:
    return PAYOUT_DONE if has_received_payout else PAYOUT_PENDING


def report_filename(committee_name: str, extension: str) -> str:
    """Suggested file name, e.g. ``Office Pool_report.pdf``."""
    safe_name = re.sub(r'[\\/:*?"<>|]+', "_", committee_name).strip() or "committee"
    return f"{safe_name}_report.{extension}"


def report_subject(committee_name: str) -> str:
    return f"{committee_name} Report"
