"""
Payment Matcher Module

Resolves whether a member paid on an expected contribution date.
"""

from datetime import date
from typing import Iterable

from .models import Payment


def find_payment(payments: Iterable[Payment], member_id: str, day: date) -> Payment | None:
    """Return the first payment recorded for the member on the given day."""
    for payment in payments:
        if payment.member_id == member_id and payment.date == day:
            return payment
    return None


def is_paid(payments: Iterable[Payment], member_id: str, day: date) -> bool:
    """Check whether the first payment for the member on that day is paid.

    A missing record means unpaid.
    """
    payment = find_payment(payments, member_id, day)
    return payment is not None and payment.is_paid


class PaymentIndex:
    """Payments keyed by (member, date), first record per key wins."""

    def __init__(self, payments: Iterable[Payment]):
        self._index: dict[tuple[str, date], Payment] = {}
        for payment in payments:
            self._index.setdefault((payment.member_id, payment.date), payment)

    def __len__(self) -> int:
        return len(self._index)

    def find(self, member_id: str, day: date) -> Payment | None:
        return self._index.get((member_id, day))

    def is_paid(self, member_id: str, day: date) -> bool:
        payment = self.find(member_id, day)
        return payment is not None and payment.is_paid

    def paid_count(self, member_id: str, schedule: Iterable[date]) -> int:
        """Count scheduled dates the member paid on."""
        return sum(1 for day in schedule if self.is_paid(member_id, day))
