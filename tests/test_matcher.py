"""
Tests for Payment Matcher Module
"""

from datetime import date, datetime

from committee_report import Payment, PaymentIndex, find_payment, is_paid


class TestIsPaid:
    """Tests for first-match payment lookup."""

    def test_no_record_is_unpaid(self, payments):
        """Test a date with no record counts as unpaid."""
        assert is_paid(payments, "m-2", date(2024, 5, 1)) is False
        assert find_payment(payments, "m-2", date(2024, 5, 1)) is None

    def test_unpaid_record(self, payments):
        """Test an unpaid record counts as unpaid."""
        assert is_paid(payments, "m-2", date(2024, 3, 1)) is False

    def test_paid_record(self, payments):
        """Test a paid record counts as paid."""
        assert is_paid(payments, "m-1", date(2024, 3, 1)) is True

    def test_other_member_does_not_match(self, payments):
        """Test another member's record does not match."""
        assert is_paid(payments, "m-9", date(2024, 1, 1)) is False

    def test_first_duplicate_wins(self, payments):
        """Test the first record for a member and date wins."""
        assert find_payment(payments, "m-3", date(2024, 2, 1)).id == "p-10"
        assert is_paid(payments, "m-3", date(2024, 2, 1)) is False

    def test_time_of_day_ignored(self):
        """Test records match on calendar date regardless of time."""
        payments = [Payment("p-1", "m-1", datetime(2024, 1, 1, 23, 59), True)]

        assert is_paid(payments, "m-1", date(2024, 1, 1)) is True

    def test_empty_log(self):
        """Test an empty payment log has nothing paid."""
        assert is_paid([], "m-1", date(2024, 1, 1)) is False


class TestPaymentIndex:
    """PaymentIndex must agree with the linear search."""

    def test_agrees_with_linear_search(self, payments):
        """Test indexed lookups match the linear search."""
        index = PaymentIndex(payments)
        days = [date(2024, 1, 1), date(2024, 2, 1), date(2024, 2, 15), date(2024, 3, 1), date(2024, 6, 1)]

        for member_id in ("m-1", "m-2", "m-3", "m-4"):
            for day in days:
                assert index.is_paid(member_id, day) == is_paid(payments, member_id, day)
                assert index.find(member_id, day) == find_payment(payments, member_id, day)

    def test_paid_count(self, payments, schedule):
        """Test paid dates are counted per member over the schedule."""
        index = PaymentIndex(payments)

        assert index.paid_count("m-1", schedule) == 4
        assert index.paid_count("m-2", schedule) == 3
        assert index.paid_count("m-3", schedule) == 1

    def test_keeps_first_per_key(self, payments):
        """Test duplicate records collapse to one index entry."""
        assert len(PaymentIndex(payments)) == len(payments) - 1
