"""
Contribution Aggregator Module

Matches the payment log against the contribution schedule and computes
per-member and committee-wide statistics. Both report formats render
from the single AggregatedReport produced here.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from .config import load_config
from .formatting import collection_rate, floor_percentage, highlight_for
from .matcher import PaymentIndex
from .models import Committee, Member, Payment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemberAggregate:
    """Payment statistics for one member."""

    member: Member
    paid_count: int
    expected_count: int
    percentage: int
    total_paid: Decimal
    highlight: str

    def to_dict(self) -> dict:
        return {
            "member_id": self.member.id,
            "payout_order": self.member.payout_order,
            "name": self.member.name,
            "paid_count": self.paid_count,
            "expected_count": self.expected_count,
            "percentage": self.percentage,
            "total_paid": float(self.total_paid),
            "highlight": self.highlight,
        }


@dataclass(frozen=True)
class CommitteeTotals:
    """Committee-wide figures summed from the member records."""

    member_count: int
    cycle_count: int
    total_paid: int
    total_expected: int
    collection_rate: str
    total_collected: Decimal
    total_pending: Decimal
    payouts_completed: int

    def to_dict(self) -> dict:
        return {
            "member_count": self.member_count,
            "cycle_count": self.cycle_count,
            "total_paid": self.total_paid,
            "total_expected": self.total_expected,
            "collection_rate": self.collection_rate,
            "total_collected": float(self.total_collected),
            "total_pending": float(self.total_pending),
            "payouts_completed": self.payouts_completed,
        }


@dataclass(frozen=True)
class AggregatedReport:
    """Everything a renderer needs for one committee report."""

    committee: Committee
    schedule: list[date]
    members: list[MemberAggregate]
    totals: CommitteeTotals
    currency_label: str = "Rs."

    def to_dict(self) -> dict:
        return {
            "committee": self.committee.to_dict(),
            "schedule": [d.isoformat() for d in self.schedule],
            "members": [m.to_dict() for m in self.members],
            "totals": self.totals.to_dict(),
        }


class ContributionAggregator:
    """Computes member and committee statistics."""

    def __init__(self, config_dir: Path | str | None = None, config: dict | None = None):
        """Initialize the aggregator.

        Args:
            config_dir: Path to configuration directory
            config: Already-loaded configuration (skips loading)
        """
        self.config = config if config is not None else load_config(config_dir)
        highlight = self.config.get("highlight", {})
        self.good_percentage = int(highlight.get("good_percentage", 80))
        self.poor_percentage = int(highlight.get("poor_percentage", 50))
        self.currency_label = self.config.get("currency_label", "Rs.")

    def aggregate_member(
        self,
        committee: Committee,
        member: Member,
        index: PaymentIndex,
        schedule: list[date],
    ) -> MemberAggregate:
        paid_count = index.paid_count(member.id, schedule)
        expected_count = len(schedule)
        percentage = floor_percentage(paid_count, expected_count)

        return MemberAggregate(
            member=member,
            paid_count=paid_count,
            expected_count=expected_count,
            percentage=percentage,
            total_paid=paid_count * committee.contribution_amount,
            highlight=highlight_for(percentage, self.good_percentage, self.poor_percentage),
        )

    def summarize(
        self,
        committee: Committee,
        records: list[MemberAggregate],
        cycle_count: int,
    ) -> CommitteeTotals:
        """Sum member records into committee totals."""
        total_paid = sum(r.paid_count for r in records)
        total_expected = sum(r.expected_count for r in records)
        total_collected = sum((r.total_paid for r in records), Decimal("0"))

        return CommitteeTotals(
            member_count=len(records),
            cycle_count=cycle_count,
            total_paid=total_paid,
            total_expected=total_expected,
            collection_rate=collection_rate(total_paid, total_expected),
            total_collected=total_collected,
            total_pending=(total_expected - total_paid) * committee.contribution_amount,
            payouts_completed=sum(1 for r in records if r.member.has_received_payout),
        )

    def aggregate(
        self,
        committee: Committee,
        members: Iterable[Member],
        payments: Iterable[Payment],
        schedule: Iterable[date],
    ) -> AggregatedReport:
        """Aggregate a committee's payments against its schedule.

        Args:
            committee: Committee being reported
            members: Members already sorted by payout order
            payments: Payment log in storage order
            schedule: Expected contribution dates

        Returns:
            AggregatedReport
        """
        schedule = list(schedule)
        index = PaymentIndex(payments)

        records = [
            self.aggregate_member(committee, member, index, schedule)
            for member in members
        ]
        totals = self.summarize(committee, records, len(schedule))

        logger.debug(
            f"Aggregated {committee.code or committee.id}: {totals.total_paid}/"
            f"{totals.total_expected} paid ({totals.collection_rate}%)"
        )

        return AggregatedReport(
            committee=committee,
            schedule=schedule,
            members=records,
            totals=totals,
            currency_label=self.currency_label,
        )


def aggregate(
    committee: Committee,
    members: Iterable[Member],
    payments: Iterable[Payment],
    schedule: Iterable[date],
) -> AggregatedReport:
    """Aggregate with default thresholds."""
    return ContributionAggregator(config={}).aggregate(committee, members, payments, schedule)
