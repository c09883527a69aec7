"""
Committee Data Models

Committees, their members and the payment log read from storage.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping


class Frequency(Enum):
    """Contribution cycle frequency."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: str | None) -> "Frequency":
        """Parse a stored frequency, falling back to daily.

        Only the exact lower-case names match.
        """
        try:
            return cls(value)
        except ValueError:
            return cls.DAILY


def to_date(value: Any) -> date | None:
    """Truncate a date, datetime or ISO string to a date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value)).date()


@dataclass(frozen=True)
class Committee:
    """A rotating contribution group."""

    id: str
    name: str
    code: str
    contribution_amount: Decimal
    frequency: str
    start_date: date

    @property
    def cycle(self) -> Frequency:
        return Frequency.parse(self.frequency)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Committee":
        return cls(
            id=str(row["id"]),
            name=row["name"],
            code=row.get("code") or "",
            contribution_amount=Decimal(str(row.get("contribution_amount", 0))),
            frequency=row.get("frequency") or "",
            start_date=to_date(row["start_date"]),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "contribution_amount": float(self.contribution_amount),
            "frequency": self.frequency,
            "start_date": self.start_date.isoformat(),
        }


@dataclass(frozen=True)
class Member:
    """A committee member and their payout position."""

    id: str
    committee_id: str
    name: str
    phone: str
    payout_order: int
    has_received_payout: bool = False
    payout_date: date | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Member":
        return cls(
            id=str(row["id"]),
            committee_id=str(row["committee_id"]),
            name=row["name"],
            phone=row.get("phone") or "",
            payout_order=int(row.get("payout_order", 0)),
            has_received_payout=bool(row.get("has_received_payout", False)),
            payout_date=to_date(row.get("payout_date")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "committee_id": self.committee_id,
            "name": self.name,
            "phone": self.phone,
            "payout_order": self.payout_order,
            "has_received_payout": self.has_received_payout,
            "payout_date": self.payout_date.isoformat() if self.payout_date else None,
        }


@dataclass(frozen=True)
class Payment:
    """A single recorded contribution for one member on one date."""

    id: str
    member_id: str
    date: date
    is_paid: bool = True

    def __post_init__(self):
        # Time of day is never significant
        if isinstance(self.date, datetime):
            object.__setattr__(self, "date", self.date.date())

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Payment":
        return cls(
            id=str(row["id"]),
            member_id=str(row["member_id"]),
            date=to_date(row["date"]),
            is_paid=bool(row.get("is_paid", False)),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "member_id": self.member_id,
            "date": self.date.isoformat(),
            "is_paid": self.is_paid,
        }
