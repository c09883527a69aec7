"""
Committee Repository Module

Reads committees, members and payments from the database.
"""

import logging
from pathlib import Path

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .config import load_config
from .exceptions import CommitteeNotFoundError, DataAccessError
from .models import Committee, Member, Payment

logger = logging.getLogger(__name__)

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS committees (
        id VARCHAR(64) PRIMARY KEY,
        name VARCHAR(200) NOT NULL,
        code VARCHAR(32) NOT NULL,
        contribution_amount NUMERIC(14, 2) NOT NULL,
        frequency VARCHAR(16) NOT NULL,
        start_date DATE NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS members (
        id VARCHAR(64) PRIMARY KEY,
        committee_id VARCHAR(64) NOT NULL REFERENCES committees(id),
        name VARCHAR(200) NOT NULL,
        phone VARCHAR(32),
        payout_order INTEGER NOT NULL,
        has_received_payout BOOLEAN NOT NULL DEFAULT FALSE,
        payout_date DATE,
        UNIQUE (committee_id, payout_order)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS payments (
        id VARCHAR(64) PRIMARY KEY,
        member_id VARCHAR(64) NOT NULL REFERENCES members(id),
        date DATE NOT NULL,
        is_paid BOOLEAN NOT NULL DEFAULT FALSE,
        seq INTEGER NOT NULL DEFAULT 0
    )
    """,
]


class CommitteeRepository:
    """Query-by-committee access to stored report data."""

    def __init__(
        self,
        engine: Engine | None = None,
        config_dir: Path | str | None = None,
    ):
        """Initialize the repository.

        Args:
            engine: SQLAlchemy engine (built from config when omitted)
            config_dir: Path to configuration directory
        """
        if engine is None:
            config = load_config(config_dir)
            engine = create_engine(config["database"]["url"], pool_pre_ping=True)
        self.engine = engine

    def create_schema(self) -> None:
        """Create the committee tables if they do not exist."""
        with self.engine.begin() as conn:
            for statement in SCHEMA:
                conn.execute(text(statement))

    def _fetch(self, query: str, params: dict) -> list[dict]:
        try:
            with self.engine.connect() as conn:
                result = conn.execute(text(query), params)
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            logger.error(f"Failed to query report data: {e}")
            raise DataAccessError(str(e)) from e

    def get_committee(self, committee_id: str) -> Committee:
        """Get a committee by id.

        Raises:
            CommitteeNotFoundError: No committee has this id
        """
        rows = self._fetch(
            """
            SELECT id, name, code, contribution_amount, frequency, start_date
            FROM committees
            WHERE id = :committee_id
            """,
            {"committee_id": committee_id},
        )
        if not rows:
            raise CommitteeNotFoundError(committee_id)
        return Committee.from_row(rows[0])

    def get_members_by_committee(self, committee_id: str) -> list[Member]:
        """Get a committee's members in storage order."""
        rows = self._fetch(
            """
            SELECT id, committee_id, name, phone, payout_order,
                   has_received_payout, payout_date
            FROM members
            WHERE committee_id = :committee_id
            """,
            {"committee_id": committee_id},
        )
        return [Member.from_row(row) for row in rows]

    def get_payments_by_committee(self, committee_id: str) -> list[Payment]:
        """Get all payments recorded for a committee's members in recording order."""
        rows = self._fetch(
            """
            SELECT p.id, p.member_id, p.date, p.is_paid
            FROM payments p
            JOIN members m ON m.id = p.member_id
            WHERE m.committee_id = :committee_id
            ORDER BY p.seq, p.id
            """,
            {"committee_id": committee_id},
        )
        return [Payment.from_row(row) for row in rows]

    def add_committee(self, committee: Committee) -> None:
        self._insert("committees", committee.to_dict())

    def add_member(self, member: Member) -> None:
        self._insert("members", member.to_dict())

    def add_payment(self, payment: Payment) -> None:
        """Record a payment after every payment already stored."""
        data = payment.to_dict()
        try:
            with self.engine.begin() as conn:
                data["seq"] = conn.execute(
                    text("SELECT COALESCE(MAX(seq), 0) + 1 FROM payments")
                ).scalar_one()
                conn.execute(
                    text(
                        "INSERT INTO payments (id, member_id, date, is_paid, seq) "
                        "VALUES (:id, :member_id, :date, :is_paid, :seq)"
                    ),
                    data,
                )
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert payment {payment.id}: {e}")
            raise DataAccessError(str(e)) from e

    def _insert(self, table: str, data: dict) -> None:
        columns = ", ".join(data.keys())
        placeholders = ", ".join(f":{k}" for k in data.keys())
        query = f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"
        try:
            with self.engine.begin() as conn:
                conn.execute(text(query), data)
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert into {table}: {e}")
            raise DataAccessError(str(e)) from e
