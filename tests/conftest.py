"""
Pytest configuration and fixtures for committee report tests.
"""

from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from committee_report import Committee, Member, Payment

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def config_dir() -> Path:
    """Return the config directory path."""
    return PROJECT_ROOT / "config"


@pytest.fixture
def generated_at() -> datetime:
    """Fixed report timestamp."""
    return datetime(2024, 4, 1, 14, 30)


@pytest.fixture
def committee() -> Committee:
    """Return a monthly committee starting 2024-01-01."""
    return Committee(
        id="c-1",
        name="Office Pool",
        code="OP24",
        contribution_amount=Decimal("5000"),
        frequency="monthly",
        start_date=date(2024, 1, 1),
    )


@pytest.fixture
def members() -> list[Member]:
    """Return three members already in payout order."""
    return [
        Member(
            id="m-1",
            committee_id="c-1",
            name="Ayesha Khan",
            phone="0300-1111111",
            payout_order=1,
            has_received_payout=True,
            payout_date=date(2024, 1, 15),
        ),
        Member(
            id="m-2",
            committee_id="c-1",
            name="Bilal Ahmed",
            phone="0300-2222222",
            payout_order=2,
        ),
        Member(
            id="m-3",
            committee_id="c-1",
            name="Chaudhry, Sana",
            phone="0300-3333333",
            payout_order=3,
        ),
    ]


@pytest.fixture
def schedule() -> list[date]:
    return [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1), date(2024, 4, 1)]


@pytest.fixture
def payments() -> list[Payment]:
    """m-1 paid 4/4, m-2 paid 3/4, m-3 paid 1/4 plus noise records."""
    return [
        Payment("p-1", "m-1", date(2024, 1, 1), True),
        Payment("p-2", "m-1", date(2024, 2, 1), True),
        Payment("p-3", "m-1", date(2024, 3, 1), True),
        Payment("p-4", "m-1", date(2024, 4, 1), True),
        Payment("p-5", "m-2", date(2024, 1, 1), True),
        Payment("p-6", "m-2", date(2024, 2, 1), True),
        Payment("p-7", "m-2", date(2024, 3, 1), False),
        Payment("p-8", "m-2", date(2024, 4, 1), True),
        Payment("p-9", "m-3", date(2024, 1, 1), True),
        # Unpaid record shadows the later paid duplicate
        Payment("p-10", "m-3", date(2024, 2, 1), False),
        Payment("p-11", "m-3", date(2024, 2, 1), True),
        # Outside the schedule
        Payment("p-12", "m-3", date(2024, 2, 15), True),
        Payment("p-13", "m-3", date(2024, 5, 1), True),
    ]
