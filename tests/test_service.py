"""
Tests for the repository, delivery and report service
"""

from datetime import date, datetime
from decimal import Decimal
from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine

from committee_report import (
    CommitteeNotFoundError,
    CommitteeRepository,
    DataAccessError,
    DeliveryError,
    FileDelivery,
    Payment,
    ReportService,
)


@pytest.fixture
def repository(tmp_path, committee, members, payments):
    engine = create_engine(f"sqlite:///{tmp_path / 'committees.db'}")
    repo = CommitteeRepository(engine=engine)
    repo.create_schema()
    repo.add_committee(committee)
    # Stored out of payout order
    for member in reversed(members):
        repo.add_member(member)
    for payment in payments:
        repo.add_payment(payment)
    return repo


@pytest.fixture
def service(repository, tmp_path, config_dir):
    return ReportService(
        repository,
        delivery=FileDelivery(tmp_path / "out"),
        config_dir=config_dir,
        clock=lambda: datetime(2024, 4, 1, 9, 0),
    )


class TestCommitteeRepository:
    """Tests for database access."""

    def test_get_committee(self, repository):
        """Test a stored committee is loaded with typed fields."""
        committee = repository.get_committee("c-1")

        assert committee.name == "Office Pool"
        assert committee.code == "OP24"
        assert committee.contribution_amount == Decimal("5000")
        assert committee.start_date == date(2024, 1, 1)
        assert committee.frequency == "monthly"

    def test_unknown_committee(self, repository):
        """Test an unknown committee id raises CommitteeNotFoundError."""
        with pytest.raises(CommitteeNotFoundError) as exc_info:
            repository.get_committee("missing")

        assert exc_info.value.committee_id == "missing"

    def test_members_by_committee(self, repository):
        """Test a committee's members are loaded."""
        members = repository.get_members_by_committee("c-1")

        assert sorted(m.id for m in members) == ["m-1", "m-2", "m-3"]
        ayesha = next(m for m in members if m.id == "m-1")
        assert ayesha.has_received_payout is True
        assert ayesha.payout_date == date(2024, 1, 15)

    def test_payments_by_committee(self, repository, payments):
        """Test a committee's payments are loaded with dates."""
        loaded = repository.get_payments_by_committee("c-1")

        assert len(loaded) == len(payments)
        assert all(isinstance(p.date, date) for p in loaded)

    def test_payments_returned_in_recording_order(self, repository, payments):
        """Test payments come back in the order they were recorded."""
        # Ids sort opposite to recording order
        repository.add_payment(Payment("p-z", "m-3", date(2024, 3, 1), False))
        repository.add_payment(Payment("p-a", "m-3", date(2024, 3, 1), True))

        loaded = repository.get_payments_by_committee("c-1")

        assert [p.id for p in loaded[-2:]] == ["p-z", "p-a"]
        assert [p.id for p in loaded[:-2]] == [p.id for p in payments]

    def test_query_failure_raises_data_access_error(self, tmp_path):
        """Test a database error raises DataAccessError."""
        repo = CommitteeRepository(engine=create_engine(f"sqlite:///{tmp_path / 'empty.db'}"))

        with pytest.raises(DataAccessError):
            repo.get_members_by_committee("c-1")


class TestFileDelivery:
    """Tests for saving finished reports."""

    def test_deliver_writes_file(self, tmp_path):
        """Test a delivered report is written to the output directory."""
        delivery = FileDelivery(tmp_path / "reports")

        result = delivery.deliver(b"a,b\r\n", "Office Pool_report.csv", "Office Pool Report")

        assert result.file_path == tmp_path / "reports" / "Office Pool_report.csv"
        assert result.file_path.read_bytes() == b"a,b\r\n"
        assert result.size == 5
        assert result.content_type.startswith("text/csv")
        assert result.to_dict()["subject"] == "Office Pool Report"

    def test_deliver_strips_directories(self, tmp_path):
        """Test directory parts of the filename are dropped."""
        result = FileDelivery(tmp_path).deliver(b"x", "../escape.pdf", "s")

        assert result.file_path == tmp_path / "escape.pdf"

    def test_write_failure_raises(self, tmp_path):
        """Test a failed write raises DeliveryError."""
        blocker = tmp_path / "blocked"
        blocker.write_text("not a directory")

        with pytest.raises(DeliveryError):
            FileDelivery(blocker).deliver(b"x", "report.pdf", "s")


class TestReportService:
    """Tests for end-to-end report generation."""

    def test_build_report_sorts_members_and_uses_clock(self, service):
        """Test members are sorted by payout order and the schedule ends today."""
        report = service.build_report("c-1")

        assert [r.member.payout_order for r in report.members] == [1, 2, 3]
        assert report.schedule[-1] == date(2024, 4, 1)
        assert report.totals.total_paid == 8
        assert report.totals.collection_rate == "66.7"

    def test_date_range_override(self, service):
        """Test start and end dates override the defaults."""
        report = service.build_report("c-1", start_date=date(2024, 2, 1), end_date=date(2024, 3, 1))

        assert report.schedule == [date(2024, 2, 1), date(2024, 3, 1)]
        assert report.totals.total_expected == 6

    def test_duplicate_resolution_follows_recording_order(self, service, repository):
        """Test the first recorded duplicate decides paid status."""
        repository.add_payment(Payment("p-z", "m-3", date(2024, 3, 1), False))
        repository.add_payment(Payment("p-a", "m-3", date(2024, 3, 1), True))

        report = service.build_report("c-1")
        by_id = {r.member.id: r for r in report.members}

        assert by_id["m-3"].paid_count == 1
        assert report.totals.total_paid == 8

    def test_export_pdf(self, service, tmp_path):
        """Test the PDF report is delivered under the committee name."""
        delivered = service.export_pdf("c-1")

        assert delivered.filename == "Office Pool_report.pdf"
        assert delivered.subject == "Office Pool Report"
        assert delivered.file_path.read_bytes().startswith(b"%PDF")

    def test_export_csv(self, service):
        """Test the CSV export carries the committee totals."""
        delivered = service.export_csv("c-1")
        text = delivered.file_path.read_text(encoding="utf-8")

        assert delivered.filename == "Office Pool_report.csv"
        assert "Collection Rate,66.7%" in text
        assert "Total Collected,Rs. 40000" in text

    def test_export_xlsx(self, service):
        """Test the workbook export is delivered."""
        delivered = service.export_xlsx("c-1")

        assert delivered.filename == "Office Pool_report.xlsx"
        assert delivered.size > 0

    def test_missing_committee_propagates(self, service):
        """Test a missing committee error reaches the caller."""
        with pytest.raises(CommitteeNotFoundError):
            service.export_pdf("missing")

    def test_delivery_failure_propagates(self, repository, config_dir):
        """Test a delivery error reaches the caller."""
        delivery = Mock()
        delivery.deliver.side_effect = DeliveryError("share sheet closed")
        service = ReportService(repository, delivery=delivery, config_dir=config_dir)

        with pytest.raises(DeliveryError):
            service.export_csv("c-1", end_date=date(2024, 4, 1))

    def test_render_outputs_share_figures(self, service):
        """Test PDF and CSV render the same totals."""
        report = service.build_report("c-1")
        csv_text = service.render_csv(report).decode("utf-8")

        assert service.render_pdf(report).startswith(b"%PDF")
        assert f"Rs. {int(report.totals.total_collected)}" in csv_text
        assert f"{report.totals.collection_rate}%" in csv_text
