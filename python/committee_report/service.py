"""
Committee Report Service

Loads committee data, aggregates it once and renders the PDF and flat
exports from the same figures.
"""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Callable

from .aggregator import AggregatedReport, ContributionAggregator
from .config import load_config
from .delivery import DeliveredReport, FileDelivery
from .flat_export import FlatReportExporter
from .formatting import report_filename, report_subject
from .pdf_report import PdfReportRenderer
from .repository import CommitteeRepository
from .schedule import generate_schedule

logger = logging.getLogger(__name__)


class ReportService:
    """Builds and exports committee payment reports."""

    def __init__(
        self,
        repository: CommitteeRepository,
        delivery: FileDelivery | None = None,
        config_dir: Path | str | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize the service.

        Args:
            repository: Data-access collaborator
            delivery: Destination for finished reports
            config_dir: Path to configuration directory
            clock: Source of "now" for schedule end and timestamps
        """
        self.repository = repository
        self.config = load_config(config_dir)
        self.delivery = delivery or FileDelivery(self.config["delivery"]["output_dir"])
        self.clock = clock

        self.aggregator = ContributionAggregator(config=self.config)
        self.pdf_renderer = PdfReportRenderer(config=self.config)
        self.flat_exporter = FlatReportExporter(config=self.config)

    def build_report(
        self,
        committee_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> AggregatedReport:
        """Load a committee and aggregate its payments.

        Args:
            committee_id: Committee to report on
            start_date: Override for the committee start date
            end_date: Last date of the period (defaults to today)

        Returns:
            AggregatedReport

        Raises:
            DataAccessError: Committee data could not be loaded
        """
        committee = self.repository.get_committee(committee_id)
        members = sorted(
            self.repository.get_members_by_committee(committee_id),
            key=lambda m: m.payout_order,
        )
        payments = self.repository.get_payments_by_committee(committee_id)

        schedule = generate_schedule(
            committee,
            start=start_date,
            end=end_date,
            today=self.clock().date(),
        )
        return self.aggregator.aggregate(committee, members, payments, schedule)

    def render_pdf(self, report: AggregatedReport) -> bytes:
        return self.pdf_renderer.render(report, generated_at=self.clock())

    def render_csv(self, report: AggregatedReport) -> bytes:
        return self.flat_exporter.to_csv_bytes(report, generated_at=self.clock())

    def render_xlsx(self, report: AggregatedReport) -> bytes:
        return self.flat_exporter.to_xlsx(report, generated_at=self.clock())

    def _export(
        self,
        committee_id: str,
        start_date: date | None,
        end_date: date | None,
        extension: str,
        render: Callable[[AggregatedReport], bytes],
    ) -> DeliveredReport:
        report = self.build_report(committee_id, start_date, end_date)
        content = render(report)
        name = report.committee.name
        delivered = self.delivery.deliver(
            content,
            filename=report_filename(name, extension),
            subject=report_subject(name),
        )
        logger.info(
            f"Exported {extension.upper()} report for {name}: "
            f"{report.totals.total_paid}/{report.totals.total_expected} payments"
        )
        return delivered

    def export_pdf(
        self,
        committee_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> DeliveredReport:
        """Render a committee PDF report and deliver it."""
        return self._export(committee_id, start_date, end_date, "pdf", self.render_pdf)

    def export_csv(
        self,
        committee_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> DeliveredReport:
        """Render a committee CSV export and deliver it."""
        return self._export(committee_id, start_date, end_date, "csv", self.render_csv)

    def export_xlsx(
        self,
        committee_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> DeliveredReport:
        """Render a committee workbook export and deliver it."""
        return self._export(committee_id, start_date, end_date, "xlsx", self.render_xlsx)
