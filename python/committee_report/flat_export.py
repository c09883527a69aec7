"""
Committee Flat Export Module

Writes an aggregated committee report as flat rows: delimited text
(CSV) or a single-sheet workbook.
"""

import csv
import io
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from .aggregator import AggregatedReport, MemberAggregate
from .config import load_config
from .formatting import (
    format_amount,
    format_date,
    format_fraction,
    format_percent,
    payout_label,
)

logger = logging.getLogger(__name__)

DETAIL_HEADERS = [
    "Order",
    "Name",
    "Phone",
    "Payments Made",
    "Percentage",
    "Total Paid",
    "Payout Status",
    "Payout Date",
]


class FlatReportExporter:
    """Exports committee reports as CSV or XLSX."""

    def __init__(self, config_dir: Path | str | None = None, config: dict | None = None):
        """Initialize the exporter.

        Args:
            config_dir: Path to configuration directory
            config: Already-loaded configuration (skips loading)
        """
        self.config = config if config is not None else load_config(config_dir)
        self.formats = self.config.get("formats", {})

    def build_rows(
        self,
        report: AggregatedReport,
        generated_at: datetime | None = None,
    ) -> list[list[Any]]:
        """Build the export rows.

        Args:
            report: Aggregated committee report
            generated_at: Timestamp written under the title

        Returns:
            List of rows, an empty list marking a blank separator
        """
        generated_at = generated_at or datetime.now()
        committee = report.committee
        totals = report.totals
        label = report.currency_label
        timestamp = generated_at.strftime(self.formats.get("export_timestamp", "%d %B %Y, %I:%M %p"))

        rows: list[list[Any]] = [
            [f"{committee.name} - Payment Report"],
            [f"Code: {committee.code}"],
            [f"Generated: {timestamp}"],
            [],
            ["SUMMARY"],
            ["Contribution", format_amount(committee.contribution_amount, label)],
            ["Frequency", committee.frequency.upper()],
            ["Members", totals.member_count],
            ["Collection Rate", format_percent(totals.collection_rate)],
            ["Total Collected", format_amount(totals.total_collected, label)],
            ["Total Pending", format_amount(totals.total_pending, label)],
            ["Payouts Completed", format_fraction(totals.payouts_completed, totals.member_count)],
            ["Cycles", totals.cycle_count],
            [],
            ["MEMBER DETAILS"],
            list(DETAIL_HEADERS),
        ]

        rows.extend(self._member_row(record, label) for record in report.members)
        rows.append([
            "",
            "TOTAL",
            "",
            format_fraction(totals.total_paid, totals.total_expected),
            format_percent(totals.collection_rate),
            format_amount(totals.total_collected, label),
            f"{totals.payouts_completed} done",
            "",
        ])
        return rows

    def _member_row(self, record: MemberAggregate, label: str) -> list[Any]:
        member = record.member
        return [
            member.payout_order,
            member.name,
            member.phone,
            format_fraction(record.paid_count, record.expected_count),
            format_percent(record.percentage),
            format_amount(record.total_paid, label),
            payout_label(member.has_received_payout),
            format_date(member.payout_date, self.formats.get("export_date", "%d/%m/%Y")),
        ]

    def to_csv(self, report: AggregatedReport, generated_at: datetime | None = None) -> str:
        """Encode the report as comma-separated text."""
        output = io.StringIO()
        writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
        writer.writerows(self.build_rows(report, generated_at))
        return output.getvalue()

    def to_csv_bytes(self, report: AggregatedReport, generated_at: datetime | None = None) -> bytes:
        content = self.to_csv(report, generated_at).encode("utf-8")
        logger.info(f"Exported CSV report for {report.committee.name}: {len(content)} bytes")
        return content

    def to_xlsx(self, report: AggregatedReport, generated_at: datetime | None = None) -> bytes:
        """Write the same rows to a workbook.

        Args:
            report: Aggregated committee report
            generated_at: Timestamp written under the title

        Returns:
            XLSX file bytes
        """
        rows = self.build_rows(report, generated_at)

        wb = Workbook()
        ws = wb.active
        ws.title = "Payment Report"

        header_fill = PatternFill(start_color="1A1A2E", end_color="1A1A2E", fill_type="solid")
        header_font = Font(bold=True, color="FFFFFF")
        bold_font = Font(bold=True)

        for row_num, row in enumerate(rows, 1):
            for col, value in enumerate(row, 1):
                ws.cell(row=row_num, column=col, value=value)

        ws["A1"].font = Font(bold=True, size=14)
        header_row = rows.index(DETAIL_HEADERS) + 1
        for col in range(1, len(DETAIL_HEADERS) + 1):
            cell = ws.cell(row=header_row, column=col)
            cell.fill = header_fill
            cell.font = header_font

        for row_num, row in enumerate(rows, 1):
            if row and row[0] in ("SUMMARY", "MEMBER DETAILS"):
                ws.cell(row=row_num, column=1).font = bold_font
        for col in range(1, len(DETAIL_HEADERS) + 1):
            ws.cell(row=len(rows), column=col).font = bold_font

        # Widths from the detail block only
        for col in ws.iter_cols(min_row=header_row):
            max_length = max(len(str(cell.value or "")) for cell in col)
            ws.column_dimensions[col[0].column_letter].width = min(max_length + 2, 30)

        buffer = io.BytesIO()
        wb.save(buffer)
        content = buffer.getvalue()
        logger.info(f"Exported XLSX report for {report.committee.name}: {len(content)} bytes")
        return content
