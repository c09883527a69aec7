"""
Committee Report Module

Reconciles committee contribution schedules against recorded payments
and renders PDF and flat (CSV/XLSX) reports.
"""

from .models import Committee, Frequency, Member, Payment
from .schedule import add_month, generate_schedule, iter_schedule
from .matcher import PaymentIndex, find_payment, is_paid
from .aggregator import (
    AggregatedReport,
    CommitteeTotals,
    ContributionAggregator,
    MemberAggregate,
    aggregate,
)
from .pdf_report import PdfReportRenderer
from .flat_export import FlatReportExporter
from .repository import CommitteeRepository
from .delivery import DeliveredReport, FileDelivery
from .service import ReportService
from .exceptions import (
    CommitteeNotFoundError,
    DataAccessError,
    DeliveryError,
    ReportError,
)

__all__ = [
    # Models
    "Committee",
    "Frequency",
    "Member",
    "Payment",
    # Schedule
    "add_month",
    "generate_schedule",
    "iter_schedule",
    # Matching
    "PaymentIndex",
    "find_payment",
    "is_paid",
    # Aggregation
    "AggregatedReport",
    "CommitteeTotals",
    "ContributionAggregator",
    "MemberAggregate",
    "aggregate",
    # Rendering
    "PdfReportRenderer",
    "FlatReportExporter",
    # Collaborators
    "CommitteeRepository",
    "DeliveredReport",
    "FileDelivery",
    "ReportService",
    # Errors
    "ReportError",
    "DataAccessError",
    "CommitteeNotFoundError",
    "DeliveryError",
]
