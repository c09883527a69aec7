"""
Report Exceptions

Failures raised by the data-access and delivery collaborators.
"""


class ReportError(Exception):
    """Base class for report generation failures."""


class DataAccessError(ReportError):
    """Committee, member or payment data could not be loaded."""


class CommitteeNotFoundError(DataAccessError):
    """No committee exists with the requested id."""

    def __init__(self, committee_id: str):
        super().__init__(f"Committee not found: {committee_id}")
        self.committee_id = committee_id


class DeliveryError(ReportError):
    """A finished report could not be saved or shared."""
