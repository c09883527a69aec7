"""
Report Delivery Module

Hands finished report buffers to a destination. The engine only
produces bytes; where they end up is decided here.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .config import load_config
from .exceptions import DeliveryError

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".csv": "text/csv; charset=utf-8",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


@dataclass
class DeliveredReport:
    """A report handed to its destination."""

    filename: str
    subject: str
    size: int
    content_type: str
    file_path: Path | None = None
    delivered_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "subject": self.subject,
            "size": self.size,
            "content_type": self.content_type,
            "file_path": str(self.file_path) if self.file_path else None,
            "delivered_at": self.delivered_at.isoformat(),
        }


class FileDelivery:
    """Saves report buffers into an output directory."""

    def __init__(
        self,
        output_dir: Path | str | None = None,
        config_dir: Path | str | None = None,
    ):
        """Initialize file delivery.

        Args:
            output_dir: Directory reports are written to
            config_dir: Path to configuration directory
        """
        if output_dir is None:
            config = load_config(config_dir)
            output_dir = config["delivery"]["output_dir"]
        self.output_dir = Path(output_dir)

    def deliver(self, content: bytes, filename: str, subject: str) -> DeliveredReport:
        """Write a finished report to disk.

        Args:
            content: Report bytes
            filename: Suggested file name
            subject: Subject line for sharing

        Returns:
            DeliveredReport

        Raises:
            DeliveryError: The file could not be written
        """
        file_path = self.output_dir / Path(filename).name
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(content)
        except OSError as e:
            logger.error(f"Failed to save report {filename}: {e}")
            raise DeliveryError(f"Could not save {filename}: {e}") from e

        logger.info(f"Saved report '{subject}' to {file_path}")
        return DeliveredReport(
            filename=file_path.name,
            subject=subject,
            size=len(content),
            content_type=CONTENT_TYPES.get(file_path.suffix.lower(), "application/octet-stream"),
            file_path=file_path,
        )
