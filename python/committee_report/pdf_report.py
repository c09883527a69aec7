"""
Committee PDF Report Module

Renders an aggregated committee report as a paginated A4 document:
header, summary panel, member table with totals, payout schedule cards
and a numbered footer.
"""

import logging
from datetime import datetime
from io import BytesIO
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .aggregator import AggregatedReport, MemberAggregate
from .config import load_config
from .formatting import (
    HIGHLIGHT_GOOD,
    HIGHLIGHT_POOR,
    format_amount,
    format_date,
    format_fraction,
    format_percent,
    payout_label,
)

logger = logging.getLogger(__name__)

GREY_300 = colors.HexColor("#E0E0E0")
GREY_400 = colors.HexColor("#BDBDBD")
GREY_600 = colors.HexColor("#757575")
GREEN = colors.HexColor("#4CAF50")
GREEN_400 = colors.HexColor("#66BB6A")

HEADER_HEIGHT = 64
FOOTER_HEIGHT = 32

# Member table column weights: #, name, phone, payments, %, total, payout
COLUMN_WEIGHTS = [0.8, 3, 2, 1.5, 1.2, 2, 1.5]
CARDS_PER_ROW = 3


class NumberedCanvas(canvas.Canvas):
    """Canvas that stamps "Page X of Y" once the page count is known."""

    def __init__(self, *args, margin: float = 32, **kwargs):
        canvas.Canvas.__init__(self, *args, **kwargs)
        self._saved_page_states = []
        self._margin = margin

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        page_count = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_page_number(page_count)
            canvas.Canvas.showPage(self)
        canvas.Canvas.save(self)

    def _draw_page_number(self, page_count: int) -> None:
        width, _ = self._pagesize
        self.setFont("Helvetica", 9)
        self.setFillColor(GREY_600)
        self.drawRightString(
            width - self._margin,
            self._margin + 6,
            f"Page {self._pageNumber} of {page_count}",
        )


class PdfReportRenderer:
    """Renders committee payment reports to PDF bytes."""

    def __init__(self, config_dir: Path | str | None = None, config: dict | None = None):
        """Initialize the renderer.

        Args:
            config_dir: Path to configuration directory
            config: Already-loaded configuration (skips loading)
        """
        self.config = config if config is not None else load_config(config_dir)
        self._setup_styles()

    def _setup_styles(self) -> None:
        """Setup colors and paragraph styles from config."""
        theme = self.config.get("theme", {})
        self.primary = colors.HexColor(theme.get("primary", "#1A1A2E"))
        self.accent = colors.HexColor(theme.get("accent", "#00C853"))
        self.light_green = colors.HexColor(theme.get("light_green", "#E8F5E9"))
        self.light_red = colors.HexColor(theme.get("light_red", "#FFEBEE"))
        self.light_bg = colors.HexColor(theme.get("light_bg", "#F8F9FA"))

        self.margin = float(self.config.get("page", {}).get("margin", 32))
        self.formats = self.config.get("formats", {})

        styles = getSampleStyleSheet()
        self.section_style = ParagraphStyle(
            "Section", parent=styles["Normal"], fontName="Helvetica-Bold",
            fontSize=16, leading=20, textColor=self.primary, spaceAfter=12,
        )
        self.label_style = ParagraphStyle(
            "StatLabel", parent=styles["Normal"], fontSize=9, leading=11, textColor=GREY_600,
        )
        self.value_style = ParagraphStyle(
            "StatValue", parent=styles["Normal"], fontName="Helvetica-Bold",
            fontSize=14, leading=17, textColor=self.primary,
        )
        self.highlight_value_style = ParagraphStyle(
            "StatValueHighlight", parent=self.value_style, textColor=self.accent,
        )
        self.cell_style = ParagraphStyle(
            "Cell", parent=styles["Normal"], fontSize=10, leading=12,
        )
        self.bold_cell_style = ParagraphStyle(
            "CellBold", parent=self.cell_style, fontName="Helvetica-Bold",
        )
        self.card_title_style = ParagraphStyle(
            "CardTitle", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=11, leading=13,
        )
        self.card_order_style = ParagraphStyle(
            "CardOrder", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=10, leading=12,
        )
        self.card_note_style = ParagraphStyle(
            "CardNote", parent=styles["Normal"], fontSize=8, leading=10, textColor=GREY_600,
        )
        self.badge_style = ParagraphStyle(
            "Badge", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=7,
            leading=8, textColor=colors.white, alignment=TA_CENTER,
        )

    def render(self, report: AggregatedReport, generated_at: datetime | None = None) -> bytes:
        """Render a report to PDF.

        Args:
            report: Aggregated committee report
            generated_at: Timestamp printed in the footer

        Returns:
            PDF document bytes
        """
        generated_at = generated_at or datetime.now()
        buffer = BytesIO()

        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=self.margin,
            rightMargin=self.margin,
            topMargin=self.margin + HEADER_HEIGHT,
            bottomMargin=self.margin + FOOTER_HEIGHT,
            title=f"{report.committee.name} Payment Report",
        )
        available_width = A4[0] - 2 * self.margin

        elements = []
        elements.append(self._summary_panel(report, available_width))
        elements.append(Spacer(1, 24))
        elements.append(Paragraph("Member Details", self.section_style))
        elements.append(self._member_table(report, available_width))
        elements.append(Spacer(1, 24))
        elements.append(Paragraph("Payout Schedule", self.section_style))
        if report.members:
            elements.append(self._payout_cards(report, available_width))

        def decorate(pdf_canvas, _doc):
            self._draw_header(pdf_canvas, report)
            self._draw_footer(pdf_canvas, generated_at)

        doc.build(
            elements,
            onFirstPage=decorate,
            onLaterPages=decorate,
            canvasmaker=lambda *args, **kwargs: NumberedCanvas(*args, margin=self.margin, **kwargs),
        )

        content = buffer.getvalue()
        logger.info(f"Rendered PDF report for {report.committee.name}: {len(content)} bytes")
        return content

    # ------------------------------------------------------------------
    # Page decorations
    # ------------------------------------------------------------------

    def _draw_header(self, pdf_canvas, report: AggregatedReport) -> None:
        width, height = A4
        top = height - self.margin
        committee = report.committee

        pdf_canvas.saveState()
        pdf_canvas.setFillColor(self.primary)
        pdf_canvas.setFont("Helvetica-Bold", 24)
        pdf_canvas.drawString(self.margin, top - 22, committee.name)
        pdf_canvas.setFillColor(GREY_600)
        pdf_canvas.setFont("Helvetica", 12)
        pdf_canvas.drawString(self.margin, top - 40, "Payment Report")

        badge_width = max(pdf_canvas.stringWidth(committee.code, "Helvetica-Bold", 18) + 32, 64)
        badge_height = 44
        badge_x = width - self.margin - badge_width
        badge_y = top - badge_height
        pdf_canvas.setFillColor(self.accent)
        pdf_canvas.roundRect(badge_x, badge_y, badge_width, badge_height, 8, stroke=0, fill=1)
        pdf_canvas.setFillColor(colors.white)
        pdf_canvas.setFont("Helvetica", 9)
        pdf_canvas.drawCentredString(badge_x + badge_width / 2, badge_y + 30, "Code")
        pdf_canvas.setFont("Helvetica-Bold", 18)
        pdf_canvas.drawCentredString(badge_x + badge_width / 2, badge_y + 10, committee.code)
        pdf_canvas.restoreState()

    def _draw_footer(self, pdf_canvas, generated_at: datetime) -> None:
        width, _ = A4
        line_y = self.margin + 20
        timestamp = generated_at.strftime(self.formats.get("footer_timestamp", "%d %b %Y, %I:%M %p"))

        pdf_canvas.saveState()
        pdf_canvas.setStrokeColor(GREY_300)
        pdf_canvas.line(self.margin, line_y, width - self.margin, line_y)
        pdf_canvas.setFillColor(GREY_600)
        pdf_canvas.setFont("Helvetica", 9)
        pdf_canvas.drawString(self.margin, self.margin + 6, f"Generated: {timestamp}")
        pdf_canvas.restoreState()

    # ------------------------------------------------------------------
    # Body sections
    # ------------------------------------------------------------------

    def _stat_box(self, label: str, value: str, highlight: bool = False) -> list:
        style = self.highlight_value_style if highlight else self.value_style
        return [Paragraph(label, self.label_style), Spacer(1, 2), Paragraph(value, style)]

    def _summary_panel(self, report: AggregatedReport, width: float) -> Table:
        committee = report.committee
        totals = report.totals
        label = report.currency_label

        rows = [
            [Paragraph("Summary", self.section_style), "", "", ""],
            [
                self._stat_box("Contribution", format_amount(committee.contribution_amount, label)),
                self._stat_box("Frequency", committee.frequency.upper()),
                self._stat_box("Members", str(totals.member_count)),
                self._stat_box("Collection Rate", format_percent(totals.collection_rate)),
            ],
            [
                self._stat_box("Total Collected", format_amount(totals.total_collected, label), highlight=True),
                self._stat_box(
                    "Payouts Completed",
                    format_fraction(totals.payouts_completed, totals.member_count),
                    highlight=True,
                ),
                self._stat_box("Period", f"{totals.cycle_count} cycles"),
                self._stat_box("Pending", format_amount(totals.total_pending, label)),
            ],
        ]

        table = Table(rows, colWidths=[width / 4] * 4)
        table.setStyle(TableStyle([
            ("SPAN", (0, 0), (-1, 0)),
            ("BACKGROUND", (0, 0), (-1, -1), self.light_bg),
            ("BOX", (0, 0), (-1, -1), 1, GREY_300),
            ("LINEBELOW", (0, 1), (-1, 1), 0.5, GREY_300),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LEFTPADDING", (0, 0), (-1, -1), 12),
            ("TOPPADDING", (0, 0), (-1, -1), 10),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 10),
        ]))
        return table

    def _member_row(self, record: MemberAggregate, label: str) -> list:
        member = record.member
        return [
            str(member.payout_order),
            Paragraph(escape(member.name), self.bold_cell_style),
            Paragraph(escape(member.phone), self.cell_style),
            format_fraction(record.paid_count, record.expected_count),
            format_percent(record.percentage),
            format_amount(record.total_paid, label),
            payout_label(member.has_received_payout),
        ]

    def _member_table(self, report: AggregatedReport, width: float) -> Table:
        totals = report.totals
        label = report.currency_label

        rows = [["#", "Member Name", "Phone", "Payments", "%", "Total Paid", "Payout"]]
        rows.extend(self._member_row(record, label) for record in report.members)
        rows.append([
            "",
            "TOTAL",
            "",
            format_fraction(totals.total_paid, totals.total_expected),
            format_percent(totals.collection_rate),
            format_amount(totals.total_collected, label),
            f"{totals.payouts_completed} done",
        ])

        weight_sum = sum(COLUMN_WEIGHTS)
        col_widths = [width * w / weight_sum for w in COLUMN_WEIGHTS]

        style = [
            ("GRID", (0, 0), (-1, -1), 0.5, GREY_400),
            ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("ALIGN", (0, 0), (-1, 0), "CENTER"),
            ("ALIGN", (0, 1), (0, -1), "CENTER"),
            ("ALIGN", (3, 1), (4, -1), "CENTER"),
            ("ALIGN", (6, 1), (6, -1), "CENTER"),
            ("BACKGROUND", (0, 0), (-1, 0), self.primary),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("BACKGROUND", (0, -1), (-1, -1), self.accent),
            ("TEXTCOLOR", (0, -1), (-1, -1), colors.white),
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ("ALIGN", (0, -1), (-1, -1), "CENTER"),
            ("TOPPADDING", (0, 0), (-1, -1), 8),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
        ]

        for row_num, record in enumerate(report.members, 1):
            if row_num % 2 == 0:
                style.append(("BACKGROUND", (0, row_num), (-1, row_num), self.light_bg))

            if record.highlight == HIGHLIGHT_GOOD:
                style.append(("BACKGROUND", (4, row_num), (4, row_num), self.light_green))
            elif record.highlight == HIGHLIGHT_POOR:
                style.append(("BACKGROUND", (4, row_num), (4, row_num), self.light_red))

            if record.member.has_received_payout:
                style.append(("BACKGROUND", (6, row_num), (6, row_num), self.light_green))
                style.append(("FONTNAME", (6, row_num), (6, row_num), "Helvetica-Bold"))

        table = Table(rows, colWidths=col_widths, repeatRows=1)
        table.setStyle(TableStyle(style))
        return table

    def _payout_card(self, record: MemberAggregate, width: float) -> Table:
        member = record.member
        is_done = member.has_received_payout

        badge = Table(
            [[Paragraph("DONE" if is_done else "PENDING", self.badge_style)]],
            colWidths=[48],
        )
        badge.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), GREEN if is_done else GREY_400),
            ("TOPPADDING", (0, 0), (-1, -1), 2),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
        ]))

        rows = [
            [Paragraph(f"#{member.payout_order}", self.card_order_style), badge],
            [Paragraph(escape(member.name), self.card_title_style), ""],
        ]
        if member.payout_date is not None:
            received = format_date(member.payout_date, self.formats.get("card_date", "%d/%m/%y"))
            rows.append([Paragraph(f"Received: {received}", self.card_note_style), ""])

        style = [
            ("SPAN", (0, 1), (-1, 1)),
            ("BACKGROUND", (0, 0), (-1, -1), self.light_green if is_done else colors.white),
            ("BOX", (0, 0), (-1, -1), 1, GREEN_400 if is_done else GREY_300),
            ("ALIGN", (1, 0), (1, 0), "RIGHT"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TOPPADDING", (0, 0), (-1, -1), 3),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ]
        if len(rows) > 2:
            style.append(("SPAN", (0, 2), (-1, 2)))

        card = Table(rows, colWidths=[width - 64, 64])
        card.setStyle(TableStyle(style))
        return card

    def _payout_cards(self, report: AggregatedReport, width: float) -> Table:
        cell_width = width / CARDS_PER_ROW
        card_width = cell_width - 8

        cards = [self._payout_card(record, card_width) for record in report.members]
        rows = [
            cards[i:i + CARDS_PER_ROW] for i in range(0, len(cards), CARDS_PER_ROW)
        ]
        rows[-1] = rows[-1] + [""] * (CARDS_PER_ROW - len(rows[-1]))

        grid = Table(rows, colWidths=[cell_width] * CARDS_PER_ROW)
        grid.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("RIGHTPADDING", (0, 0), (-1, -1), 8),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
        ]))
        return grid
