"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           shopflux/exporters/pdf_report.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    PDF report generation using ReportLab.
                Lays out a title block and a paginated table of report rows.
------------------------------------------------------------------------------
"""

import io
import xml.sax.saxutils as saxutils
from datetime import datetime
from typing import List, Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from shopflux.utils.formatting import format_date

BRANDING = "ShopFlux Reports"


class PdfReportGenerator:
    """Generates paginated PDF reports from pre-formatted table cells."""

    def __init__(self, locale: str = "en_IN"):
        self.styles = getSampleStyleSheet()
        self.locale = locale
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Initializes ShopFlux specific report styles."""
        self.styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=18,
            spaceAfter=0.3 * cm,
            alignment=TA_LEFT,
            textColor=colors.HexColor("#2c3e50")
        ))

        self.styles.add(ParagraphStyle(
            name='ReportSubTitle',
            parent=self.styles['Normal'],
            fontSize=10,
            spaceAfter=0.2 * cm,
            alignment=TA_LEFT,
            textColor=colors.HexColor("#7f8c8d")
        ))

    def generate(
        self,
        title: str,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        description: Optional[str] = None,
        now: Optional[datetime] = None,
        pagesize=A4,
    ) -> bytes:
        """
        Generates a PDF report.

        Args:
            title: The report title.
            headers: Column labels.
            rows: Table body, one list of display strings per row.
            description: Optional line printed below the generation date.
            now: Timestamp shown as generation date.
            pagesize: ReportLab pagesize (default A4).
        """
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=pagesize,
            rightMargin=1.5*cm,
            leftMargin=1.5*cm,
            topMargin=2*cm,
            bottomMargin=2*cm,
            title=title,
        )

        story = []

        # 1. Header
        story.append(Paragraph(saxutils.escape(title), self.styles['ReportTitle']))
        generated = format_date(now or datetime.now(), self.locale)
        story.append(Paragraph(saxutils.escape(f"Generated on: {generated}"), self.styles['ReportSubTitle']))
        if description:
            story.append(Paragraph(saxutils.escape(description), self.styles['ReportSubTitle']))
        story.append(Spacer(1, 0.4 * cm))

        # 2. Table
        if rows and headers:
            story.append(self._build_table(headers, rows, doc.width))
        else:
            story.append(Paragraph("No data", self.styles['Normal']))

        def add_page_number(canvas, doc):
            page_num = canvas.getPageNumber()
            width, height = doc.pagesize

            canvas.saveState()
            canvas.setFont('Helvetica', 8)
            canvas.setStrokeColor(colors.HexColor("#e2e8f0"))
            canvas.line(1.5*cm, 1.5*cm, width - 1.5*cm, 1.5*cm)
            canvas.drawCentredString(width/2.0, 1*cm, f"Page {page_num}")
            canvas.drawRightString(width - 1.5*cm, 1*cm, BRANDING)
            canvas.restoreState()

        doc.build(story, onFirstPage=add_page_number, onLaterPages=add_page_number)
        return buffer.getvalue()

    def _build_table(self, headers: Sequence[str], rows: Sequence[Sequence[str]], available_width: float) -> Table:
        table_data: List[List[str]] = [list(headers)]
        table_data.extend([list(r) for r in rows])

        col_widths = [available_width / len(headers)] * len(headers)
        t = Table(table_data, hAlign='LEFT', colWidths=col_widths, repeatRows=1)

        style = [
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor("#7c3aed")),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('ALIGN', (-1, 0), (-1, -1), 'RIGHT'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 8),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
            ('TOPPADDING', (0, 0), (-1, -1), 4),
            ('BACKGROUND', (0, 1), (-1, -1), colors.white),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor("#e2e8f0")),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]
        for i in range(2, len(table_data), 2):
            style.append(('BACKGROUND', (0, i), (-1, i), colors.HexColor("#f9fbff")))
        t.setStyle(TableStyle(style))
        return t
