# fondos/reporting/pdf_generator.py
import logging
import os
from datetime import date, datetime
from typing import Any, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from fondos.domain.enums import ReturnPeriod
from fondos.domain.results import ConsistencyMismatch, ReturnsReport, WindowResult
from .reporting_utils import format_cents, format_percent, format_report_date

logger = logging.getLogger(__name__)


class PerformanceReportGenerator:
    """Tabulates the return engine output, published returns and transfer diagnostics into a PDF."""

    def __init__(self,
                 window_results: List[WindowResult],
                 returns_report: ReturnsReport,
                 run_date: date,
                 consistency_mismatches: Optional[List[ConsistencyMismatch]] = None):
        self.window_results = window_results
        self.returns_report = returns_report
        self.run_date = run_date
        self.consistency_mismatches = consistency_mismatches or []

        self.styles = self._generate_styles()
        self.story: List[Any] = []

    def _generate_styles(self):
        styles = getSampleStyleSheet()
        styles.add(ParagraphStyle(name='H1', fontSize=16, leading=20, spaceAfter=10, alignment=TA_CENTER, fontName='Helvetica-Bold'))
        styles.add(ParagraphStyle(name='H2', fontSize=13, leading=17, spaceAfter=8, spaceBefore=12, fontName='Helvetica-Bold'))
        styles.add(ParagraphStyle(name='TableHeader', alignment=TA_CENTER, fontSize=8, fontName='Helvetica-Bold', textColor=colors.black))
        styles.add(ParagraphStyle(name='TableCell', alignment=TA_LEFT, fontSize=8, fontName='Helvetica', textColor=colors.black))
        styles.add(ParagraphStyle(name='TableCellRight', alignment=TA_RIGHT, fontSize=8, fontName='Helvetica', textColor=colors.black))
        return styles

    def _create_styled_table(self, header: List[str], rows: List[List[str]], numeric_from: int = 1,
                             col_widths: Optional[List[float]] = None) -> Table:
        data = [[Paragraph(escape(h), self.styles['TableHeader']) for h in header]]
        for row in rows:
            data.append([
                Paragraph(escape(cell), self.styles['TableCellRight' if j >= numeric_from else 'TableCell'])
                for j, cell in enumerate(row)
            ])
        tbl = Table(data, colWidths=col_widths, repeatRows=1)
        tbl.setStyle(TableStyle([
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('LEFTPADDING', (0, 0), (-1, -1), 3),
            ('RIGHTPADDING', (0, 0), (-1, -1), 3),
            ('TOPPADDING', (0, 0), (-1, -1), 2),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 2),
            ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
        ]))
        return tbl

    def _add_title(self):
        self.story.append(Paragraph(f"Fund performance as of {format_report_date(self.run_date)}", self.styles['H1']))
        self.story.append(Paragraph(f"Generated {datetime.now().strftime('%d/%m/%Y %H:%M')}", self.styles['BodyText']))
        self.story.append(Spacer(1, 0.5 * cm))

    def _add_window(self, result: WindowResult):
        self.story.append(Paragraph(f"Last {result.window_days} days", self.styles['H2']))
        if result.skipped:
            for diagnostic in result.diagnostics:
                self.story.append(Paragraph(f"Skipped: {diagnostic}", self.styles['BodyText']))
            return
        self.story.append(Paragraph(f"Window start: {format_report_date(result.start_date)}", self.styles['BodyText']))

        rows = []
        for fund_name in sorted(result.fund_series):
            fund_series = result.fund_series[fund_name]
            rows.append([
                fund_name,
                format_report_date(fund_series.initial_balance.date),
                format_cents(fund_series.initial_balance.balance),
                format_cents(fund_series.latest_variation),
            ])
        if result.consolidated is not None:
            c = result.consolidated
            rows.append(["Total", "", format_cents(c.invested_total),
                         f"{format_cents(c.profit)} ({format_percent(c.profit_percent)})"])
        if rows:
            self.story.append(self._create_styled_table(
                ["Fund", "Since", "Initial / invested", "Variation"], rows,
                col_widths=[8 * cm, 2.5 * cm, 3.5 * cm, 4 * cm],
            ))

        unit_rows = []
        for fund_name in sorted(result.unit_value_returns):
            points = result.unit_value_returns[fund_name]
            unit_rows.append([fund_name, format_report_date(points[0].date), format_report_date(points[-1].date),
                              format_percent(points[-1].percent, decimals=3)])
        if unit_rows:
            self.story.append(Spacer(1, 0.3 * cm))
            self.story.append(self._create_styled_table(
                ["Fund", "From", "To", "Unit value return"], unit_rows,
                col_widths=[8 * cm, 2.5 * cm, 2.5 * cm, 5 * cm],
            ))
        for diagnostic in result.diagnostics:
            self.story.append(Paragraph(f"Note: {diagnostic}", self.styles['BodyText']))

    def _add_published_returns(self):
        if not self.returns_report.by_fund:
            return
        self.story.append(PageBreak())
        self.story.append(Paragraph("Published fund returns", self.styles['H2']))
        header = ["Fund"] + [p.value.replace("roe_", "").replace("_", " ") for p in ReturnPeriod]
        rows = [
            [f.fund_name] + [format_percent(f.get(p), decimals=3) for p in ReturnPeriod]
            for f in self.returns_report.sorted_funds()
        ]
        self.story.append(self._create_styled_table(header, rows))

    def _add_consistency_mismatches(self):
        if not self.consistency_mismatches:
            return
        self.story.append(Paragraph("Movements without a transfer counterpart", self.styles['H2']))
        rows = [
            [m.fund_name, format_report_date(m.action_date), format_cents(m.change),
             m.closest_fund_name or "-"]
            for m in self.consistency_mismatches
        ]
        self.story.append(self._create_styled_table(["Fund", "Date", "Change", "Likely counterpart"], rows,
                                                    numeric_from=2))

    def generate_report(self, output_file_path: str):
        logger.info(f"Generating PDF report: {output_file_path}")
        directory = os.path.dirname(output_file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        doc = SimpleDocTemplate(output_file_path)
        self.story = []
        self._add_title()
        for result in self.window_results:
            self._add_window(result)
        self._add_consistency_mismatches()
        self._add_published_returns()
        doc.build(self.story)
        logger.info(f"PDF report written: {output_file_path}")
