"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           shopflux/exporter.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    Export adapter for report results. Serializes rows to CSV,
                paginated PDF and Excel workbooks using the report's field
                catalog for headers and type-aware formatting.
------------------------------------------------------------------------------
"""

import csv
import io
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

import pandas as pd

from shopflux.config import get_settings
from shopflux.exporters.pdf_report import PdfReportGenerator
from shopflux.logger import get_logger
from shopflux.models.reporting import ReportConfig, ReportField
from shopflux.models.types import ExportFormat, FieldType
from shopflux.utils.conversion import parse_timestamp, to_number
from shopflux.utils.formatting import format_currency, format_date, generate_download_filename

logger = get_logger("exporter")

Row = Mapping[str, Any]


class ReportExporter:
    """
    Serializes report rows. Nothing is recomputed here: the rows are written
    exactly as produced by the engine, only formatted per field type.
    """

    def __init__(self, currency_symbol: Optional[str] = None, locale: Optional[str] = None):
        settings = get_settings()
        self.currency_symbol = currency_symbol if currency_symbol is not None else settings.currency_symbol
        self.locale = locale or settings.locale
        self._writers: Dict[ExportFormat, Callable[[ReportConfig, Sequence[Row]], Union[str, bytes]]] = {
            ExportFormat.CSV: self.to_csv,
            ExportFormat.PDF: self.to_pdf,
            ExportFormat.XLSX: self.to_xlsx,
        }

    def format_cell(self, field: ReportField, val: Any) -> str:
        """Display string of one value according to its declared field type."""
        if val is None:
            return ""
        if field.type == FieldType.CURRENCY:
            return format_currency(to_number(val), self.currency_symbol, self.locale)
        if field.type == FieldType.DATE:
            return format_date(val, self.locale)
        return str(val)

    def _table(self, config: ReportConfig, rows: Sequence[Row]) -> List[List[str]]:
        return [[self.format_cell(f, row.get(f.id)) for f in config.fields] for row in rows]

    def to_csv(self, config: ReportConfig, rows: Sequence[Row]) -> str:
        """Header row of labels plus one fully quoted line per row."""
        sio = io.StringIO()
        writer = csv.writer(sio, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow([f.label for f in config.fields])
        writer.writerows(self._table(config, rows))
        return sio.getvalue()

    def to_pdf(self, config: ReportConfig, rows: Sequence[Row], now: Optional[datetime] = None) -> bytes:
        gen = PdfReportGenerator(locale=self.locale)
        return gen.generate(
            config.title,
            [f.label for f in config.fields],
            self._table(config, rows),
            description=config.description,
            now=now,
        )

    def to_xlsx(self, config: ReportConfig, rows: Sequence[Row]) -> bytes:
        """Excel workbook; numeric and currency cells stay numbers, dates become real dates."""
        data: List[Dict[str, Any]] = []
        for row in rows:
            out: Dict[str, Any] = {}
            for f in config.fields:
                val = row.get(f.id)
                if f.type in (FieldType.CURRENCY, FieldType.NUMBER):
                    out[f.label] = to_number(val)
                elif f.type == FieldType.DATE:
                    out[f.label] = parse_timestamp(val)
                else:
                    out[f.label] = "" if val is None else str(val)
            data.append(out)

        df = pd.DataFrame(data, columns=[f.label for f in config.fields])
        sheet_name = re.sub(r"[\[\]:*?/\\]", " ", config.title or "Report")[:31] or "Report"

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="xlsxwriter") as writer:
            df.to_excel(writer, index=False, sheet_name=sheet_name)

            workbook = writer.book
            worksheet = writer.sheets[sheet_name]
            money_fmt = workbook.add_format({"num_format": "#,##0.00"})
            date_fmt = workbook.add_format({"num_format": "dd mmm yyyy"})

            for i, f in enumerate(config.fields):
                if f.type == FieldType.CURRENCY:
                    worksheet.set_column(i, i, 15, money_fmt)
                elif f.type == FieldType.DATE:
                    worksheet.set_column(i, i, 15, date_fmt)
                else:
                    worksheet.set_column(i, i, 22)
        return buffer.getvalue()

    def export(self, config: ReportConfig, rows: Sequence[Row], fmt: Union[ExportFormat, str]) -> Union[str, bytes]:
        """Serializes rows in the requested format (CSV text, PDF or XLSX bytes)."""
        fmt = ExportFormat(fmt)
        if not rows:
            logger.info(f"Exporting empty result of '{config.id}' as {fmt.value}")
        return self._writers[fmt](config, rows)

    def save(
        self,
        config: ReportConfig,
        rows: Sequence[Row],
        fmt: Union[ExportFormat, str],
        directory: Union[str, Path, None] = None,
        now: Optional[datetime] = None,
    ) -> Path:
        """
        Writes the export to '<title>_<timestamp>.<ext>' inside directory.
        File system errors are logged and re-raised.
        """
        fmt = ExportFormat(fmt)
        content = self.export(config, rows, fmt)
        target_dir = Path(directory) if directory is not None else get_settings().get_export_dir()
        path = target_dir / generate_download_filename(config.title, fmt.value, now)

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            if isinstance(content, str):
                path.write_text(content, encoding="utf-8", newline="")
            else:
                path.write_bytes(content)
        except OSError as e:
            logger.error(f"Failed to write {fmt.value} export of '{config.id}' to {path}: {e}")
            raise

        logger.info(f"Exported '{config.id}' ({len(rows)} rows) to {path}")
        return path
