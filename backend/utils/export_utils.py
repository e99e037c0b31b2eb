import csv
import enum
import io
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional

from fpdf import FPDF
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter

from utils.formatting import format_cell, format_currency


class ExportFormat(str, enum.Enum):
    CSV = "CSV"
    XLSX = "XLSX"
    PDF = "PDF"


class ExportType(str, enum.Enum):
    JOURNAL_ENTRIES = "JOURNAL_ENTRIES"
    LEDGER = "LEDGER"
    BALANCE_SHEET = "BALANCE_SHEET"
    PROFIT_AND_LOSS = "PROFIT_AND_LOSS"


MIME_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.PDF: "application/pdf",
}

FILE_EXTENSIONS = {
    ExportFormat.CSV: "csv",
    ExportFormat.XLSX: "xlsx",
    ExportFormat.PDF: "pdf",
}


@dataclass
class ExportTable:
    title: str
    headers: List[str]
    rows: List[List[Any]] = field(default_factory=list)
    subtitle: Optional[str] = None


def _coerce_format(export_format) -> ExportFormat:
    try:
        return ExportFormat(export_format)
    except ValueError:
        raise ValueError(f"Unsupported export format: {export_format}")


def get_mime_type_from_format(export_format) -> str:
    return MIME_TYPES[_coerce_format(export_format)]


def get_file_extension(export_format) -> str:
    return FILE_EXTENSIONS[_coerce_format(export_format)]


def write_csv(table: ExportTable) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(table.headers)
    for row in table.rows:
        writer.writerow([format_cell(value) for value in row])
    return buffer.getvalue().encode("utf-8")


def write_xlsx(table: ExportTable) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = table.title[:31]

    ws.append([table.title])
    ws.cell(row=1, column=1).font = Font(bold=True, size=14)
    if table.subtitle:
        ws.append([table.subtitle])
    ws.append([])

    ws.append(table.headers)
    header_row = ws.max_row
    header_fill = PatternFill(start_color="D9D9D9", end_color="D9D9D9", fill_type="solid")
    for col_idx in range(1, len(table.headers) + 1):
        cell = ws.cell(row=header_row, column=col_idx)
        cell.font = Font(bold=True)
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")

    for row in table.rows:
        ws.append([value.value if isinstance(value, enum.Enum) else value for value in row])

    # Size columns to their widest value
    for col_idx, header in enumerate(table.headers, start=1):
        width = max([len(format_cell(row[col_idx - 1])) for row in table.rows if len(row) >= col_idx] + [len(header)])
        ws.column_dimensions[get_column_letter(col_idx)].width = min(width + 2, 60)

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


class ReportPDF(FPDF):
    def __init__(self, title: str, subtitle: Optional[str] = None):
        super().__init__(orientation="L")
        self.report_title = title
        self.report_subtitle = subtitle

    def header(self):
        self.set_font("Helvetica", "B", 12)
        self.cell(0, 8, _latin1(self.report_title), align="C", new_x="LMARGIN", new_y="NEXT")
        if self.report_subtitle:
            self.set_font("Helvetica", "", 9)
            self.cell(0, 6, _latin1(self.report_subtitle), align="C", new_x="LMARGIN", new_y="NEXT")
        self.ln(4)

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.cell(0, 10, f"Page {self.page_no()}", align="C")


def _latin1(text: str) -> str:
    # Core PDF fonts only cover latin-1
    return text.encode("latin-1", "replace").decode("latin-1")


def write_pdf(table: ExportTable) -> bytes:
    pdf = ReportPDF(table.title, table.subtitle)
    pdf.add_page()

    col_width = pdf.epw / max(len(table.headers), 1)

    pdf.set_font("Helvetica", "B", 9)
    for header in table.headers:
        pdf.cell(col_width, 7, _latin1(header), border=1, align="C")
    pdf.ln()

    pdf.set_font("Helvetica", "", 8)
    for row in table.rows:
        for value in row:
            text = _latin1(format_currency(value) if isinstance(value, Decimal) else format_cell(value))
            # Keep long descriptions inside their cell
            while text and pdf.get_string_width(text) > col_width - 2:
                text = text[:-1]
            pdf.cell(col_width, 6, text, border=1)
        pdf.ln()

    return bytes(pdf.output())


def write_export(table: ExportTable, export_format) -> bytes:
    export_format = _coerce_format(export_format)
    if export_format == ExportFormat.CSV:
        return write_csv(table)
    if export_format == ExportFormat.XLSX:
        return write_xlsx(table)
    return write_pdf(table)
