"""Excel export of pivot results."""

import io
import logging

import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill

from report_builder.core.exceptions import ReportExportError
from .schemas import PivotResult

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def to_dataframe(result: PivotResult) -> pd.DataFrame:
    """Flatten a pivot result into a frame ordered rows, columns, values."""
    ordered = []
    for name in result.fields.rows + result.fields.columns + result.fields.values:
        if name not in ordered:
            ordered.append(name)

    df = pd.DataFrame(result.data)
    for name in ordered:
        if name not in df.columns:
            df[name] = None
    extra = [c for c in df.columns if c not in ordered]
    return df[ordered + extra]


def export_xlsx(result: PivotResult, sheet_name: str = "Report") -> bytes:
    """Render ``result`` as an XLSX workbook and return its bytes."""
    if not result.data:
        raise ReportExportError("No data provided for export")

    df = to_dataframe(result)
    if df.empty:
        raise ReportExportError("Data is empty")

    excel_buffer = io.BytesIO()
    with pd.ExcelWriter(excel_buffer, engine="openpyxl") as writer:
        sheet_name = sheet_name[:31]  # Excel sheet name limit is 31 chars
        df.to_excel(writer, sheet_name=sheet_name, index=False)

        worksheet = writer.sheets[sheet_name]
        _apply_header_formatting(worksheet, len(df.columns))
        _auto_adjust_columns(worksheet)

    logger.info(f"Exported {len(df)} rows to sheet '{sheet_name}'")
    return excel_buffer.getvalue()


def _apply_header_formatting(worksheet, column_count: int):
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
    header_alignment = Alignment(horizontal="center", vertical="center")

    for col_num in range(1, column_count + 1):
        cell = worksheet.cell(row=1, column=col_num)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = header_alignment


def _auto_adjust_columns(worksheet):
    """Auto-adjust column widths for better readability."""
    for column in worksheet.columns:
        column_letter = column[0].column_letter
        max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)

        # Set column width with some padding, max 50 characters
        worksheet.column_dimensions[column_letter].width = min(max_length + 2, 50)
