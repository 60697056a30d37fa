# -*- coding: utf-8 -*-
"""Shared XLSX formatting utilities for export sheets."""

import logging
from pathlib import Path

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill

from . import ensure_dir

logger = logging.getLogger(__name__)

# Common styles used across all exports
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)
DEFAULT_COLUMN_WIDTH = 20


class XLSXFormatter:
    """Shared XLSX formatting utilities for export sheets."""

    @staticmethod
    def format_header(
        worksheet,
        template: "ExportTemplate",
        column_width: int = DEFAULT_COLUMN_WIDTH,
    ) -> None:
        """Apply header styling and set column widths.

        Args:
            worksheet: openpyxl Worksheet to format
            template: ExportTemplate with COLUMNS definitions
            column_width: Default column width
        """
        for col_idx, col_spec in enumerate(template.COLUMNS, start=1):
            cell = worksheet.cell(row=1, column=col_idx)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.alignment = Alignment(horizontal="center", vertical="center")

            letter = cell.column_letter
            worksheet.column_dimensions[letter].width = column_width

    @staticmethod
    def apply_column_formats(
        worksheet,
        template: "ExportTemplate",
        start_row: int = 2,
    ) -> None:
        """Apply number formats to data columns.

        Args:
            worksheet: openpyxl Worksheet to format
            template: ExportTemplate with COLUMNS definitions
            start_row: First row of data (after header)
        """
        max_row = worksheet.max_row
        if max_row < start_row:
            return

        for col_idx, col_spec in enumerate(template.COLUMNS, start=1):
            if col_spec.format_code:
                for row in range(start_row, max_row + 1):
                    cell = worksheet.cell(row=row, column=col_idx)
                    cell.number_format = col_spec.format_code
                    if col_spec.data_type == "number":
                        cell.alignment = Alignment(horizontal="right")

    @staticmethod
    def write_xlsx(
        df: pd.DataFrame,
        output_path: Path,
        template: "ExportTemplate",
        sheet_name: str = "Sheet1",
        column_width: int = DEFAULT_COLUMN_WIDTH,
    ) -> None:
        """Write a sheet-layout DataFrame to XLSX with standard formatting.

        Args:
            df: DataFrame whose columns are the template's header names
            output_path: Path to output XLSX file
            template: ExportTemplate with COLUMNS definitions
            sheet_name: Name for the worksheet
            column_width: Default column width
        """
        ensure_dir(output_path.parent)

        workbook = Workbook()
        worksheet = workbook.active
        worksheet.title = sheet_name

        for col_idx, col_spec in enumerate(template.COLUMNS, start=1):
            worksheet.cell(row=1, column=col_idx, value=col_spec.name)

        for row_idx, (_, row) in enumerate(df.iterrows(), start=2):
            for col_idx, col_spec in enumerate(template.COLUMNS, start=1):
                value = format_value(row[col_spec.name], col_spec.data_type)
                worksheet.cell(row=row_idx, column=col_idx, value=value)

        XLSXFormatter.format_header(worksheet, template, column_width)
        XLSXFormatter.apply_column_formats(worksheet, template)

        workbook.save(output_path)
        logger.info(f"Wrote XLSX: {output_path}")


def format_value(value, data_type: str):
    """Convert a cell value for openpyxl.

    Numbers stay numeric so Excel formats apply; blanks become "".
    """
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    if isinstance(value, str) and not value.strip():
        return ""

    if data_type == "number":
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, (int, float)):
            return value
        converted = pd.to_numeric(str(value).strip(), errors="coerce")
        if pd.isna(converted):
            return str(value)
        return converted.item() if hasattr(converted, "item") else converted

    return str(value)
