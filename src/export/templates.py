"""XLSX sheet layouts for variant and conflict exports.

Each template maps internal column names to the Vietnamese headers the
back-office staff work with, with data types and Excel number formats.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

import pandas as pd


class TemplateType(Enum):
    """Export sheet types."""

    VARIANTS = "VARIANTS"
    CONFLICTS = "CONFLICTS"


@dataclass
class ColumnSpec:
    """Specification for a single column in an export sheet."""

    name: str  # Vietnamese header (e.g., "Mã sản phẩm")
    source: str  # DataFrame column it is filled from
    data_type: str  # "text" or "number"
    format_code: str | None  # Excel format code (e.g., "#,##0")
    required: bool


class ExportTemplate:
    """Base class: column list plus validation."""

    COLUMNS: List[ColumnSpec] = []

    def validate_dataframe(self, df: pd.DataFrame) -> Tuple[bool, List[str]]:
        """Validate DataFrame against template.

        Args:
            df: DataFrame keyed by internal column names

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []

        for col_spec in self.COLUMNS:
            if col_spec.required and col_spec.source not in df.columns:
                errors.append(f"Missing required column: {col_spec.source}")

        for col_spec in self.COLUMNS:
            if col_spec.source not in df.columns or col_spec.data_type != "number":
                continue
            present = df[col_spec.source].dropna()
            converted = pd.to_numeric(present, errors="coerce")
            if converted.isna().any():
                errors.append(f"Column '{col_spec.source}' has invalid numeric data")

        return len(errors) == 0, errors

    def get_column_names(self) -> List[str]:
        """Get all header names in order."""
        return [col.name for col in self.COLUMNS]

    def to_sheet_frame(self, df: pd.DataFrame) -> pd.DataFrame:
        """Select and rename columns into sheet layout (missing ones blank)."""
        sheet = pd.DataFrame(index=df.index)
        for col_spec in self.COLUMNS:
            if col_spec.source in df.columns:
                sheet[col_spec.name] = df[col_spec.source]
            else:
                sheet[col_spec.name] = ""
        return sheet.reset_index(drop=True)


class VariantTemplate(ExportTemplate):
    """Generated product rows (parent + variants)."""

    COLUMNS = [
        ColumnSpec("Mã sản phẩm", "product_code", "text", None, required=True),
        ColumnSpec("Tên sản phẩm", "product_name", "text", None, required=True),
        ColumnSpec("Mã gốc", "base_product_code", "text", None, required=True),
        ColumnSpec("Biến thể", "variant", "text", None, required=False),
        ColumnSpec("Giá nhập", "purchase_price", "number", "#,##0", required=False),
        ColumnSpec("Giá bán", "selling_price", "number", "#,##0", required=False),
        ColumnSpec("Nhà cung cấp", "supplier_name", "text", None, required=False),
        ColumnSpec("Tồn kho", "stock_quantity", "number", "#,##0", required=False),
        ColumnSpec("Đơn vị", "unit", "text", None, required=False),
    ]


class ConflictTemplate(ExportTemplate):
    """One row per differing field, for review before update."""

    COLUMNS = [
        ColumnSpec("Mã sản phẩm", "product_code", "text", None, required=True),
        ColumnSpec("Biến thể", "variant", "text", None, required=False),
        ColumnSpec("Trường", "field", "text", None, required=True),
        ColumnSpec("Giá trị cũ", "old_value", "text", None, required=True),
        ColumnSpec("Giá trị mới", "new_value", "text", None, required=True),
    ]


class TemplateRegistry:
    """Registry for accessing all export templates."""

    _templates = {
        TemplateType.VARIANTS: VariantTemplate(),
        TemplateType.CONFLICTS: ConflictTemplate(),
    }

    @classmethod
    def get_template(cls, template_type: TemplateType) -> ExportTemplate:
        if template_type not in cls._templates:
            raise ValueError(f"Unknown template type: {template_type}")
        return cls._templates[template_type]
