"""XLSX exports for review."""

from .exporter import export_conflicts_xlsx, export_variants_xlsx
from .templates import (
    ColumnSpec,
    ConflictTemplate,
    ExportTemplate,
    TemplateRegistry,
    TemplateType,
    VariantTemplate,
)

__all__ = [
    "ColumnSpec",
    "ConflictTemplate",
    "ExportTemplate",
    "TemplateRegistry",
    "TemplateType",
    "VariantTemplate",
    "export_conflicts_xlsx",
    "export_variants_xlsx",
]
