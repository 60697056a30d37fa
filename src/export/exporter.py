"""Write generated variants and pending conflicts to XLSX.

Staff review both files before anything is written back to the catalog.
"""

import logging
from pathlib import Path
from typing import List

import pandas as pd

from src.reconcile.conflicts import Conflict, conflicts_to_frame
from src.utils.xlsx_formatting import XLSXFormatter

from .templates import ConflictTemplate, VariantTemplate

logger = logging.getLogger(__name__)


def export_variants_xlsx(products: pd.DataFrame, output_path: Path) -> Path:
    """Export product rows from variants_to_frame().

    Args:
        products: Generated product rows.
        output_path: Destination XLSX path.

    Returns:
        output_path

    Raises:
        ValueError: If required columns are missing.
    """
    template = VariantTemplate()
    is_valid, errors = template.validate_dataframe(products)
    if not is_valid:
        for error in errors:
            logger.error(error)
        raise ValueError(f"Variant rows failed validation: {errors}")

    sheet = template.to_sheet_frame(products)
    XLSXFormatter.write_xlsx(sheet, Path(output_path), template, sheet_name="Biến thể")

    logger.info(f"Exported {len(sheet)} product rows to {output_path}")
    return Path(output_path)


def export_conflicts_xlsx(conflicts: List[Conflict], output_path: Path) -> Path:
    """Export conflicts, one row per differing field."""
    template = ConflictTemplate()
    sheet = template.to_sheet_frame(conflicts_to_frame(conflicts))
    XLSXFormatter.write_xlsx(sheet, Path(output_path), template, sheet_name="Xung đột")

    logger.info(f"Exported {len(conflicts)} conflicts ({len(sheet)} fields) to {output_path}")
    return Path(output_path)
