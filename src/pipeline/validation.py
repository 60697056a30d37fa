# -*- coding: utf-8 -*-
"""Schema validation for catalog and purchase-order CSV exports.

Checks exported tables against expected schemas (missing columns, non-numeric
prices, empty files) before they are used as code sources or conflict
baselines.

Usage:
    from src.pipeline.validation import validate_schema

    if not validate_schema(csv_path, "products"):
        logger.error(f"Schema validation failed: {csv_path}")
"""

import logging
from pathlib import Path
from typing import Dict

import pandas as pd

logger = logging.getLogger(__name__)


EXPECTED_SCHEMAS = {
    "products": {
        "required_columns": ["product_code", "product_name"],
        "optional_columns": [
            "base_product_code",
            "variant",
            "selling_price",
            "purchase_price",
            "barcode",
            "stock_quantity",
            "supplier_name",
            "unit",
        ],
        "numeric_columns": ["selling_price", "purchase_price", "stock_quantity"],
    },
    "purchase_order_items": {
        "required_columns": ["product_code", "product_name"],
        "optional_columns": ["purchase_order_id", "variant", "quantity", "purchase_price"],
        "numeric_columns": ["quantity", "purchase_price"],
    },
}


def _check_required_columns(df: pd.DataFrame, source_name: str, schema: Dict) -> bool:
    """Check that all required columns exist in DataFrame.

    Args:
        df: DataFrame to validate.
        source_name: File or table name (for error logging).
        schema: Schema definition with 'required_columns' key.

    Returns:
        True if all required columns present, False otherwise.
    """
    required = schema.get("required_columns", [])
    missing = [col for col in required if col not in df.columns]

    if missing:
        logger.error(f"{source_name} missing required columns: {missing}")
        return False

    return True


def _check_numeric_columns(df: pd.DataFrame, source_name: str, schema: Dict) -> bool:
    """Check that numeric columns hold numbers where they hold anything.

    Blank cells are allowed; text that is not a number is not.

    Returns:
        True if all numeric columns valid, False otherwise.
    """
    for col in schema.get("numeric_columns", []):
        if col not in df.columns:
            continue

        present = df[col].dropna()
        if present.empty:
            continue

        converted = pd.to_numeric(present, errors="coerce")
        bad = present[converted.isna()]
        if not bad.empty:
            logger.error(
                f"{source_name}: Column {col} has non-numeric values: "
                f"{bad.astype(str).head(3).tolist()}"
            )
            return False

    return True


def _check_dataframe_not_empty(df: pd.DataFrame, source_name: str) -> bool:
    if df.empty:
        logger.error(f"{source_name}: Empty table (no data rows)")
        return False

    return True


def validate_dataframe(df: pd.DataFrame, schema_name: str, source_name: str = "") -> bool:
    """Validate an already loaded table against a schema.

    Raises:
        ValueError: If schema_name is not a recognized schema.
    """
    if schema_name not in EXPECTED_SCHEMAS:
        raise ValueError(f"Unknown schema: {schema_name}")

    schema = EXPECTED_SCHEMAS[schema_name]
    source_name = source_name or schema_name

    if not _check_dataframe_not_empty(df, source_name):
        return False

    if not _check_required_columns(df, source_name, schema):
        return False

    if not _check_numeric_columns(df, source_name, schema):
        return False

    return True


def validate_schema(csv_path: Path, schema_name: str) -> bool:
    """Validate CSV file meets expected schema.

    Args:
        csv_path: Path to CSV file to validate.
        schema_name: "products" or "purchase_order_items".

    Returns:
        True if schema validation passes, False otherwise.

    Raises:
        ValueError: If schema_name is not a recognized schema.
    """
    if schema_name not in EXPECTED_SCHEMAS:
        raise ValueError(f"Unknown schema: {schema_name}")

    try:
        df = pd.read_csv(csv_path, encoding="utf-8", dtype={"product_code": str})
    except Exception as e:
        logger.error(f"{csv_path.name}: Failed to read CSV: {e}")
        return False

    return validate_dataframe(df, schema_name, csv_path.name)
