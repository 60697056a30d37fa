# -*- coding: utf-8 -*-
"""Load exported catalog and purchase-order tables.

The hosted database is exported to CSV; these tables feed the code
allocator (codes in use) and the conflict reconciler (stored field values).
Codes are always read as text so leading zeros survive.
"""

import logging
import re
from pathlib import Path
from typing import Optional

import pandas as pd

from .validation import validate_dataframe

logger = logging.getLogger(__name__)

TEXT_COLUMNS = {
    "product_code": str,
    "base_product_code": str,
    "barcode": str,
    "variant": str,
}


def load_table(csv_path: Path, schema_name: str) -> pd.DataFrame:
    """Read and validate one exported table.

    Args:
        csv_path: CSV file exported from the database.
        schema_name: "products" or "purchase_order_items".

    Returns:
        DataFrame with product codes upper-cased and stripped.

    Raises:
        FileNotFoundError: If csv_path does not exist.
        ValueError: If the table fails schema validation.
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Table not found: {csv_path}")

    df = pd.read_csv(csv_path, encoding="utf-8", dtype=TEXT_COLUMNS)
    logger.info(f"Loaded {csv_path.name} with {len(df)} rows")

    if not validate_dataframe(df, schema_name, csv_path.name):
        raise ValueError(f"{csv_path.name} does not match schema '{schema_name}'")

    df["product_code"] = df["product_code"].fillna("").str.strip().str.upper()
    return df


def load_products(csv_path: Path) -> pd.DataFrame:
    return load_table(csv_path, "products")


def load_purchase_order_items(csv_path: Path) -> pd.DataFrame:
    return load_table(csv_path, "purchase_order_items")


def load_optional(csv_path: Optional[Path], schema_name: str) -> pd.DataFrame:
    """load_table() that returns an empty table when no path is given."""
    if csv_path is None:
        return pd.DataFrame(columns=["product_code", "product_name"])
    return load_table(csv_path, schema_name)


def rows_for_base_code(
    products: pd.DataFrame,
    base_code: str,
    code_separator: str = "-",
    size_number_letter: str = "A",
) -> pd.DataFrame:
    """Catalog rows belonging to one base product (parent and variants).

    Args:
        products: Catalog rows.
        base_code: Base product code.
        code_separator: Separator between base code and value codes.
        size_number_letter: Letter before the size of size-number-only codes.
    """
    base_code = base_code.strip().upper()
    if products.empty:
        return products

    if "base_product_code" in products.columns:
        by_base = products["base_product_code"].fillna("").str.strip().str.upper() == base_code
    else:
        by_base = pd.Series(False, index=products.index)

    # Exact code, "BASE-..." variants, or "BASEA38" size-number variants.
    # Without a separator the next character must not be a digit (N152 vs N1520).
    separator = re.escape(code_separator) if code_separator else r"(?=\D)"
    letter = re.escape(size_number_letter.upper())
    pattern = rf"^{re.escape(base_code)}(?:$|{separator}|{letter}\d+$)"
    by_prefix = products["product_code"].str.match(pattern)
    return products[by_base | by_prefix].copy()
