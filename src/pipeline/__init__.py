"""Data loading, validation and the command line entry point."""

from src.pipeline.data_loader import (
    load_optional,
    load_products,
    load_purchase_order_items,
    rows_for_base_code,
)
from src.pipeline.validation import EXPECTED_SCHEMAS, validate_dataframe, validate_schema

__all__ = [
    "EXPECTED_SCHEMAS",
    "load_optional",
    "load_products",
    "load_purchase_order_items",
    "rows_for_base_code",
    "validate_dataframe",
    "validate_schema",
]
