"""Attribute catalog (static variant reference data)."""

from .attributes import (
    COLOR_ID,
    DEFAULT_ATTRIBUTES,
    SIZE_NUMBER_ID,
    SIZE_TEXT_ID,
    Attribute,
    AttributeCatalog,
    AttributeValue,
    load_default_catalog,
)

__all__ = [
    "Attribute",
    "AttributeCatalog",
    "AttributeValue",
    "COLOR_ID",
    "DEFAULT_ATTRIBUTES",
    "SIZE_NUMBER_ID",
    "SIZE_TEXT_ID",
    "load_default_catalog",
]
