# -*- coding: utf-8 -*-
"""Typed records exchanged by the variant generator.

Rows coming from the database or a purchase-order form are plain dicts;
they are converted here once, at the boundary.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from src.catalog.attributes import AttributeValue


def _clean_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    return str(value).strip()


@dataclass
class AttributeLine:
    """A user's selection of values for one attribute."""

    attribute_id: int
    attribute_name: str
    values: List[str] = field(default_factory=list)

    def __post_init__(self):
        # Ordered set of stripped text (sizes may arrive as ints), first wins
        seen = set()
        unique = []
        for raw in self.values:
            value = _clean_text(raw)
            if not value:
                continue
            key = value.casefold()
            if key not in seen:
                seen.add(key)
                unique.append(value)
        self.values = unique


@dataclass
class BaseProduct:
    """Parent product that variants are generated from."""

    code: str
    name: str
    list_price: float = 0

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "BaseProduct":
        """Build from a catalog or purchase-order row.

        Accepts `product_code`/`product_name`/`selling_price` columns.
        """
        price = row.get("selling_price", row.get("list_price", 0))
        if price is None or (isinstance(price, float) and pd.isna(price)):
            price = 0
        return cls(
            code=_clean_text(row.get("product_code", row.get("code"))).upper(),
            name=_clean_text(row.get("product_name", row.get("name"))),
            list_price=float(price),
        )


@dataclass
class GeneratedVariant:
    """One element of the cartesian expansion."""

    code: str
    name: str
    attribute_values: List[AttributeValue]
    source_lines: List[AttributeLine]
    list_price: float = 0
    base_code: Optional[str] = None

    @property
    def value_names(self) -> List[str]:
        return [value.name for value in self.attribute_values]

    @property
    def value_ids(self) -> List[int]:
        return [value.id for value in self.attribute_values]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_code": self.code,
            "product_name": self.name,
            "base_product_code": self.base_code,
            "variant": ", ".join(self.value_names),
            "list_price": self.list_price,
        }
