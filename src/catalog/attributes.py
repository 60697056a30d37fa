# -*- coding: utf-8 -*-
"""Attribute reference data for product variants.

The shop sells apparel in three attribute families:
- Size Chữ (letter sizes): S, M, L, XL, ...
- Màu (colors): Đen, Trắng, Đỏ, ...
- Size Số (numeric sizes): 26 ... 44

Each value carries a short code used when building variant codes
(Đen → DEN, Trắng → TRANG). The catalog order is also the priority order
used when a signature group has to be assigned to an attribute.

The catalog is loaded once at startup and never mutated afterwards.
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

SIZE_TEXT_ID = 1
COLOR_ID = 3
SIZE_NUMBER_ID = 4


@dataclass(frozen=True)
class AttributeValue:
    """One permissible value of an attribute."""

    id: int
    name: str  # Display name (e.g., "Đen")
    code: str  # Short code used in variant codes (e.g., "DEN")
    sequence: Optional[int] = None
    attribute_id: Optional[int] = None
    attribute_name: Optional[str] = None


@dataclass(frozen=True)
class Attribute:
    """A named attribute with its ordered list of values."""

    id: int
    name: str
    values: Tuple[AttributeValue, ...] = field(default_factory=tuple)

    def find_value(self, name: str) -> Optional[AttributeValue]:
        """Find a value by name, case-insensitively.

        Returns:
            Canonical AttributeValue, or None if the attribute has no such value.
        """
        if not name or not isinstance(name, str):
            return None

        wanted = name.strip().casefold()
        for value in self.values:
            if value.name.casefold() == wanted:
                return value
        return None

    def value_names(self) -> List[str]:
        return [value.name for value in self.values]


def _values(
    attribute_id: int,
    attribute_name: str,
    rows: Iterable[Tuple[int, str, str]],
) -> Tuple[AttributeValue, ...]:
    return tuple(
        AttributeValue(
            id=value_id,
            name=name,
            code=code,
            sequence=index,
            attribute_id=attribute_id,
            attribute_name=attribute_name,
        )
        for index, (value_id, name, code) in enumerate(rows, start=1)
    )


DEFAULT_ATTRIBUTES = (
    Attribute(
        id=SIZE_TEXT_ID,
        name="Size Chữ",
        values=_values(
            SIZE_TEXT_ID,
            "Size Chữ",
            [
                (1, "Free Size", "FS"),
                (2, "XS", "XS"),
                (3, "S", "S"),
                (4, "M", "M"),
                (5, "L", "L"),
                (6, "XL", "XL"),
                (7, "XXL", "XXL"),
                (8, "XXXL", "XXXL"),
            ],
        ),
    ),
    Attribute(
        id=COLOR_ID,
        name="Màu",
        values=_values(
            COLOR_ID,
            "Màu",
            [
                (101, "Đen", "DEN"),
                (102, "Trắng", "TRANG"),
                (103, "Đỏ", "DO"),
                (104, "Xanh", "XANH"),
                (105, "Xanh Dương", "XDUONG"),
                (106, "Xanh Lá", "XLA"),
                (107, "Vàng", "VANG"),
                (108, "Hồng", "HONG"),
                (109, "Tím", "TIM"),
                (110, "Nâu", "NAU"),
                (111, "Xám", "XAM"),
                (112, "Kem", "KEM"),
                (113, "Be", "BE"),
                (114, "Cam", "CAM"),
            ],
        ),
    ),
    Attribute(
        id=SIZE_NUMBER_ID,
        name="Size Số",
        values=_values(
            SIZE_NUMBER_ID,
            "Size Số",
            [(200 + size, str(size), str(size)) for size in range(26, 45)],
        ),
    ),
)


class AttributeCatalog:
    """Ordered, read-only collection of attributes.

    Usage:
        catalog = load_default_catalog()
        color = catalog.find_attribute("Màu")
        den = catalog.find_value(COLOR_ID, "đen")  # -> AttributeValue(name="Đen")
    """

    def __init__(self, attributes: Iterable[Attribute]):
        self._attributes: Tuple[Attribute, ...] = tuple(attributes)
        self._by_id: Dict[int, Attribute] = {}
        for attribute in self._attributes:
            if attribute.id in self._by_id:
                raise ValueError(f"Duplicate attribute id: {attribute.id}")
            self._by_id[attribute.id] = attribute

    @property
    def attributes(self) -> Tuple[Attribute, ...]:
        return self._attributes

    def __iter__(self):
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def get_attribute(self, attribute_id: int) -> Attribute:
        """Get attribute by id.

        Raises:
            KeyError: If the catalog has no attribute with this id.
        """
        try:
            return self._by_id[attribute_id]
        except KeyError:
            raise KeyError(f"Unknown attribute id: {attribute_id}") from None

    def find_attribute(self, name: str) -> Optional[Attribute]:
        """Find attribute by name (case-insensitive)."""
        if not name:
            return None
        wanted = name.strip().casefold()
        for attribute in self._attributes:
            if attribute.name.casefold() == wanted:
                return attribute
        return None

    def find_value(self, attribute_id: int, name: str) -> Optional[AttributeValue]:
        """Find a value of one attribute (case-insensitive)."""
        attribute = self._by_id.get(attribute_id)
        if attribute is None:
            return None
        return attribute.find_value(name)

    def classify_value(self, name: str) -> Optional[int]:
        """Return the id of the first attribute (priority order) owning a value."""
        for attribute in self._attributes:
            if attribute.find_value(name) is not None:
                return attribute.id
        return None

    @classmethod
    def from_config(cls, attributes_config: List[Dict]) -> "AttributeCatalog":
        """Build a catalog from `[[attributes]]` tables.

        Each table has `id`, `name` and a `values` list of
        `{id, name, code}` tables. Table order is priority order.
        """
        attributes = []
        for attr_cfg in attributes_config:
            attribute_id = int(attr_cfg["id"])
            attribute_name = attr_cfg["name"]
            rows = [
                (int(v["id"]), str(v["name"]), str(v.get("code") or v["name"]))
                for v in attr_cfg.get("values", [])
            ]
            attributes.append(
                Attribute(
                    id=attribute_id,
                    name=attribute_name,
                    values=_values(attribute_id, attribute_name, rows),
                )
            )
        logger.debug(f"Built attribute catalog with {len(attributes)} attributes")
        return cls(attributes)

    @classmethod
    def from_toml(cls, config_path: Path) -> "AttributeCatalog":
        """Load a catalog from the `[[attributes]]` section of a TOML file.

        Raises:
            FileNotFoundError: If config file not found.
            ValueError: If the file defines no attributes.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Catalog config not found: {config_path}")

        with open(config_path, "rb") as f:
            config = tomllib.load(f)

        attributes_config = config.get("attributes", [])
        if not attributes_config:
            raise ValueError(f"No [[attributes]] defined in {config_path}")

        return cls.from_config(attributes_config)


def load_default_catalog() -> AttributeCatalog:
    """Catalog built from the bundled attribute reference data."""
    return AttributeCatalog(DEFAULT_ATTRIBUTES)
