# -*- coding: utf-8 -*-
"""Variant signature format: "(Đen | Trắng) (S | M | L)".

One parenthesized group per attribute line, in selection order; values
inside a group are separated by " | ". Signatures are stored as plain text
on product rows, so parse() must keep accepting every format ever written:

- current:  "(S | M) (Đen | Nâu)"
- single group without parentheses: "S | M | L"
- legacy comma list: "M, L, Đen, 28"

Known limitations:
- Value names containing "|" or parentheses are not escaped.
- A group is assigned to the first attribute (catalog order) matching any of
  its values, not to the attribute matching the most values.
"""

import logging
import re
from typing import List, Optional, Tuple

from src.catalog.attributes import AttributeCatalog

from .models import AttributeLine

logger = logging.getLogger(__name__)

GROUP_PATTERN = re.compile(r"\(([^)]*)\)")
VALUE_SEPARATOR = " | "


def format_signature(lines: List[AttributeLine]) -> str:
    """Serialize attribute lines to a signature string.

    Example:
        >>> format_signature([AttributeLine(3, "Màu", ["Đen", "Trắng"]),
        ...                   AttributeLine(1, "Size Chữ", ["M", "L"])])
        '(Đen | Trắng) (M | L)'
    """
    groups = []
    for line in lines:
        if not line.values:
            continue
        groups.append("(" + VALUE_SEPARATOR.join(line.values) + ")")
    return " ".join(groups)


def _split_group(group: str) -> List[str]:
    return [token.strip() for token in group.split("|") if token.strip()]


def _extract_groups(signature: str) -> List[str]:
    groups = GROUP_PATTERN.findall(signature)
    if groups:
        return groups
    if "|" in signature:
        return [signature]
    return []


def _claim_group(tokens: List[str], catalog: AttributeCatalog) -> Optional[AttributeLine]:
    for attribute in catalog:
        matched = []
        for token in tokens:
            value = attribute.find_value(token)
            if value is not None and value.name not in matched:
                matched.append(value.name)
        if matched:
            return AttributeLine(attribute.id, attribute.name, matched)
    return None


def _parse_legacy(signature: str, catalog: AttributeCatalog) -> List[AttributeLine]:
    by_attribute = {attribute.id: [] for attribute in catalog}

    for token in signature.split(","):
        token = token.strip()
        if not token:
            continue
        attribute_id = catalog.classify_value(token)
        if attribute_id is None:
            logger.debug(f"Legacy variant token not in catalog: '{token}'")
            continue
        name = catalog.find_value(attribute_id, token).name
        if name not in by_attribute[attribute_id]:
            by_attribute[attribute_id].append(name)

    return [
        AttributeLine(attribute.id, attribute.name, by_attribute[attribute.id])
        for attribute in catalog
        if by_attribute[attribute.id]
    ]


def parse_signature(signature: str, catalog: AttributeCatalog) -> List[AttributeLine]:
    """Parse a stored signature back into attribute lines.

    Groups whose values match no attribute are dropped; the rest of the
    signature is still returned.

    Args:
        signature: Stored signature text.
        catalog: Catalog providing attributes in priority order.

    Returns:
        Attribute lines in group order, values in canonical catalog spelling.
    """
    if not signature or not isinstance(signature, str) or not signature.strip():
        return []

    trimmed = signature.strip()
    groups = _extract_groups(trimmed)

    if not groups:
        return _parse_legacy(trimmed, catalog)

    lines = []
    for group in groups:
        tokens = _split_group(group)
        if not tokens:
            continue
        line = _claim_group(tokens, catalog)
        if line is None:
            logger.warning(f"Dropping unrecognized signature group: ({group})")
            continue
        lines.append(line)

    return lines


def format_variant_for_display(variant: Optional[str]) -> str:
    """Flatten a stored variant text for list views.

    "(Đen | Trắng) (M)" → "Đen | Trắng M"
    "M, L, Đen"         → "M L Đen"
    """
    if not variant or not variant.strip():
        return ""

    trimmed = variant.strip()

    if "(" in trimmed and ")" in trimmed:
        return re.sub(r"\s+", " ", re.sub(r"[()]", "", trimmed)).strip()

    values = [v.strip() for v in trimmed.split(",") if v.strip()]
    return " ".join(values)


def parse_variant_field(variant: Optional[str]) -> Tuple[str, str]:
    """Split a live-product variant field "name - code".

    Examples:
        "Size M - N152"   → ("Size M", "N152")
        "2-in-1 - N152"   → ("2-in-1", "N152")
        "- N152"          → ("", "N152")
        "Size M"          → ("Size M", "")

    Returns:
        Tuple of (variant_name, product_code)
    """
    if not variant or not variant.strip():
        return "", ""

    trimmed = variant.strip()

    if trimmed.startswith("- "):
        return "", trimmed[2:].strip()

    if " - " in trimmed:
        name, code = trimmed.split(" - ", 1)
        return name.strip(), code.strip()

    return trimmed, ""
