# -*- coding: utf-8 -*-
"""Expand attribute selections into concrete product variants.

Given a base product and the attribute lines a user picked, build every
combination (cartesian product) and derive a code and display name for each.

Code policy:
    base code + short code of each value, upper-cased, joined with "-"
    ATN001 + Đen + M → ATN001-DEN-M

    When the only line is "Size Số", a letter is inserted instead so the size
    digits cannot blend into the base code's own trailing digits:
    N152 + 38 → N152A38

Name policy:
    "Áo thun nam basic" + Đen + M → "Áo thun nam basic - Đen - M"
"""

import itertools
import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

import pandas as pd

from src.catalog.attributes import SIZE_NUMBER_ID, AttributeCatalog, AttributeValue

from .models import AttributeLine, BaseProduct, GeneratedVariant
from .signature import format_signature

logger = logging.getLogger(__name__)

CODE_SEPARATOR = "-"
NAME_SEPARATOR = " - "
SIZE_NUMBER_LETTER = "A"
DEFAULT_UNIT = "Cái"

# Filled with a default for new rows, never derived from the selection
PLACEHOLDER_FIELDS = ("stock_quantity",)


class VariantValidationError(ValueError):
    """Raised when variants are requested for an invalid selection."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def resolve_lines(
    lines: Iterable[AttributeLine], catalog: AttributeCatalog
) -> List[Tuple[AttributeLine, List[AttributeValue]]]:
    """Match each line's value names against the catalog.

    Unknown values are dropped silently; a line with no known value is
    dropped as a whole.

    Returns:
        List of (line, matched values) in line order.
    """
    resolved = []
    for line in lines:
        try:
            attribute = catalog.get_attribute(line.attribute_id)
        except KeyError:
            logger.warning(
                f"Attribute {line.attribute_id} ({line.attribute_name}) not in catalog, "
                "dropping line"
            )
            continue

        matched = []
        seen_ids: Set[int] = set()
        for name in line.values:
            value = attribute.find_value(name)
            if value is None:
                logger.debug(f"Value '{name}' not found under {attribute.name}")
                continue
            if value.id in seen_ids:
                continue
            seen_ids.add(value.id)
            matched.append(value)

        if matched:
            resolved.append((line, matched))

    return resolved


def validate_expansion(
    base: BaseProduct,
    lines: List[AttributeLine],
    catalog: AttributeCatalog,
) -> Tuple[bool, List[str]]:
    """Check that variants can be generated.

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    if not base.code or not base.code.strip():
        errors.append("Thiếu mã sản phẩm gốc")
    if not base.name or not base.name.strip():
        errors.append("Thiếu tên sản phẩm gốc")

    if not lines:
        errors.append("Cần chọn ít nhất một thuộc tính")
    elif not resolve_lines(lines, catalog):
        errors.append("Không có giá trị thuộc tính hợp lệ nào được chọn")

    return len(errors) == 0, errors


def is_size_number_only(lines: List[AttributeLine]) -> bool:
    return len(lines) == 1 and lines[0].attribute_id == SIZE_NUMBER_ID


def build_variant_code(
    base_code: str,
    values: List[AttributeValue],
    size_number_only: bool = False,
    separator: str = CODE_SEPARATOR,
    size_number_letter: str = SIZE_NUMBER_LETTER,
) -> str:
    """Build the code of one variant (before collision handling)."""
    base_code = base_code.strip().upper()
    codes = [(value.code or value.name).strip().upper() for value in values]

    if size_number_only:
        return f"{base_code}{size_number_letter}{''.join(codes)}"

    return separator.join([base_code] + codes)


def build_variant_name(
    base_name: str,
    values: List[AttributeValue],
    separator: str = NAME_SEPARATOR,
) -> str:
    """Build the display name of one variant."""
    return separator.join([base_name.strip()] + [value.name for value in values])


def _unique_code(code: str, used_codes: Set[str]) -> str:
    # Same collision suffixes the shop has always used: 1, 11, 111, ...
    final_code = code
    counter = 0
    while final_code in used_codes:
        counter += 1
        final_code = code + "1" * counter
    used_codes.add(final_code)
    if counter:
        logger.warning(f"Variant code collision: {code} renamed to {final_code}")
    return final_code


def expand_variants(
    base: BaseProduct,
    lines: List[AttributeLine],
    catalog: AttributeCatalog,
    code_separator: str = CODE_SEPARATOR,
    name_separator: str = NAME_SEPARATOR,
    size_number_letter: str = SIZE_NUMBER_LETTER,
) -> List[GeneratedVariant]:
    """Generate every variant of a base product.

    Args:
        base: Base product (code, name, list price).
        lines: Selected attribute lines in the order they were added.
        catalog: Attribute catalog used to resolve values and short codes.
        code_separator: Separator between code segments.
        name_separator: Separator between name segments.
        size_number_letter: Letter inserted for size-number-only products.

    Returns:
        One GeneratedVariant per combination, in selection order.

    Raises:
        VariantValidationError: If base fields are missing or no line has a
            known value.

    Example:
        >>> base = BaseProduct("N152", "Quần jean", 250000)
        >>> lines = [AttributeLine(SIZE_NUMBER_ID, "Size Số", ["38", "39"])]
        >>> [v.code for v in expand_variants(base, lines, load_default_catalog())]
        ['N152A38', 'N152A39']
    """
    is_valid, errors = validate_expansion(base, lines, catalog)
    if not is_valid:
        raise VariantValidationError(errors)

    resolved = resolve_lines(lines, catalog)
    # Canonical spelling, unknown values removed
    effective_lines = [
        AttributeLine(line.attribute_id, line.attribute_name, [v.name for v in values])
        for line, values in resolved
    ]
    size_number_only = is_size_number_only(effective_lines)
    base_code = base.code.strip().upper()

    used_codes: Set[str] = set()
    variants = []

    for combination in itertools.product(*(values for _, values in resolved)):
        values = list(combination)
        code = build_variant_code(
            base_code,
            values,
            size_number_only=size_number_only,
            separator=code_separator,
            size_number_letter=size_number_letter,
        )
        variants.append(
            GeneratedVariant(
                code=_unique_code(code, used_codes),
                name=build_variant_name(base.name, values, name_separator),
                attribute_values=values,
                source_lines=effective_lines,
                list_price=base.list_price,
                base_code=base_code,
            )
        )

    logger.info(
        f"Generated {len(variants)} variants for {base_code} "
        f"from {len(effective_lines)} attribute lines"
    )
    return variants


def variants_to_frame(
    base: BaseProduct,
    variants: List[GeneratedVariant],
    purchase_price: Optional[float] = None,
    selling_price: Optional[float] = None,
    supplier_name: str = "",
    include_parent: bool = True,
) -> pd.DataFrame:
    """Convert generated variants to product rows ready to be persisted.

    The parent row keeps the base code and carries the full variant signature;
    each child row carries its own values as "Đen, M".

    Prices left as None are written as the base list price (selling) or 0
    (purchase); see placeholder_fields() before comparing these rows with
    stored ones.

    Returns:
        DataFrame with product_code, product_name, base_product_code, variant,
        purchase_price, selling_price, supplier_name, stock_quantity, unit.
    """
    if purchase_price is None:
        purchase_price = 0
    if selling_price is None:
        selling_price = base.list_price

    base_code = base.code.strip().upper()
    supplier_name = (supplier_name or "").strip().upper()
    rows: List[Dict] = []

    if include_parent:
        lines = variants[0].source_lines if variants else []
        rows.append(
            {
                "product_code": base_code,
                "product_name": base.name.strip(),
                "base_product_code": base_code,
                "variant": format_signature(lines),
            }
        )

    for variant in variants:
        rows.append(
            {
                "product_code": variant.code,
                "product_name": variant.name,
                "base_product_code": base_code,
                "variant": ", ".join(variant.value_names),
            }
        )

    df = pd.DataFrame(
        rows,
        columns=["product_code", "product_name", "base_product_code", "variant"],
    )
    df["purchase_price"] = purchase_price
    df["selling_price"] = selling_price
    df["supplier_name"] = supplier_name
    df["stock_quantity"] = 0
    df["unit"] = DEFAULT_UNIT

    return df


def placeholder_fields(
    base: BaseProduct,
    purchase_price: Optional[float] = None,
    selling_price: Optional[float] = None,
) -> Tuple[str, ...]:
    """Columns of variants_to_frame() that hold defaults, not caller values.

    These must not be offered as updates to rows that already exist:
    a stored stock count or price would be overwritten with 0.

    Example:
        >>> placeholder_fields(BaseProduct("N1", "Áo"), purchase_price=80000)
        ('stock_quantity', 'selling_price')
    """
    fields = list(PLACEHOLDER_FIELDS)
    if purchase_price is None:
        fields.append("purchase_price")
    if selling_price is None and not base.list_price:
        fields.append("selling_price")
    return tuple(fields)
