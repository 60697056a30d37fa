# -*- coding: utf-8 -*-
"""Compare an expected variant set against variants that already exist.

Variants are matched on the set of attribute value ids they carry, not on
their codes, so renamed or re-coded variants still match.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from .models import GeneratedVariant

logger = logging.getLogger(__name__)


@dataclass
class VariantComparison:
    """Result of compare_variants()."""

    matches: List[Dict[str, str]] = field(default_factory=list)
    missing: List[Dict[str, str]] = field(default_factory=list)
    extra: List[Dict[str, str]] = field(default_factory=list)

    @property
    def is_in_sync(self) -> bool:
        return not self.missing and not self.extra


def value_id_signature(variant: GeneratedVariant) -> str:
    """Order-independent key built from attribute value ids ("3,101")."""
    if not variant.attribute_values:
        return ""
    return ",".join(str(value_id) for value_id in sorted(variant.value_ids))


def compare_variants(
    expected: List[GeneratedVariant], actual: List[GeneratedVariant]
) -> VariantComparison:
    """Find which expected variants exist, which are missing and which are extra.

    Args:
        expected: Variants that should exist (freshly generated).
        actual: Variants currently stored.

    Returns:
        VariantComparison with code/name pairs for each bucket.
    """
    result = VariantComparison()

    actual_map: Dict[str, GeneratedVariant] = {}
    for variant in actual:
        signature = value_id_signature(variant)
        if signature:
            actual_map[signature] = variant

    for variant in expected:
        entry = {"code": variant.code, "name": variant.name}
        signature = value_id_signature(variant)
        if signature and signature in actual_map:
            result.matches.append(entry)
            del actual_map[signature]
        else:
            result.missing.append(entry)

    for variant in actual_map.values():
        result.extra.append({"code": variant.code, "name": variant.name})

    logger.info(
        f"Variant comparison: {len(result.matches)} matches, "
        f"{len(result.missing)} missing, {len(result.extra)} extra"
    )
    return result
