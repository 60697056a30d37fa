"""Variant generation: expansion, signatures and comparison."""

from .compare import VariantComparison, compare_variants
from .expander import (
    VariantValidationError,
    build_variant_code,
    build_variant_name,
    expand_variants,
    placeholder_fields,
    validate_expansion,
    variants_to_frame,
)
from .models import AttributeLine, BaseProduct, GeneratedVariant
from .signature import (
    format_signature,
    format_variant_for_display,
    parse_signature,
    parse_variant_field,
)

__all__ = [
    "AttributeLine",
    "BaseProduct",
    "GeneratedVariant",
    "VariantComparison",
    "VariantValidationError",
    "build_variant_code",
    "build_variant_name",
    "compare_variants",
    "expand_variants",
    "format_signature",
    "format_variant_for_display",
    "parse_signature",
    "parse_variant_field",
    "placeholder_fields",
    "validate_expansion",
    "variants_to_frame",
]
