"""Product code allocation."""

from .allocator import (
    DEFAULT_WIDTH,
    GAP_THRESHOLD,
    CodeSources,
    GapCheck,
    category_of,
    check_gap,
    check_gap_against_sources,
    extract_base_code,
    increment_code,
    max_number_across,
    max_number_for_category,
    next_code,
    parse_code,
)

__all__ = [
    "DEFAULT_WIDTH",
    "GAP_THRESHOLD",
    "CodeSources",
    "GapCheck",
    "category_of",
    "check_gap",
    "check_gap_against_sources",
    "extract_base_code",
    "increment_code",
    "max_number_across",
    "max_number_for_category",
    "next_code",
    "parse_code",
]
