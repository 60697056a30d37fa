# -*- coding: utf-8 -*-
"""Sequential product code allocation.

Product codes are a category letter followed by a zero-padded sequence
number: N0048, P0012. Variant codes keep the base code as prefix
(N0048-DEN-M, N0048A38), so the sequence number is the digit run right
after the category letter.

The highest number in use is collected from three places, any of which may
be ahead of the others:
1. Items of the purchase-order form being edited (not saved yet)
2. The product catalog
3. Saved purchase-order items
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 4
GAP_THRESHOLD = 10

CODE_PATTERN = re.compile(r"^([A-Z])(\d+)$")
BASE_CODE_PATTERN = re.compile(r"^([A-Z]+\d+)")


@dataclass
class CodeSources:
    """Codes currently in use, per source.

    Each field accepts any iterable of codes: a list, a pandas Series, or a
    DataFrame (its `product_code` column is used).
    """

    form_items: Iterable = field(default_factory=list)
    catalog_rows: Iterable = field(default_factory=list)
    order_items: Iterable = field(default_factory=list)

    def as_series(self) -> Tuple[pd.Series, pd.Series, pd.Series]:
        return (
            _to_code_series(self.form_items),
            _to_code_series(self.catalog_rows),
            _to_code_series(self.order_items),
        )


@dataclass
class GapCheck:
    """Distance between a typed code and the highest code in use."""

    candidate_code: str
    candidate_number: int
    max_number: int
    gap: int
    is_large: bool
    max_code: str


def _to_code_series(codes) -> pd.Series:
    if codes is None:
        return pd.Series([], dtype="object")
    if isinstance(codes, pd.DataFrame):
        if "product_code" not in codes.columns:
            logger.warning("Code source DataFrame has no product_code column")
            return pd.Series([], dtype="object")
        codes = codes["product_code"]
    series = pd.Series(list(codes), dtype="object")
    return series.dropna().astype(str).str.strip().str.upper()


def _sequence_numbers(codes, category: str) -> pd.Series:
    series = _to_code_series(codes)
    if series.empty:
        return pd.Series([], dtype="object")
    digits = series.str.extract(rf"^{re.escape(category)}(\d+)", expand=False)
    return digits.dropna()


def max_number_for_category(codes, category: str) -> int:
    """Highest sequence number among codes of one category (0 if none).

    Example:
        >>> max_number_for_category(["N0047", "N0012-DEN-M", "P0300"], "N")
        47
    """
    digits = _sequence_numbers(codes, category.upper())
    if digits.empty:
        return 0
    return int(digits.astype(int).max())


def _width_of_max(sources: CodeSources, category: str, max_number: int) -> int:
    # Digit count of the code(s) currently holding the maximum
    width = 0
    for series in sources.as_series():
        digits = _sequence_numbers(series, category.upper())
        if digits.empty:
            continue
        holders = digits[digits.astype(int) == max_number]
        if not holders.empty:
            width = max(width, int(holders.str.len().max()))
    return width


def max_number_across(category: str, sources: CodeSources) -> int:
    """Highest sequence number of a category across all three sources."""
    category = category.upper()
    form, catalog, orders = sources.as_series()

    max_from_form = max_number_for_category(form, category)
    max_from_catalog = max_number_for_category(catalog, category)
    max_from_orders = max_number_for_category(orders, category)

    logger.debug(
        f"Max {category} numbers - form: {max_from_form}, "
        f"catalog: {max_from_catalog}, purchase orders: {max_from_orders}"
    )
    return max(max_from_form, max_from_catalog, max_from_orders)


def format_code(category: str, number: int, width: int = DEFAULT_WIDTH) -> str:
    return f"{category.upper()}{number:0{width}d}"


def next_code(
    category: str,
    sources: CodeSources,
    width: int = DEFAULT_WIDTH,
) -> str:
    """Next unused code for a category.

    Padding follows the code holding the current maximum when it is wider
    than `width`, so numbering continues the latest convention. Older,
    over-padded codes below the maximum do not change the padding.

    Args:
        category: Category letter ("N" or "P").
        sources: Codes in use per source.
        width: Minimum digit width.

    Returns:
        New code, e.g. "N0048".

    Raises:
        ValueError: If category is not a single letter.
    """
    category = (category or "").strip().upper()
    if len(category) != 1 or not category.isalpha():
        raise ValueError(f"Category must be a single letter, got: {category!r}")

    max_number = max_number_across(category, sources)
    effective_width = max(width, _width_of_max(sources, category, max_number))
    code = format_code(category, max_number + 1, effective_width)

    logger.info(f"Next {category} code: {code} (max in use: {max_number})")
    return code


def parse_code(code: str) -> Optional[Tuple[str, int]]:
    """Split "N0048" into ("N", 48); None for anything else."""
    if not code or not isinstance(code, str):
        return None
    match = CODE_PATTERN.match(code.strip().upper())
    if not match:
        return None
    return match.group(1), int(match.group(2))


def category_of(code: str) -> Optional[str]:
    """Category letter of a code, or None if it does not start with a letter."""
    if not code or not isinstance(code, str):
        return None
    first = code.strip()[:1].upper()
    return first if first.isalpha() else None


def check_gap(
    candidate_code: str,
    max_used: int,
    threshold: int = GAP_THRESHOLD,
    width: int = DEFAULT_WIDTH,
) -> Optional[GapCheck]:
    """Check how far a typed code jumps ahead of the sequence.

    A malformed code is not an error: the check is simply skipped.

    Returns:
        GapCheck (is_large when gap > threshold), or None if the candidate is
        not "<letter><digits>".
    """
    parsed = parse_code(candidate_code)
    if parsed is None:
        logger.debug(f"Skipping gap check for non-sequential code: {candidate_code!r}")
        return None

    category, number = parsed
    gap = number - max_used
    is_large = gap > threshold

    if is_large:
        logger.warning(
            f"Code {candidate_code} is {gap} ahead of the highest {category} code "
            f"({format_code(category, max_used, width)})"
        )

    return GapCheck(
        candidate_code=candidate_code.strip().upper(),
        candidate_number=number,
        max_number=max_used,
        gap=gap,
        is_large=is_large,
        max_code=format_code(category, max_used, width),
    )


def check_gap_against_sources(
    candidate_code: str,
    sources: CodeSources,
    threshold: int = GAP_THRESHOLD,
    width: int = DEFAULT_WIDTH,
) -> Optional[GapCheck]:
    """check_gap() using the cross-source maximum of the candidate's category.

    The candidate itself is usually already in the form items; callers should
    pass the form codes without the row being checked.
    """
    parsed = parse_code(candidate_code)
    if parsed is None:
        return None
    category, _ = parsed
    max_used = max_number_across(category, sources)
    return check_gap(candidate_code, max_used, threshold=threshold, width=width)


def increment_code(code: str) -> Optional[str]:
    """Next code after a given one, keeping its width ("N0048" → "N0049")."""
    if not code or not isinstance(code, str):
        return None
    match = CODE_PATTERN.match(code.strip().upper())
    if not match:
        return None
    category, digits = match.group(1), match.group(2)
    return format_code(category, int(digits) + 1, len(digits))


def extract_base_code(code: str) -> str:
    """Strip the variant part of a code.

    Examples:
        "ATN001-DEN-M" → "ATN001"
        "N152A38"      → "N152"
        "N0048"        → "N0048"
    """
    if not code or not isinstance(code, str):
        return ""
    cleaned = code.strip().upper()
    match = BASE_CODE_PATTERN.match(cleaned)
    return match.group(1) if match else cleaned
