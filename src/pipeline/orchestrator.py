#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Catalog command line tools

Commands:
1. generate: Expand a base product into variants, report conflicts with the
   catalog export, write both to XLSX
2. next-code: Next free product code for a category
3. check-gap: Warn when a typed code jumps far ahead of the sequence
4. parse-signature: Show how a stored variant signature is read back
5. comment: Product codes and live phase of a Facebook comment
6. predict-index: Provisional session index for a customer's next order

Examples:
    python -m src.pipeline.orchestrator generate --code ATN001 \\
        --name "Áo thun nam basic" --line "Màu=Đen,Trắng" --line "Size Chữ=M,L"
    python -m src.pipeline.orchestrator next-code N --products products.csv
    python -m src.pipeline.orchestrator check-gap N0090 --products products.csv
    python -m src.pipeline.orchestrator comment "chốt [N217]" \\
        --time 2025-10-18T03:40:00+0000
    python -m src.pipeline.orchestrator predict-index \\
        --order 3@2025-10-18T03:40:00+0000 --now 2025-10-18T03:40:02+0000
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from src.catalog.attributes import AttributeCatalog
from src.codes.allocator import CodeSources, check_gap_against_sources, next_code
from src.export.exporter import export_conflicts_xlsx, export_variants_xlsx
from src.live.comments import extract_product_codes
from src.live.phases import determine_live_phase, parse_facebook_time
from src.live.session_index import predict_session_index
from src.pipeline.data_loader import load_optional, rows_for_base_code
from src.reconcile.conflicts import find_conflicts
from src.utils.app_config import AppConfig
from src.variants.expander import (
    VariantValidationError,
    expand_variants,
    placeholder_fields,
    variants_to_frame,
)
from src.variants.models import AttributeLine, BaseProduct
from src.variants.signature import format_signature, parse_signature

logger = logging.getLogger(__name__)


# === HELPER FUNCTIONS ===


def parse_line_arg(text: str, catalog: AttributeCatalog) -> AttributeLine:
    """Parse "Màu=Đen,Trắng" (attribute name or id) into an AttributeLine.

    Raises:
        ValueError: If the text has no "=" or names an unknown attribute.
    """
    if "=" not in text:
        raise ValueError(f"Expected ATTRIBUTE=VALUE1,VALUE2, got: {text!r}")

    attribute_part, values_part = text.split("=", 1)
    attribute_part = attribute_part.strip()

    if attribute_part.isdigit():
        attribute = catalog.get_attribute(int(attribute_part))
    else:
        attribute = catalog.find_attribute(attribute_part)
    if attribute is None:
        raise ValueError(f"Unknown attribute: {attribute_part!r}")

    values = [v.strip() for v in values_part.split(",") if v.strip()]
    return AttributeLine(attribute.id, attribute.name, values)


def parse_order_arg(text: str) -> dict:
    """Parse "3@2025-10-18T03:40:00+0000" into a recent-order row."""
    index, _, created_time = text.partition("@")
    return {"session_index": index.strip(), "created_time": created_time.strip() or None}


def build_sources(
    products_path: Optional[Path],
    orders_path: Optional[Path],
    form_codes: Optional[List[str]] = None,
) -> CodeSources:
    return CodeSources(
        form_items=form_codes or [],
        catalog_rows=load_optional(products_path, "products"),
        order_items=load_optional(orders_path, "purchase_order_items"),
    )


# === STEPS ===


def step_generate(args, config: AppConfig) -> bool:
    """Expand variants, detect conflicts, export for review."""
    catalog = config.catalog()

    try:
        lines = [parse_line_arg(text, catalog) for text in args.line]
    except (ValueError, KeyError) as e:
        logger.error(str(e))
        return False

    base = BaseProduct(code=args.code, name=args.name, list_price=args.selling_price or 0)

    try:
        variants = expand_variants(
            base,
            lines,
            catalog,
            code_separator=config.code_separator,
            name_separator=config.name_separator,
            size_number_letter=config.size_number_letter,
        )
    except VariantValidationError as e:
        for error in e.errors:
            logger.error(f"Cannot generate variants: {error}")
        return False

    products = variants_to_frame(
        base,
        variants,
        purchase_price=args.purchase_price,
        selling_price=args.selling_price,
        supplier_name=args.supplier or "",
    )

    logger.info(f"Signature: {format_signature(variants[0].source_lines)}")
    for variant in variants:
        logger.info(f"  {variant.code:<20} {variant.name}")

    output_dir = Path(args.output_dir) if args.output_dir else config.export_dir
    export_variants_xlsx(products, output_dir / f"variants_{base.code.upper()}.xlsx")

    if args.products:
        stored = rows_for_base_code(
            load_optional(Path(args.products), "products"),
            base.code,
            code_separator=config.code_separator,
            size_number_letter=config.size_number_letter,
        )
        conflicts = find_conflicts(
            products,
            stored,
            config.tracked_fields,
            exclude=placeholder_fields(base, args.purchase_price, args.selling_price),
        )
        if conflicts:
            logger.warning(f"{len(conflicts)} variants differ from the catalog")
            export_conflicts_xlsx(conflicts, output_dir / f"conflicts_{base.code.upper()}.xlsx")

    return True


def step_next_code(args, config: AppConfig) -> bool:
    sources = build_sources(
        Path(args.products) if args.products else None,
        Path(args.orders) if args.orders else None,
        args.form_code,
    )
    try:
        code = next_code(args.category, sources, width=config.code_width)
    except ValueError as e:
        logger.error(str(e))
        return False

    print(code)
    return True


def step_check_gap(args, config: AppConfig) -> bool:
    sources = build_sources(
        Path(args.products) if args.products else None,
        Path(args.orders) if args.orders else None,
        args.form_code,
    )
    result = check_gap_against_sources(
        args.candidate, sources, threshold=config.gap_threshold, width=config.code_width
    )

    if result is None:
        logger.info(f"{args.candidate} is not a sequential code, gap check skipped")
        return True

    print(f"{result.candidate_code}: gap {result.gap} from {result.max_code}")
    if result.is_large:
        logger.warning(
            f"Gap {result.gap} exceeds {config.gap_threshold}, confirm before using "
            f"{result.candidate_code}"
        )
        return not args.strict
    return True


def step_parse_signature(args, config: AppConfig) -> bool:
    lines = parse_signature(args.signature, config.catalog())
    if not lines:
        logger.warning(f"No attribute recognized in: {args.signature!r}")
        return False

    for line in lines:
        print(f"{line.attribute_name}: {', '.join(line.values)}")
    print(format_signature(lines))
    return True


def step_comment(args, config: AppConfig) -> bool:
    codes = extract_product_codes(args.message)
    if not codes:
        logger.warning("No bracketed product code in comment")
        return False

    print(" ".join(codes))
    if args.time:
        phase = determine_live_phase(
            args.time,
            tz_offset_hours=config.timezone_offset_hours,
            morning_cutoff_minutes=config.morning_cutoff_minutes,
        )
        print(f"{phase.phase_date} {phase.phase_type}")
    return True


def step_predict_index(args, config: AppConfig) -> bool:
    orders = [parse_order_arg(text) for text in args.order]
    now = parse_facebook_time(args.now) if args.now else None

    prediction = predict_session_index(
        orders, now=now, window_seconds=config.prediction_window_seconds
    )
    print(f"{prediction.predicted} ({prediction.confidence}): {prediction.reasoning}")
    return True


# === CLI ===


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Variant generation and product code tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:", 1)[1] if "Examples:" in __doc__ else None,
    )
    parser.add_argument("--config", help="Path to catalog.toml")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate variants of a base product")
    generate.add_argument("--code", required=True, help="Base product code")
    generate.add_argument("--name", required=True, help="Base product name")
    generate.add_argument(
        "--line",
        action="append",
        default=[],
        help='Attribute line, e.g. "Màu=Đen,Trắng" (repeatable, order kept)',
    )
    generate.add_argument(
        "--purchase-price", type=float, help="Purchase price (default: keep stored)"
    )
    generate.add_argument(
        "--selling-price", type=float, help="Selling price (default: keep stored)"
    )
    generate.add_argument("--supplier", help="Supplier name")
    generate.add_argument("--products", help="Catalog export CSV (for conflicts)")
    generate.add_argument("--output-dir", help="Directory for XLSX output")

    for command, help_text in (
        ("next-code", "Next free code for a category"),
        ("check-gap", "Check a typed code against the sequence"),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        if command == "next-code":
            sub.add_argument("category", help="Category letter (N or P)")
        else:
            sub.add_argument("candidate", help="Typed product code")
            sub.add_argument(
                "--strict", action="store_true", help="Exit 1 when the gap is large"
            )
        sub.add_argument("--products", help="Catalog export CSV")
        sub.add_argument("--orders", help="Purchase-order items export CSV")
        sub.add_argument(
            "--form-code",
            action="append",
            default=[],
            help="Code already used in the form being edited (repeatable)",
        )

    parse = subparsers.add_parser("parse-signature", help="Parse a variant signature")
    parse.add_argument("signature", help='e.g. "(Đen | Trắng) (M | L)"')

    comment = subparsers.add_parser("comment", help="Read codes and live phase of a comment")
    comment.add_argument("message", help="Comment text")
    comment.add_argument("--time", help="Comment created_time from the Graph API")

    predict = subparsers.add_parser("predict-index", help="Predict the next session index")
    predict.add_argument(
        "--order",
        action="append",
        default=[],
        help="Known order as INDEX@CREATED_TIME (repeatable)",
    )
    predict.add_argument("--now", help="Current time (default: system clock)")

    return parser


STEPS = {
    "generate": step_generate,
    "next-code": step_next_code,
    "check-gap": step_check_gap,
    "parse-signature": step_parse_signature,
    "comment": step_comment,
    "predict-index": step_predict_index,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)-8s] %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    args = build_parser().parse_args(argv)

    try:
        config = AppConfig(Path(args.config) if args.config else None)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1

    try:
        success = STEPS[args.command](args, config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        success = False

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
