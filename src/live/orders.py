# -*- coding: utf-8 -*-
"""Turn a live comment into live products and live orders.

For each code in a comment:
1. Reuse the live product already listed in this phase, or
2. build one from the product catalog row, or
3. build one from the TPOS product payload (only looked up when the catalog
   has no row), or
4. give up on that code (logged, nothing created).

Then create one live order per (comment, live product), unless it already
exists. Selling past the prepared quantity is allowed and flagged as
oversell. This module only plans the rows; storing them is up to the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set

from .comments import extract_product_codes
from .phases import LivePhaseKey

logger = logging.getLogger(__name__)

SOURCE_EXISTING = "existing"
SOURCE_INVENTORY = "inventory"
SOURCE_TPOS = "tpos"

HANG_DAT = "hang_dat"
HANG_LE = "hang_le"


@dataclass
class LiveProductPlan:
    """Live product row to reuse or insert."""

    product_code: str
    product_name: str
    variant: Optional[str]
    product_type: str
    image_url: Optional[str]
    source: str  # existing, inventory or tpos
    prepared_quantity: int = 0
    sold_quantity: int = 0
    live_product_id: Optional[str] = None

    @property
    def is_new(self) -> bool:
        return self.source != SOURCE_EXISTING


@dataclass
class LiveOrderPlan:
    """Live order to insert for one product of one comment."""

    facebook_comment_id: str
    product: LiveProductPlan
    phase: LivePhaseKey
    session_index: Optional[int]
    is_oversell: bool
    tpos_order_id: Optional[str] = None
    code_tpos_order_id: Optional[str] = None


@dataclass
class CommentOrderPlan:
    """Everything to write for one comment."""

    comment_id: str
    product_codes: List[str]
    orders: List[LiveOrderPlan] = field(default_factory=list)
    skipped_codes: List[str] = field(default_factory=list)
    unresolved_codes: List[str] = field(default_factory=list)


def product_type_for(comment_type: Optional[str]) -> str:
    return HANG_DAT if comment_type == HANG_DAT else HANG_LE


def is_oversell(sold_quantity: Optional[int], prepared_quantity: Optional[int]) -> bool:
    """An order is oversell when everything prepared is already sold."""
    return (sold_quantity or 0) >= (prepared_quantity or 0)


def _first_image(row: Mapping[str, Any]) -> Optional[str]:
    images = row.get("product_images") or []
    if images:
        return images[0]
    return row.get("tpos_image_url") or None


def plan_live_product(
    product_code: str,
    existing: Optional[Mapping[str, Any]] = None,
    inventory_row: Optional[Mapping[str, Any]] = None,
    tpos_product: Optional[Mapping[str, Any]] = None,
    comment_type: Optional[str] = None,
) -> Optional[LiveProductPlan]:
    """Decide where the live product for a code comes from.

    Args:
        product_code: Code from the comment.
        existing: Live product row already in this phase.
        inventory_row: Catalog row (product_name, variant, product_images,
            tpos_image_url).
        tpos_product: TPOS product payload (DefaultCode, Name, Attributes,
            ImageURL).
        comment_type: "hang_dat" for pre-orders, anything else for retail.

    Returns:
        LiveProductPlan, or None if no source knows the code.
    """
    product_type = product_type_for(comment_type)

    if existing:
        return LiveProductPlan(
            product_code=existing.get("product_code") or product_code,
            product_name=existing.get("product_name", ""),
            variant=existing.get("variant"),
            product_type=existing.get("product_type") or product_type,
            image_url=existing.get("image_url"),
            source=SOURCE_EXISTING,
            prepared_quantity=int(existing.get("prepared_quantity") or 0),
            sold_quantity=int(existing.get("sold_quantity") or 0),
            live_product_id=existing.get("id"),
        )

    if inventory_row:
        return LiveProductPlan(
            product_code=inventory_row.get("product_code") or product_code,
            product_name=inventory_row.get("product_name", ""),
            variant=inventory_row.get("variant") or None,
            product_type=product_type,
            image_url=_first_image(inventory_row),
            source=SOURCE_INVENTORY,
        )

    if tpos_product:
        return LiveProductPlan(
            product_code=tpos_product.get("DefaultCode") or product_code,
            product_name=tpos_product.get("Name", ""),
            variant=tpos_product.get("Attributes") or None,
            product_type=product_type,
            image_url=tpos_product.get("ImageURL") or None,
            source=SOURCE_TPOS,
        )

    logger.error(f"Product {product_code} not found in live products, catalog or TPOS")
    return None


def plan_comment_orders(
    comment_id: str,
    message: str,
    phase: LivePhaseKey,
    live_products: Mapping[str, Mapping[str, Any]],
    inventory: Mapping[str, Mapping[str, Any]],
    tpos_products: Optional[Mapping[str, Mapping[str, Any]]] = None,
    existing_order_codes: Optional[Set[str]] = None,
    comment_type: Optional[str] = None,
    session_index: Optional[int] = None,
    tpos_order_id: Optional[str] = None,
    tpos_order_code: Optional[str] = None,
) -> CommentOrderPlan:
    """Plan live products and orders for one comment.

    Args:
        comment_id: Facebook comment id.
        message: Comment text.
        phase: Live phase of the comment.
        live_products: Live products of the phase, keyed by product code.
        inventory: Catalog rows keyed by product code.
        tpos_products: TPOS payloads keyed by product code.
        existing_order_codes: Codes that already have a live order for this
            comment.
        comment_type: "hang_dat" or "hang_le".
        session_index: Session index of the order (authoritative or predicted).
        tpos_order_id: TPOS order id.
        tpos_order_code: TPOS order code.

    Returns:
        CommentOrderPlan. Each planned order counts as one sale, so a later
        code of the same product in the batch sees the increased sold count.
    """
    tpos_products = tpos_products or {}
    existing_order_codes = existing_order_codes or set()
    codes = extract_product_codes(message)
    plan = CommentOrderPlan(comment_id=comment_id, product_codes=codes)

    sold_in_batch: Dict[str, int] = {}

    for code in codes:
        if code in existing_order_codes:
            logger.info(f"Live order for comment {comment_id} / {code} already exists")
            plan.skipped_codes.append(code)
            continue

        inventory_row = inventory.get(code)
        product = plan_live_product(
            code,
            existing=live_products.get(code),
            inventory_row=inventory_row,
            tpos_product=None if inventory_row else tpos_products.get(code),
            comment_type=comment_type,
        )
        if product is None:
            plan.unresolved_codes.append(code)
            continue

        sold = product.sold_quantity + sold_in_batch.get(product.product_code, 0)
        plan.orders.append(
            LiveOrderPlan(
                facebook_comment_id=comment_id,
                product=product,
                phase=phase,
                session_index=session_index,
                is_oversell=is_oversell(sold, product.prepared_quantity),
                tpos_order_id=tpos_order_id,
                code_tpos_order_id=tpos_order_code,
            )
        )
        sold_in_batch[product.product_code] = sold_in_batch.get(product.product_code, 0) + 1

    logger.info(
        f"Comment {comment_id}: {len(plan.orders)} orders planned, "
        f"{len(plan.skipped_codes)} already existed, "
        f"{len(plan.unresolved_codes)} unresolved"
    )
    return plan
