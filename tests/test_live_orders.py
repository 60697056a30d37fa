# -*- coding: utf-8 -*-
"""Tests for src/live/orders.py."""

import pytest

from src.live.orders import (
    HANG_DAT,
    HANG_LE,
    SOURCE_EXISTING,
    SOURCE_INVENTORY,
    SOURCE_TPOS,
    is_oversell,
    plan_comment_orders,
    plan_live_product,
)
from src.live.phases import MORNING, LivePhaseKey

PHASE = LivePhaseKey("2025-10-18", MORNING)


@pytest.fixture
def inventory():
    return {
        "N217": {
            "product_code": "N217",
            "product_name": "Áo thun nam basic",
            "variant": "Đen, M",
            "product_images": ["https://img/n217-1.jpg", "https://img/n217-2.jpg"],
        },
        "N55": {
            "product_code": "N55",
            "product_name": "Quần jean",
            "variant": "",
            "tpos_image_url": "https://tpos/n55.jpg",
        },
    }


class TestPlanLiveProduct:
    """Test live product source priority."""

    def test_existing_wins(self, inventory):
        existing = {
            "id": "lp-1",
            "product_code": "N217",
            "product_name": "Áo thun (live)",
            "prepared_quantity": 5,
            "sold_quantity": 2,
        }
        product = plan_live_product(
            "N217", existing=existing, inventory_row=inventory["N217"]
        )
        assert product.source == SOURCE_EXISTING
        assert product.live_product_id == "lp-1"
        assert product.sold_quantity == 2
        assert not product.is_new

    def test_inventory_first_image(self, inventory):
        product = plan_live_product("N217", inventory_row=inventory["N217"])
        assert product.source == SOURCE_INVENTORY
        assert product.image_url == "https://img/n217-1.jpg"
        assert product.variant == "Đen, M"
        assert product.is_new

    def test_inventory_falls_back_to_tpos_image(self, inventory):
        product = plan_live_product("N55", inventory_row=inventory["N55"])
        assert product.image_url == "https://tpos/n55.jpg"
        assert product.variant is None

    def test_tpos_payload(self):
        product = plan_live_product(
            "N300",
            tpos_product={
                "DefaultCode": "N300",
                "Name": "Váy hoa",
                "Attributes": "Size M",
                "ImageURL": "https://tpos/n300.jpg",
            },
            comment_type=HANG_DAT,
        )
        assert product.source == SOURCE_TPOS
        assert product.product_name == "Váy hoa"
        assert product.product_type == HANG_DAT

    def test_unknown_code(self):
        assert plan_live_product("N999") is None

    def test_default_product_type(self, inventory):
        assert plan_live_product("N217", inventory_row=inventory["N217"]).product_type == HANG_LE


class TestIsOversell:
    def test_sold_out(self):
        assert is_oversell(5, 5)
        assert is_oversell(0, None)

    def test_stock_left(self):
        assert not is_oversell(2, 5)


class TestPlanCommentOrders:
    """Test planning a whole comment."""

    def test_one_order_per_code(self, inventory):
        plan = plan_comment_orders(
            "c1", "chốt [N217] và [N55]", PHASE, live_products={}, inventory=inventory,
            session_index=3,
        )
        assert plan.product_codes == ["N217", "N55"]
        assert [o.product.product_code for o in plan.orders] == ["N217", "N55"]
        assert all(o.phase == PHASE for o in plan.orders)
        assert all(o.session_index == 3 for o in plan.orders)

    def test_existing_orders_skipped(self, inventory):
        plan = plan_comment_orders(
            "c1", "[N217] [N55]", PHASE, {}, inventory, existing_order_codes={"N217"}
        )
        assert plan.skipped_codes == ["N217"]
        assert [o.product.product_code for o in plan.orders] == ["N55"]

    def test_unresolved_codes_reported(self, inventory):
        plan = plan_comment_orders("c1", "[N999]", PHASE, {}, inventory)
        assert plan.orders == []
        assert plan.unresolved_codes == ["N999"]

    def test_tpos_only_when_not_in_inventory(self, inventory):
        tpos = {
            "N217": {"DefaultCode": "N217", "Name": "TPOS name"},
            "N300": {"DefaultCode": "N300", "Name": "Váy hoa"},
        }
        plan = plan_comment_orders("c1", "[N217] [N300]", PHASE, {}, inventory, tpos)

        assert [o.product.source for o in plan.orders] == [SOURCE_INVENTORY, SOURCE_TPOS]
        assert plan.orders[0].product.product_name == "Áo thun nam basic"

    def test_oversell_flag(self, inventory):
        live_products = {
            "N217": {"id": "lp-1", "product_code": "N217", "prepared_quantity": 2, "sold_quantity": 2},
            "N55": {"id": "lp-2", "product_code": "N55", "prepared_quantity": 2, "sold_quantity": 1},
        }
        plan = plan_comment_orders("c1", "[N217] [N55]", PHASE, live_products, inventory)

        assert [o.is_oversell for o in plan.orders] == [True, False]

    def test_tpos_order_ids_carried(self, inventory):
        plan = plan_comment_orders(
            "c1", "[N217]", PHASE, {}, inventory, tpos_order_id="o-1", tpos_order_code="DH001"
        )
        assert plan.orders[0].tpos_order_id == "o-1"
        assert plan.orders[0].code_tpos_order_id == "DH001"
