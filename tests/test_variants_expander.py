# -*- coding: utf-8 -*-
"""Tests for src/variants/expander.py."""

import pytest

from src.catalog.attributes import (
    COLOR_ID,
    SIZE_NUMBER_ID,
    SIZE_TEXT_ID,
    Attribute,
    AttributeCatalog,
    AttributeValue,
    load_default_catalog,
)
from src.variants.expander import (
    VariantValidationError,
    build_variant_code,
    expand_variants,
    placeholder_fields,
    validate_expansion,
    variants_to_frame,
)
from src.variants.models import AttributeLine, BaseProduct


@pytest.fixture
def catalog():
    return load_default_catalog()


@pytest.fixture
def base():
    return BaseProduct(code="ATN001", name="Áo thun nam basic", list_price=150000)


def color(*values):
    return AttributeLine(COLOR_ID, "Màu", list(values))


def size_text(*values):
    return AttributeLine(SIZE_TEXT_ID, "Size Chữ", list(values))


def size_number(*values):
    return AttributeLine(SIZE_NUMBER_ID, "Size Số", list(values))


class TestExpandVariants:
    """Test cartesian expansion."""

    def test_color_by_size(self, base, catalog):
        variants = expand_variants(base, [color("Đen", "Trắng"), size_text("M", "L")], catalog)

        assert [v.code for v in variants] == [
            "ATN001-DEN-M",
            "ATN001-DEN-L",
            "ATN001-TRANG-M",
            "ATN001-TRANG-L",
        ]
        assert variants[0].name == "Áo thun nam basic - Đen - M"
        assert variants[3].name == "Áo thun nam basic - Trắng - L"

    def test_count_is_product_of_line_sizes(self, base, catalog):
        lines = [color("Đen", "Trắng", "Đỏ"), size_text("S", "M", "L", "XL"), size_number("28", "29")]
        variants = expand_variants(base, lines, catalog)

        assert len(variants) == 3 * 4 * 2
        assert len({v.code for v in variants}) == len(variants)

    def test_size_number_only_inserts_letter(self, catalog):
        base = BaseProduct(code="N152", name="Quần jean")
        variants = expand_variants(base, [size_number("38", "39")], catalog)

        assert [v.code for v in variants] == ["N152A38", "N152A39"]
        assert variants[0].name == "Quần jean - 38"

    def test_numeric_sizes(self, catalog):
        line = size_number(38, 39, " 38 ")
        assert line.values == ["38", "39"]

        variants = expand_variants(BaseProduct("N152", "Quần"), [line], catalog)
        assert [v.code for v in variants] == ["N152A38", "N152A39"]

    def test_size_number_with_other_lines_uses_separator(self, catalog):
        base = BaseProduct(code="N152", name="Quần jean")
        variants = expand_variants(base, [color("Đen"), size_number("38")], catalog)

        assert [v.code for v in variants] == ["N152-DEN-38"]

    def test_selection_order_preserved(self, base, catalog):
        """Lines and values keep the order they were picked in."""
        variants = expand_variants(base, [size_text("L", "M"), color("Trắng")], catalog)

        assert [v.code for v in variants] == ["ATN001-L-TRANG", "ATN001-M-TRANG"]
        assert variants[0].value_names == ["L", "Trắng"]

    def test_unknown_values_dropped(self, base, catalog):
        variants = expand_variants(base, [color("Đen", "Cầu vồng"), size_text("M")], catalog)

        assert [v.code for v in variants] == ["ATN001-DEN-M"]

    def test_line_without_known_values_dropped(self, base, catalog):
        variants = expand_variants(base, [color("Cầu vồng"), size_text("M", "L")], catalog)

        assert [v.code for v in variants] == ["ATN001-M", "ATN001-L"]
        assert len(variants[0].source_lines) == 1

    def test_values_matched_case_insensitively(self, base, catalog):
        variants = expand_variants(base, [color("đen")], catalog)

        assert variants[0].value_names == ["Đen"]
        assert variants[0].code == "ATN001-DEN"

    def test_base_code_upper_cased(self, catalog):
        variants = expand_variants(BaseProduct("atn001", "Áo"), [size_text("s")], catalog)
        assert variants[0].code == "ATN001-S"
        assert variants[0].base_code == "ATN001"

    def test_back_references(self, base, catalog):
        lines = [color("Đen"), size_text("M")]
        variant = expand_variants(base, lines, catalog)[0]

        assert [v.attribute_id for v in variant.attribute_values] == [COLOR_ID, SIZE_TEXT_ID]
        assert [line.attribute_id for line in variant.source_lines] == [COLOR_ID, SIZE_TEXT_ID]
        assert variant.list_price == 150000

    def test_duplicate_short_codes_get_suffix(self, base):
        catalog = AttributeCatalog(
            [
                Attribute(
                    COLOR_ID,
                    "Màu",
                    (
                        AttributeValue(1, "Đen", "D"),
                        AttributeValue(2, "Đỏ", "D"),
                        AttributeValue(3, "Dâu", "D"),
                    ),
                )
            ]
        )
        variants = expand_variants(base, [color("Đen", "Đỏ", "Dâu")], catalog)

        assert [v.code for v in variants] == ["ATN001-D", "ATN001-D1", "ATN001-D11"]

    def test_custom_separators(self, base, catalog):
        variants = expand_variants(
            base,
            [color("Đen"), size_text("M")],
            catalog,
            code_separator="",
            name_separator=" / ",
        )
        assert variants[0].code == "ATN001DENM"
        assert variants[0].name == "Áo thun nam basic / Đen / M"


class TestValidation:
    """Test caller-facing validation failures."""

    def test_empty_lines_rejected(self, base, catalog):
        is_valid, errors = validate_expansion(base, [], catalog)
        assert not is_valid
        assert len(errors) == 1

    def test_expand_raises_with_reasons(self, base, catalog):
        with pytest.raises(VariantValidationError) as exc_info:
            expand_variants(base, [], catalog)
        assert exc_info.value.errors

    def test_all_values_unknown_rejected(self, base, catalog):
        is_valid, errors = validate_expansion(base, [color("Cầu vồng")], catalog)
        assert not is_valid

    def test_missing_base_fields(self, catalog):
        is_valid, errors = validate_expansion(BaseProduct("", ""), [color("Đen")], catalog)
        assert not is_valid
        assert len(errors) == 2

    def test_valid_selection(self, base, catalog):
        is_valid, errors = validate_expansion(base, [color("Đen")], catalog)
        assert is_valid
        assert errors == []


class TestBuildVariantCode:
    def test_falls_back_to_name_without_code(self):
        value = AttributeValue(1, "Kem", "")
        assert build_variant_code("N1", [value]) == "N1-KEM"


class TestVariantsToFrame:
    """Test conversion to persistable product rows."""

    def test_parent_and_children(self, base, catalog):
        lines = [color("Đen", "Trắng"), size_text("M")]
        variants = expand_variants(base, lines, catalog)
        df = variants_to_frame(base, variants, purchase_price=80000, supplier_name=" ncc a ")

        assert len(df) == 3
        parent = df.iloc[0]
        assert parent["product_code"] == "ATN001"
        assert parent["variant"] == "(Đen | Trắng) (M)"
        assert df.iloc[1]["product_code"] == "ATN001-DEN-M"
        assert df.iloc[1]["variant"] == "Đen, M"
        assert (df["base_product_code"] == "ATN001").all()
        assert (df["purchase_price"] == 80000).all()
        assert (df["selling_price"] == 150000).all()
        assert (df["supplier_name"] == "NCC A").all()
        assert (df["stock_quantity"] == 0).all()
        assert (df["unit"] == "Cái").all()

    def test_parent_signature_uses_catalog_spelling(self, base, catalog):
        variants = expand_variants(base, [color("đen", "Cầu vồng"), size_text("m")], catalog)
        df = variants_to_frame(base, variants)

        assert df.iloc[0]["variant"] == "(Đen) (M)"

    def test_without_parent(self, base, catalog):
        variants = expand_variants(base, [color("Đen")], catalog)
        df = variants_to_frame(base, variants, selling_price=99000, include_parent=False)

        assert df["product_code"].tolist() == ["ATN001-DEN"]
        assert df.iloc[0]["selling_price"] == 99000

    def test_placeholder_fields(self, base):
        bare = BaseProduct(code="N1", name="Áo")

        assert placeholder_fields(bare, purchase_price=80000) == ("stock_quantity", "selling_price")
        assert placeholder_fields(bare) == ("stock_quantity", "purchase_price", "selling_price")
        assert placeholder_fields(base) == ("stock_quantity", "purchase_price")
        assert placeholder_fields(base, 80000, 99000) == ("stock_quantity",)


class TestBaseProductFromRow:
    def test_from_row(self):
        base = BaseProduct.from_row(
            {"product_code": " n0048 ", "product_name": "Áo", "selling_price": 120000}
        )
        assert base.code == "N0048"
        assert base.name == "Áo"
        assert base.list_price == 120000

    def test_from_row_missing_price(self):
        base = BaseProduct.from_row({"product_code": "N1", "product_name": "Áo"})
        assert base.list_price == 0
