# -*- coding: utf-8 -*-
"""Tests for src/variants/compare.py."""

from src.catalog.attributes import COLOR_ID, SIZE_TEXT_ID, load_default_catalog
from src.variants.compare import compare_variants, value_id_signature
from src.variants.expander import expand_variants
from src.variants.models import AttributeLine, BaseProduct, GeneratedVariant


def generate(colors, sizes):
    return expand_variants(
        BaseProduct("ATN001", "Áo thun"),
        [AttributeLine(COLOR_ID, "Màu", colors), AttributeLine(SIZE_TEXT_ID, "Size Chữ", sizes)],
        load_default_catalog(),
    )


class TestValueIdSignature:
    def test_order_independent(self):
        catalog = load_default_catalog()
        black = catalog.find_value(COLOR_ID, "Đen")
        medium = catalog.find_value(SIZE_TEXT_ID, "M")

        a = GeneratedVariant("A", "a", [black, medium], [])
        b = GeneratedVariant("B", "b", [medium, black], [])
        assert value_id_signature(a) == value_id_signature(b) == "4,101"

    def test_no_values(self):
        assert value_id_signature(GeneratedVariant("A", "a", [], [])) == ""


class TestCompareVariants:
    """Test matching expected variants against stored ones."""

    def test_in_sync(self):
        result = compare_variants(generate(["Đen"], ["M", "L"]), generate(["Đen"], ["M", "L"]))
        assert len(result.matches) == 2
        assert result.is_in_sync

    def test_missing_and_extra(self):
        expected = generate(["Đen", "Trắng"], ["M"])
        actual = generate(["Đen", "Đỏ"], ["M"])

        result = compare_variants(expected, actual)

        assert [m["code"] for m in result.matches] == ["ATN001-DEN-M"]
        assert [m["code"] for m in result.missing] == ["ATN001-TRANG-M"]
        assert [e["code"] for e in result.extra] == ["ATN001-DO-M"]
        assert not result.is_in_sync

    def test_matches_ignore_codes(self):
        """A re-coded variant with the same values still matches."""
        expected = generate(["Đen"], ["M"])
        actual = [
            GeneratedVariant("OLD-CODE", "Tên cũ", expected[0].attribute_values, [])
        ]
        result = compare_variants(expected, actual)
        assert result.is_in_sync
