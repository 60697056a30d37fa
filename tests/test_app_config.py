# -*- coding: utf-8 -*-
"""Tests for src/utils/app_config.py."""

from pathlib import Path

import pytest

from src.catalog.attributes import COLOR_ID
from src.utils import get_workspace_root
from src.utils.app_config import AppConfig


class TestAppConfig:
    """Test AppConfig class."""

    @pytest.fixture
    def config_path(self, tmp_path):
        """Create a test catalog.toml."""
        path = tmp_path / "catalog.toml"
        path.write_text(
            """
[dirs]
export = "out"

[codes]
width = 5
gap_threshold = 20

[variants]
code_separator = ""

[reconcile]
tracked_fields = ["selling_price"]

[live]
prediction_window_seconds = 3

[[attributes]]
id = 3
name = "Màu"
values = [{ id = 101, name = "Đen", code = "DEN" }]
""",
            encoding="utf-8",
        )
        return path

    def test_reads_sections(self, config_path):
        config = AppConfig(config_path)

        assert config.export_dir == Path("out")
        assert config.code_width == 5
        assert config.gap_threshold == 20
        assert config.code_separator == ""
        assert config.tracked_fields == ("selling_price",)
        assert config.prediction_window_seconds == 3.0

    def test_defaults_for_missing_keys(self, config_path):
        config = AppConfig(config_path)

        assert config.input_dir == Path("data/00-input")
        assert config.name_separator == " - "
        assert config.size_number_letter == "A"
        assert config.timezone_offset_hours == 7
        assert config.morning_cutoff_minutes == 750

    def test_catalog_from_config(self, config_path):
        catalog = AppConfig(config_path).catalog()
        assert len(catalog) == 1
        assert catalog.find_value(COLOR_ID, "đen").code == "DEN"

    def test_catalog_falls_back_to_default(self, tmp_path):
        path = tmp_path / "catalog.toml"
        path.write_text("[codes]\nwidth = 4\n", encoding="utf-8")

        assert len(AppConfig(path).catalog()) == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig(tmp_path / "missing.toml")

    def test_repository_config(self):
        """The catalog.toml shipped at the repository root loads."""
        config = AppConfig()
        assert config.config_path == get_workspace_root() / "catalog.toml"
        assert config.code_width == 4
        assert len(config.catalog()) == 3
