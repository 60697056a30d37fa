# -*- coding: utf-8 -*-
"""Centralized configuration read from catalog.toml.

Holds the numbering, naming and reconciliation settings plus the attribute
catalog, so none of the modules hardcode shop conventions. Modules keep
their own defaults; the CLI reads this config and passes values through.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

import tomllib

from src.catalog.attributes import AttributeCatalog, load_default_catalog

from . import get_workspace_root

logger = logging.getLogger(__name__)


class AppConfig:
    """Settings loaded from catalog.toml.

    Usage:
        config = AppConfig()
        catalog = config.catalog()
        width = config.code_width
    """

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize AppConfig from catalog.toml.

        Args:
            config_path: Path to catalog.toml. If None, uses default location.

        Raises:
            FileNotFoundError: If config file not found.
        """
        if config_path is None:
            config_path = get_workspace_root() / "catalog.toml"

        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}. "
                "Copy catalog.toml from the repository root."
            )

        with open(config_path, "rb") as f:
            self._config = tomllib.load(f)
        self.config_path = config_path

        dirs = self._config.get("dirs", {})
        self.input_dir = Path(dirs.get("input", "data/00-input"))
        self.export_dir = Path(dirs.get("export", "data/03-export"))

        codes = self._config.get("codes", {})
        self.code_width: int = int(codes.get("width", 4))
        self.gap_threshold: int = int(codes.get("gap_threshold", 10))

        variants = self._config.get("variants", {})
        self.code_separator: str = variants.get("code_separator", "-")
        self.name_separator: str = variants.get("name_separator", " - ")
        self.size_number_letter: str = variants.get("size_number_letter", "A")

        reconcile = self._config.get("reconcile", {})
        self.tracked_fields: Tuple[str, ...] = tuple(
            reconcile.get(
                "tracked_fields",
                [
                    "selling_price",
                    "purchase_price",
                    "barcode",
                    "stock_quantity",
                    "product_name",
                    "variant",
                ],
            )
        )

        live = self._config.get("live", {})
        self.prediction_window_seconds: float = float(
            live.get("prediction_window_seconds", 5)
        )
        self.timezone_offset_hours: int = int(live.get("timezone_offset_hours", 7))
        self.morning_cutoff_minutes: int = int(live.get("morning_cutoff_minutes", 750))

        logger.debug(f"Loaded config from {config_path}")

    def catalog(self) -> AttributeCatalog:
        """Attribute catalog from `[[attributes]]`, or the bundled default."""
        attributes_config = self._config.get("attributes", [])
        if not attributes_config:
            logger.info("No [[attributes]] in config, using bundled catalog")
            return load_default_catalog()
        return AttributeCatalog.from_config(attributes_config)
