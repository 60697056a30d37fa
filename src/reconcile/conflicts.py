# -*- coding: utf-8 -*-
"""Detect and resolve conflicts between regenerated variants and the catalog.

When variants are regenerated for a base product, some target codes already
exist in the catalog. Their stored fields may have been edited by hand (a
corrected stock count, a new barcode), so nothing is overwritten
automatically: each differing field is shown to a person, who picks which
ones to update.

Workflow:
    conflicts = find_conflicts(generated_df, catalog_df)
    selection = default_selection(conflicts)        # everything ticked
    selection["N0048-DEN-M"].discard("stock_quantity")
    updates = resolve_updates(conflicts, selection)  # write these only
"""

import logging
import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

import pandas as pd

logger = logging.getLogger(__name__)

TRACKED_FIELDS = (
    "selling_price",
    "purchase_price",
    "barcode",
    "stock_quantity",
    "product_name",
    "variant",
)

FIELD_LABELS = {
    "selling_price": "Giá bán",
    "purchase_price": "Giá nhập",
    "barcode": "Mã vạch",
    "stock_quantity": "Tồn kho",
    "product_name": "Tên sản phẩm",
    "variant": "Biến thể",
}

PRICE_FIELDS = {"selling_price", "purchase_price"}


@dataclass
class Conflict:
    """Differences between a stored row and its regenerated version."""

    product_code: str
    variant_name: str
    old_fields: Dict[str, Any]
    new_fields: Dict[str, Any]
    diff_fields: List[str] = field(default_factory=list)


@dataclass
class ResolvedUpdate:
    """Fields a person accepted for one product code."""

    product_code: str
    fields_to_update: List[str]
    values: Dict[str, Any]


NUMERIC_FIELDS = PRICE_FIELDS | {"stock_quantity"}


def _normalize(value: Any, numeric: bool = False) -> Any:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, numbers.Real):
        if math.isnan(value):
            return None
        return float(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        if numeric:
            try:
                return float(stripped)
            except ValueError:
                return stripped
        return stripped
    if pd.isna(value):
        return None
    return value


def values_differ(old: Any, new: Any, numeric: bool = False) -> bool:
    """Compare two field values ignoring representation noise.

    None, NaN and "" are equal; surrounding whitespace is ignored. For
    numeric fields 100000, 100000.0 and "100000" are equal.
    """
    return _normalize(old, numeric) != _normalize(new, numeric)


def diff_fields(
    existing: Mapping[str, Any],
    incoming: Mapping[str, Any],
    tracked_fields: Iterable[str] = TRACKED_FIELDS,
) -> Optional[Conflict]:
    """Compare a stored row with its regenerated version.

    Only tracked fields present in `incoming` are compared.

    Returns:
        Conflict listing exactly the differing fields, or None if they agree.
    """
    differing = []
    for name in tracked_fields:
        if name not in incoming:
            continue
        if values_differ(
            existing.get(name), incoming.get(name), numeric=name in NUMERIC_FIELDS
        ):
            differing.append(name)

    if not differing:
        return None

    product_code = str(incoming.get("product_code") or existing.get("product_code") or "")
    variant_name = str(incoming.get("variant") or existing.get("variant") or "")

    return Conflict(
        product_code=product_code,
        variant_name=variant_name,
        old_fields={name: existing.get(name) for name in differing},
        new_fields={name: incoming.get(name) for name in differing},
        diff_fields=differing,
    )


def apply_resolution(conflict: Conflict, accepted_fields: Iterable[str]) -> Dict[str, Any]:
    """Fields to write for one conflict.

    Fields not accepted (or not part of the conflict) are left out, so the
    stored values stay untouched. An empty dict means no write.
    """
    accepted = set(accepted_fields)
    return {
        name: conflict.new_fields[name]
        for name in conflict.diff_fields
        if name in accepted
    }


def default_selection(conflicts: List[Conflict]) -> Dict[str, Set[str]]:
    """Pre-select every differing field of every conflict."""
    return {conflict.product_code: set(conflict.diff_fields) for conflict in conflicts}


def resolve_updates(
    conflicts: List[Conflict], selection: Mapping[str, Iterable[str]]
) -> List[ResolvedUpdate]:
    """Turn a per-variant field selection into updates.

    Variants missing from `selection` or with nothing accepted are skipped.
    """
    updates = []
    for conflict in conflicts:
        accepted = selection.get(conflict.product_code)
        if not accepted:
            continue
        values = apply_resolution(conflict, accepted)
        if not values:
            continue
        updates.append(
            ResolvedUpdate(
                product_code=conflict.product_code,
                fields_to_update=list(values.keys()),
                values=values,
            )
        )

    skipped = len(conflicts) - len(updates)
    logger.info(f"Resolved {len(updates)} variant updates, {skipped} skipped")
    return updates


def find_conflicts(
    generated: pd.DataFrame,
    catalog: pd.DataFrame,
    tracked_fields: Iterable[str] = TRACKED_FIELDS,
    exclude: Iterable[str] = (),
) -> List[Conflict]:
    """Conflicts between generated product rows and stored catalog rows.

    Args:
        generated: Rows about to be written (e.g., from variants_to_frame()).
        catalog: Stored rows sharing the same base code.
        tracked_fields: Fields to compare.
        exclude: Generated columns holding defaults rather than new values
            (e.g. a stock count of 0 for freshly generated rows).

    Returns:
        One Conflict per generated code that exists in the catalog with
        different tracked values, in generated-row order.
    """
    if generated.empty or catalog.empty:
        return []

    for df_name, df in (("generated", generated), ("catalog", catalog)):
        if "product_code" not in df.columns:
            raise ValueError(f"{df_name} rows have no product_code column")

    excluded = set(exclude)
    tracked = [
        name
        for name in tracked_fields
        if name in generated.columns and name not in excluded
    ]

    stored = catalog.copy()
    stored["product_code"] = stored["product_code"].astype(str).str.strip().str.upper()
    stored = stored.drop_duplicates(subset="product_code", keep="last")
    stored_by_code = stored.set_index("product_code")

    conflicts = []
    for _, row in generated.iterrows():
        code = str(row["product_code"]).strip().upper()
        if code not in stored_by_code.index:
            continue

        existing = stored_by_code.loc[code].to_dict()
        existing["product_code"] = code
        incoming = {name: row[name] for name in tracked}
        incoming["product_code"] = code

        conflict = diff_fields(existing, incoming, tracked)
        if conflict is not None:
            conflicts.append(conflict)

    logger.info(
        f"Found {len(conflicts)} conflicts among {len(generated)} generated rows"
    )
    return conflicts


def format_field_value(field_name: str, value: Any) -> str:
    """Render a field value for review ("120.000₫" for prices)."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "-"

    if field_name in PRICE_FIELDS:
        try:
            amount = float(value)
        except (TypeError, ValueError):
            return str(value)
        return f"{amount:,.0f}".replace(",", ".") + "₫"

    if field_name == "stock_quantity":
        try:
            return str(int(float(value)))
        except (TypeError, ValueError):
            return str(value)

    return str(value)


def conflicts_to_frame(conflicts: List[Conflict]) -> pd.DataFrame:
    """One row per (product code, differing field) for review exports."""
    rows = []
    for conflict in conflicts:
        for name in conflict.diff_fields:
            rows.append(
                {
                    "product_code": conflict.product_code,
                    "variant": conflict.variant_name,
                    "field": FIELD_LABELS.get(name, name),
                    "old_value": format_field_value(name, conflict.old_fields.get(name)),
                    "new_value": format_field_value(name, conflict.new_fields.get(name)),
                }
            )
    return pd.DataFrame(
        rows, columns=["product_code", "variant", "field", "old_value", "new_value"]
    )
