"""Human-in-the-loop reconciliation of regenerated variants."""

from .conflicts import (
    FIELD_LABELS,
    TRACKED_FIELDS,
    Conflict,
    ResolvedUpdate,
    apply_resolution,
    conflicts_to_frame,
    default_selection,
    diff_fields,
    find_conflicts,
    format_field_value,
    resolve_updates,
    values_differ,
)

__all__ = [
    "FIELD_LABELS",
    "TRACKED_FIELDS",
    "Conflict",
    "ResolvedUpdate",
    "apply_resolution",
    "conflicts_to_frame",
    "default_selection",
    "diff_fields",
    "find_conflicts",
    "format_field_value",
    "resolve_updates",
    "values_differ",
]
