"""Recursive merge of configuration fragments.

Mappings merge key by key and sequences concatenate (overlay items that
are already present are not repeated), so two components adding babel
presets both keep theirs. Scalars are replaced by the overlay.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def deep_merge(base: Any, overlay: Any) -> Any:
    """Return ``overlay`` merged onto ``base``. Neither input is mutated."""
    if overlay is None:
        return base

    if base is None:
        return overlay

    if isinstance(base, Mapping) and isinstance(overlay, Mapping):
        merged: dict[Any, Any] = dict(base)
        for key, overlay_value in overlay.items():
            if key in merged:
                merged[key] = deep_merge(merged[key], overlay_value)
            else:
                merged[key] = overlay_value
        return merged

    if isinstance(base, (list, tuple)) and isinstance(overlay, (list, tuple)):
        combined = list(base)
        for item in overlay:
            if item not in combined:
                combined.append(item)
        return combined

    return overlay
