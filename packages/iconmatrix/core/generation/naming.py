"""Canonical component naming."""

from __future__ import annotations

COMPONENT_PREFIX = "Icon"


def capitalize(value: str) -> str:
    """Uppercase the first character and lowercase the rest."""
    return value[:1].upper() + value[1:].lower()


def size_suffix(width: int, height: int) -> str:
    """``"24"`` for square icons, ``"24x16"`` otherwise."""
    if width == height:
        return f"{width}"
    return f"{width}x{height}"


def component_name(category: str, name: str, width: int, height: int) -> str:
    """Build the canonical name used for display and deduplication.

    Example:
        >>> component_name("arrows", "CHEVRON", 24, 24)
        'Icon / Arrows / Chevron24'
    """
    return (
        f"{COMPONENT_PREFIX} / {capitalize(category)} / "
        f"{capitalize(name)}{size_suffix(width, height)}"
    )


def variant_name(theme: str, state: str) -> str:
    """Variant property string given to each leaf component."""
    return f"theme={theme}, state={state}"


def fallback_name(component: str, leaf_name: str) -> str:
    """Name for a leaf left ungrouped after a grouping failure."""
    return f"{component} / {leaf_name}"
