"""Tests for canonical component naming."""

from __future__ import annotations

import pytest

from iconmatrix.core.generation.naming import (
    capitalize,
    component_name,
    fallback_name,
    size_suffix,
    variant_name,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("arrows", "Arrows"),
        ("ARROWS", "Arrows"),
        ("aRRows", "Arrows"),
        ("", ""),
        ("x", "X"),
    ],
)
def test_capitalize(value, expected):
    assert capitalize(value) == expected


def test_size_suffix_square():
    assert size_suffix(24, 24) == "24"


def test_size_suffix_rectangular():
    assert size_suffix(24, 16) == "24x16"


def test_component_name_square():
    assert component_name("arrows", "chevron", 24, 24) == "Icon / Arrows / Chevron24"


def test_component_name_rectangular():
    assert component_name("MEDIA", "play", 32, 16) == "Icon / Media / Play32x16"


def test_variant_name():
    assert variant_name("dark", "red") == "theme=dark, state=red"


def test_fallback_name():
    leaf = variant_name("light", "default")
    assert fallback_name("Icon / A / B24", leaf) == "Icon / A / B24 / theme=light, state=default"
