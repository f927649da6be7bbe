"""Tests for the style catalog."""

from __future__ import annotations

import numpy as np
import pytest

from stylecanvas.engine.errors import UnsupportedStyle
from stylecanvas.engine.registry import StyleCatalog, StyleDescriptor, get_catalog
from tests.conftest import STYLE_IDS


def _identity(arr: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    return arr


def test_register_and_resolve():
    cat = StyleCatalog()
    desc = StyleDescriptor(id="sepia", name="Sepia", description="", fn=_identity)
    cat.register(desc)
    assert cat.resolve("sepia") is desc
    assert cat.count == 1
    assert "sepia" in cat


def test_duplicate_id_rejected():
    cat = StyleCatalog()
    cat.register(StyleDescriptor(id="sepia", name="Sepia", description="", fn=_identity))
    with pytest.raises(ValueError):
        cat.register(StyleDescriptor(id="sepia", name="Other", description="", fn=_identity))


def test_unknown_id_raises():
    with pytest.raises(UnsupportedStyle) as exc:
        StyleCatalog().resolve("cubism")
    assert exc.value.style_id == "cubism"


def test_list_follows_order_field():
    cat = StyleCatalog()
    cat.register(StyleDescriptor(id="b", name="B", description="", fn=_identity, order=1))
    cat.register(StyleDescriptor(id="a", name="A", description="", fn=_identity, order=2))
    cat.register(StyleDescriptor(id="c", name="C", description="", fn=_identity, order=0))
    assert cat.ids() == ["c", "b", "a"]


def test_builtin_catalog_has_six_styles_in_fixed_order():
    catalog = get_catalog()
    assert catalog.ids() == STYLE_IDS
    names = {s.id: s.name for s in catalog.list()}
    assert names["udnie"] == "Udnie (Cubism)"
    assert names["starry-night"] == "Starry Night"


def test_builtin_descriptors_are_immutable():
    desc = get_catalog().resolve("mosaic")
    with pytest.raises(AttributeError):
        desc.name = "Glass"  # type: ignore[misc]
