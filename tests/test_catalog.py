"""Tests for rbd_form.catalog — built-in table and YAML loader."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from rbd_form.catalog import (
    DEFAULT_OBJECT_SIZE,
    OBJECT_SIZES,
    default_catalog,
    descriptor_for,
    load_catalog,
)
from rbd_form.exceptions import CatalogNotFoundError, CatalogValidationError
from rbd_form.types import ImageFeature

if TYPE_CHECKING:
    from pathlib import Path


class TestDefaultCatalog:
    def test_one_descriptor_per_feature_in_order(self) -> None:
        keys = [d.key for d in default_catalog()]
        assert keys == [f.value for f in ImageFeature]

    def test_dependencies(self) -> None:
        assert descriptor_for(ImageFeature.OBJECT_MAP).requires == "exclusive-lock"
        assert descriptor_for(ImageFeature.JOURNALING).requires == "exclusive-lock"
        assert descriptor_for(ImageFeature.FAST_DIFF).requires == "object-map"
        assert descriptor_for(ImageFeature.LAYERING).requires is None

    def test_edit_policy(self) -> None:
        layering = descriptor_for(ImageFeature.LAYERING)
        assert not layering.allow_enable
        assert not layering.allow_disable
        deep_flatten = descriptor_for(ImageFeature.DEEP_FLATTEN)
        assert not deep_flatten.allow_enable
        assert deep_flatten.allow_disable

    def test_object_sizes(self) -> None:
        assert DEFAULT_OBJECT_SIZE in OBJECT_SIZES
        assert OBJECT_SIZES[0] == "4KiB"
        assert OBJECT_SIZES[-1] == "32MiB"
        assert len(OBJECT_SIZES) == 14


class TestLoadCatalog:
    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "features.yaml"
        path.write_text(
            "features:\n"
            "  - key: a\n"
            "  - key: b\n"
            "    requires: a\n"
            "    allow_disable: false\n",
            encoding="utf-8",
        )
        descriptors = load_catalog(path)
        assert [d.key for d in descriptors] == ["a", "b"]
        assert descriptors[1].requires == "a"
        assert descriptors[1].allow_disable is False

    def test_bare_list(self, tmp_path: Path) -> None:
        path = tmp_path / "features.yaml"
        path.write_text("- key: a\n", encoding="utf-8")
        assert [d.key for d in load_catalog(path)] == ["a"]

    def test_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogNotFoundError):
            load_catalog(tmp_path / "missing.yaml")

    def test_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(CatalogValidationError, match="Empty catalog"):
            load_catalog(path)

    def test_no_features(self, tmp_path: Path) -> None:
        path = tmp_path / "features.yaml"
        path.write_text("other: 1\n", encoding="utf-8")
        with pytest.raises(CatalogValidationError, match="no 'features'"):
            load_catalog(path)

    def test_bad_entry(self, tmp_path: Path) -> None:
        path = tmp_path / "features.yaml"
        path.write_text("features:\n  - key: a\n  - requires: a\n", encoding="utf-8")
        with pytest.raises(CatalogValidationError) as info:
            load_catalog(path)
        assert info.value.details["index"] == 1

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "features.yaml"
        path.write_text("features: [unclosed\n", encoding="utf-8")
        with pytest.raises(CatalogValidationError, match="Invalid YAML"):
            load_catalog(path)
