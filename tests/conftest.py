"""Shared test fixtures."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from typing import Any

import pytest
from click.testing import CliRunner

from rbd_form.features import FeatureGraph, init_feature_graph
from rbd_form.schemas import ImageResponse
from rbd_form.settings import EngineSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep RBD_FORM_* variables from the host out of the tests."""
    for key in list(os.environ):
        if key.startswith("RBD_FORM_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    """CLI runs attach a handler to the package logger; drop it afterwards."""
    logger = logging.getLogger("rbd_form")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def graph() -> FeatureGraph:
    """Default catalog with explicit feature selection (defaults off)."""
    g = init_feature_graph()
    g.set_defaults_mode(False)
    return g


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings()


@pytest.fixture
def runner() -> CliRunner:
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def pool_listing() -> list[dict[str, Any]]:
    return [
        {
            "pool_name": "rbd",
            "type": "replicated",
            "flags_names": "hashpspool",
            "application_metadata": {"rbd": {}},
        },
        {
            "pool_name": "ec",
            "type": "erasure",
            "flags_names": "hashpspool,ec_overwrites",
            "application_metadata": {"rbd": {}},
        },
        {
            "pool_name": "ec-no-overwrites",
            "type": "erasure",
            "flags_names": "hashpspool",
            "application_metadata": {"rbd": {}},
        },
        {
            "pool_name": "cephfs_data",
            "type": "replicated",
            "flags_names": "hashpspool",
            "application_metadata": {"cephfs": {}},
        },
    ]


@pytest.fixture
def image_response() -> ImageResponse:
    return ImageResponse(
        name="disk1",
        pool_name="rbd",
        size=10 * 1024**3,
        obj_size=4 * 1024**2,
        features_name=["layering", "exclusive-lock", "object-map", "fast-diff"],
        stripe_unit=4 * 1024**2,
        stripe_count=1,
    )
