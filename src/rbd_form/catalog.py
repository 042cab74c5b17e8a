"""Feature catalog: the default descriptor table and a YAML loader.

The built-in catalog mirrors the features Ceph exposes for RBD images.
Alternate catalogs can be loaded from YAML::

    features:
      - key: exclusive-lock
      - key: object-map
        requires: exclusive-lock
        allow_disable: false
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import yaml
from pydantic import ValidationError

from rbd_form.exceptions import CatalogNotFoundError, CatalogValidationError
from rbd_form.schemas import FeatureDescriptor
from rbd_form.types import ImageFeature

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_OBJECT_SIZE = "4MiB"

OBJECT_SIZES: tuple[str, ...] = (
    "4KiB",
    "8KiB",
    "16KiB",
    "32KiB",
    "64KiB",
    "128KiB",
    "256KiB",
    "512KiB",
    "1MiB",
    "2MiB",
    "4MiB",
    "8MiB",
    "16MiB",
    "32MiB",
)

# One entry per ImageFeature, in display order.
_DEFAULT_TABLE: dict[ImageFeature, FeatureDescriptor] = {
    ImageFeature.DEEP_FLATTEN: FeatureDescriptor(
        key=ImageFeature.DEEP_FLATTEN,
        allow_enable=False,
        allow_disable=True,
        description="Deep flatten",
    ),
    ImageFeature.LAYERING: FeatureDescriptor(
        key=ImageFeature.LAYERING,
        allow_enable=False,
        allow_disable=False,
        description="Layering",
    ),
    ImageFeature.EXCLUSIVE_LOCK: FeatureDescriptor(
        key=ImageFeature.EXCLUSIVE_LOCK,
        description="Exclusive lock",
    ),
    ImageFeature.OBJECT_MAP: FeatureDescriptor(
        key=ImageFeature.OBJECT_MAP,
        requires=ImageFeature.EXCLUSIVE_LOCK,
        description="Object map (requires exclusive-lock)",
    ),
    ImageFeature.JOURNALING: FeatureDescriptor(
        key=ImageFeature.JOURNALING,
        requires=ImageFeature.EXCLUSIVE_LOCK,
        description="Journaling (requires exclusive-lock)",
    ),
    ImageFeature.FAST_DIFF: FeatureDescriptor(
        key=ImageFeature.FAST_DIFF,
        requires=ImageFeature.OBJECT_MAP,
        description="Fast diff (requires object-map)",
    ),
}


def default_catalog() -> list[FeatureDescriptor]:
    """Descriptors for every ImageFeature, in display order."""
    return [_DEFAULT_TABLE[feature] for feature in ImageFeature]


def descriptor_for(feature: ImageFeature) -> FeatureDescriptor:
    return _DEFAULT_TABLE[feature]


def load_catalog(path: Path) -> list[FeatureDescriptor]:
    """Load and validate a feature catalog from YAML.

    Only the entries are validated here; the dependency graph itself is
    checked when a FeatureGraph is built from them.

    Raises:
        CatalogNotFoundError: If *path* does not exist.
        CatalogValidationError: If the document or an entry is malformed.
    """
    if not path.exists():
        raise CatalogNotFoundError(f"Catalog not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise CatalogValidationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        raise CatalogValidationError(f"Empty catalog file: {path}")

    entries = data.get("features") if isinstance(data, dict) else data
    if not isinstance(entries, list) or not entries:
        raise CatalogValidationError(f"Catalog at {path} has no 'features' list")

    descriptors: list[FeatureDescriptor] = []
    for index, entry in enumerate(entries):
        try:
            descriptors.append(FeatureDescriptor.model_validate(entry))
        except ValidationError as e:
            raise CatalogValidationError(
                f"Invalid feature #{index} in {path}: {e}",
                details={"index": index},
            ) from e

    logger.debug("Loaded %d feature descriptors from %s", len(descriptors), path)
    return descriptors
