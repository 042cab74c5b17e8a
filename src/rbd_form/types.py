"""Shared type definitions, enums, and constants for the RBD form engine."""

from __future__ import annotations

from enum import StrEnum

# =============================================================================
# Image Features
# =============================================================================


class ImageFeature(StrEnum):
    """Boolean capabilities an RBD image can carry."""

    DEEP_FLATTEN = "deep-flatten"
    LAYERING = "layering"
    EXCLUSIVE_LOCK = "exclusive-lock"
    OBJECT_MAP = "object-map"
    JOURNALING = "journaling"
    FAST_DIFF = "fast-diff"


class FeatureState(StrEnum):
    """Combined value/interactivity of a single feature control."""

    LOCKED_OFF = "locked-off"
    UNLOCKED_OFF = "unlocked-off"
    UNLOCKED_ON = "unlocked-on"
    LOCKED_ON = "locked-on"


# =============================================================================
# Form
# =============================================================================


class FormMode(StrEnum):
    """Whether a session creates a new image or edits an existing one."""

    CREATE = "create"
    EDIT = "edit"


class FormField(StrEnum):
    """Form fields that can carry validation errors."""

    NAME = "name"
    POOL = "pool"
    USE_DATA_POOL = "use_data_pool"
    DATA_POOL = "data_pool"
    SIZE = "size"
    OBJECT_SIZE = "object_size"
    STRIPING_UNIT = "striping_unit"
    STRIPING_COUNT = "striping_count"


class ErrorCode(StrEnum):
    """Field-scoped validation error codes."""

    REQUIRED = "required"
    INVALID_SIZE_OBJECT = "invalidSizeObject"
    INVALID_STRIPING_UNIT = "invalidStripingUnit"
    MIN = "min"


# Fields that cannot change once the image exists.
EDIT_LOCKED_FIELDS: frozenset[FormField] = frozenset(
    {
        FormField.POOL,
        FormField.USE_DATA_POOL,
        FormField.DATA_POOL,
        FormField.OBJECT_SIZE,
        FormField.STRIPING_UNIT,
        FormField.STRIPING_COUNT,
    }
)


# =============================================================================
# Pools
# =============================================================================


class PoolType(StrEnum):
    """Ceph pool redundancy type."""

    REPLICATED = "replicated"
    ERASURE = "erasure"
