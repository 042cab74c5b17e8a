"""RBD form engine — feature dependencies and cross-field validation for RBD images.

Core exports::

    from rbd_form import FeatureGraph, ImageForm, validate
    from rbd_form import to_bytes, from_bytes
"""

from __future__ import annotations

__version__ = "0.3.0"

# === Catalog ===
from rbd_form.catalog import (
    DEFAULT_OBJECT_SIZE,
    OBJECT_SIZES,
    default_catalog,
    load_catalog,
)

# === Exceptions ===
from rbd_form.exceptions import (
    BaselineAlreadySetError,
    CatalogNotFoundError,
    CatalogValidationError,
    ConfigError,
    DependencyCycleError,
    DuplicateFeatureError,
    FeatureError,
    FeatureGraphError,
    FeatureNotFoundError,
    FieldLockedError,
    FormError,
    FormValidationError,
    RbdFormError,
    UnitConversionError,
    UnknownDependencyError,
    error_context,
)

# === Feature graph ===
from rbd_form.features import FeatureGraph, init_feature_graph, request_toggle, set_baseline

# === Form session ===
from rbd_form.form import ImageForm

# === Schemas ===
from rbd_form.schemas import (
    FeatureControl,
    FeatureDescriptor,
    FeatureSet,
    ImageCreateRequest,
    ImageEditRequest,
    ImageResponse,
    NumericFieldSet,
    PoolInfo,
    ToggleResult,
    ValidationResult,
)
from rbd_form.settings import EngineSettings

# === Types ===
from rbd_form.types import ErrorCode, FeatureState, FormField, FormMode, ImageFeature, PoolType
from rbd_form.units import from_bytes, parse_bytes, to_bytes
from rbd_form.validation import validate

__all__ = [
    "DEFAULT_OBJECT_SIZE",
    "OBJECT_SIZES",
    "BaselineAlreadySetError",
    "CatalogNotFoundError",
    "CatalogValidationError",
    "ConfigError",
    "DependencyCycleError",
    "DuplicateFeatureError",
    "EngineSettings",
    "ErrorCode",
    "FeatureControl",
    "FeatureDescriptor",
    "FeatureError",
    "FeatureGraph",
    "FeatureGraphError",
    "FeatureNotFoundError",
    "FeatureSet",
    "FeatureState",
    "FieldLockedError",
    "FormError",
    "FormField",
    "FormMode",
    "FormValidationError",
    "ImageCreateRequest",
    "ImageEditRequest",
    "ImageFeature",
    "ImageForm",
    "ImageResponse",
    "NumericFieldSet",
    "PoolInfo",
    "PoolType",
    "RbdFormError",
    "ToggleResult",
    "UnitConversionError",
    "UnknownDependencyError",
    "ValidationResult",
    "__version__",
    "default_catalog",
    "error_context",
    "from_bytes",
    "init_feature_graph",
    "load_catalog",
    "parse_bytes",
    "request_toggle",
    "set_baseline",
    "to_bytes",
    "validate",
]
