"""Pydantic schemas for feature descriptors, form state, and image requests."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rbd_form.types import ErrorCode, FeatureState, FormField, PoolType

# =============================================================================
# Features
# =============================================================================


class FeatureDescriptor(BaseModel):
    """Static description of one image feature and its edit policy."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    requires: str | None = None
    allow_enable: bool = Field(
        default=True,
        description="May be turned on while editing an image that lacks it.",
    )
    allow_disable: bool = Field(
        default=True,
        description="May be turned off while editing an image that has it.",
    )
    description: str = ""


class FeatureControl(BaseModel):
    """Runtime value and interactivity of one feature control."""

    model_config = ConfigDict(frozen=True)

    value: bool = False
    enabled: bool = True

    @property
    def state(self) -> FeatureState:
        if self.enabled:
            return FeatureState.UNLOCKED_ON if self.value else FeatureState.UNLOCKED_OFF
        return FeatureState.LOCKED_ON if self.value else FeatureState.LOCKED_OFF


class FeatureSet(BaseModel):
    """Snapshot of every feature control plus the master defaults flag."""

    model_config = ConfigDict(frozen=True)

    use_defaults: bool = True
    features: dict[str, FeatureControl] = Field(default_factory=dict)

    def selected(self) -> list[str]:
        """Keys whose value is on, in catalog order."""
        return [key for key, control in self.features.items() if control.value]

    def states(self) -> dict[str, FeatureState]:
        return {key: control.state for key, control in self.features.items()}


class ToggleResult(BaseModel):
    """Outcome of a single toggle request."""

    model_config = ConfigDict(frozen=True)

    key: str
    requested: bool
    accepted: bool
    features: FeatureSet
    value_changes: list[str] = Field(default_factory=list)
    lock_changes: list[str] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.value_changes or self.lock_changes)


# =============================================================================
# Numeric Fields & Validation
# =============================================================================


class NumericFieldSet(BaseModel):
    """Field values the cross-field validator looks at.

    Sizes are display strings (``"4MiB"``). Blank strings are stored as None.
    """

    model_config = ConfigDict(frozen=True)

    size: str | None = None
    object_size: str | None = None
    striping_unit: str | None = None
    striping_count: str | None = None
    use_data_pool: bool = False
    data_pool: str | None = None

    @field_validator(
        "size", "object_size", "striping_unit", "striping_count", "data_pool", mode="before"
    )
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if v is None or isinstance(v, bool):
            return v
        if isinstance(v, int):
            return str(v)
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class ValidationResult(BaseModel):
    """Field name to the set of error codes attached to it.

    Only fields carrying at least one error appear in ``errors``.
    """

    model_config = ConfigDict(frozen=True)

    errors: dict[FormField, frozenset[ErrorCode]] = Field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def codes(self, field: FormField | str) -> frozenset[ErrorCode]:
        return self.errors.get(FormField(field), frozenset())

    def has_error(self, field: FormField | str, code: ErrorCode | str) -> bool:
        return ErrorCode(code) in self.codes(field)

    def merge(self, other: ValidationResult) -> ValidationResult:
        merged = dict(self.errors)
        for field, codes in other.errors.items():
            merged[field] = merged.get(field, frozenset()) | codes
        return ValidationResult(errors=merged)

    def as_dict(self) -> dict[str, list[str]]:
        """JSON-friendly view with sorted codes."""
        return {str(field): sorted(str(c) for c in codes) for field, codes in self.errors.items()}


# =============================================================================
# Pools
# =============================================================================


class PoolInfo(BaseModel):
    """One entry of the pool listing used to populate pool choices."""

    pool_name: str
    type: PoolType
    flags_names: list[str] = Field(default_factory=list)
    application_metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("flags_names", mode="before")
    @classmethod
    def _split_flags(cls, v: Any) -> Any:
        # The cluster reports flags as a comma-separated string.
        if isinstance(v, str):
            return [flag.strip() for flag in v.split(",") if flag.strip()]
        return v

    @field_validator("application_metadata", mode="before")
    @classmethod
    def _list_to_dict(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return {app: {} for app in v}
        return v


# =============================================================================
# Image Representation & Requests
# =============================================================================


class ImageResponse(BaseModel):
    """Fetched representation of an existing image."""

    name: str
    pool_name: str
    data_pool: str | None = None
    size: int = Field(ge=0)
    obj_size: int = Field(gt=0)
    features_name: list[str] = Field(default_factory=list)
    stripe_unit: int = Field(default=0, ge=0)
    stripe_count: int = Field(default=1, ge=0)


class ImageCreateRequest(BaseModel):
    """Payload for creating an image. ``features`` is None to use defaults."""

    pool_name: str
    name: str
    size: int
    obj_size: int
    features: list[str] | None = None
    stripe_unit: int | None = None
    stripe_count: int | None = None
    data_pool: str | None = None


class ImageEditRequest(BaseModel):
    """Payload for updating an existing image."""

    name: str
    size: int
    features: list[str] = Field(default_factory=list)
