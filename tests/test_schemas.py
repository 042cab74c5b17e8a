"""Tests for rbd_form.schemas — Pydantic models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from rbd_form.schemas import (
    FeatureControl,
    FeatureDescriptor,
    FeatureSet,
    ImageResponse,
    NumericFieldSet,
    PoolInfo,
    ValidationResult,
)
from rbd_form.types import ErrorCode, FeatureState, FormField, PoolType


class TestFeatureDescriptor:
    def test_defaults(self) -> None:
        d = FeatureDescriptor(key="exclusive-lock")
        assert d.requires is None
        assert d.allow_enable is True
        assert d.allow_disable is True

    def test_frozen(self) -> None:
        d = FeatureDescriptor(key="x")
        with pytest.raises(ValidationError):
            d.key = "y"  # type: ignore[misc]

    def test_empty_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FeatureDescriptor(key="")


class TestFeatureControl:
    @pytest.mark.parametrize(
        ("value", "enabled", "state"),
        [
            (False, False, FeatureState.LOCKED_OFF),
            (False, True, FeatureState.UNLOCKED_OFF),
            (True, True, FeatureState.UNLOCKED_ON),
            (True, False, FeatureState.LOCKED_ON),
        ],
    )
    def test_state(self, value: bool, enabled: bool, state: FeatureState) -> None:
        assert FeatureControl(value=value, enabled=enabled).state == state


class TestFeatureSet:
    def test_selected_keeps_order(self) -> None:
        fs = FeatureSet(
            use_defaults=False,
            features={
                "b": FeatureControl(value=True),
                "a": FeatureControl(value=False),
                "c": FeatureControl(value=True, enabled=False),
            },
        )
        assert fs.selected() == ["b", "c"]
        assert fs.states()["c"] == FeatureState.LOCKED_ON


class TestNumericFieldSet:
    def test_blank_strings_become_none(self) -> None:
        fields = NumericFieldSet(size="  ", striping_unit="", data_pool="")
        assert fields.size is None
        assert fields.striping_unit is None
        assert fields.data_pool is None

    def test_count_int_coerced(self) -> None:
        assert NumericFieldSet(striping_count=3).striping_count == "3"

    def test_strips_whitespace(self) -> None:
        assert NumericFieldSet(size=" 8MiB ").size == "8MiB"


class TestValidationResult:
    def test_empty_is_valid(self) -> None:
        result = ValidationResult()
        assert result.is_valid
        assert result.codes(FormField.SIZE) == frozenset()

    def test_has_error_accepts_strings(self) -> None:
        result = ValidationResult(errors={FormField.SIZE: frozenset({ErrorCode.REQUIRED})})
        assert not result.is_valid
        assert result.has_error("size", "required")
        assert not result.has_error(FormField.SIZE, ErrorCode.MIN)

    def test_merge_unions_codes(self) -> None:
        a = ValidationResult(errors={FormField.SIZE: frozenset({ErrorCode.REQUIRED})})
        b = ValidationResult(
            errors={
                FormField.SIZE: frozenset({ErrorCode.INVALID_SIZE_OBJECT}),
                FormField.NAME: frozenset({ErrorCode.REQUIRED}),
            }
        )
        merged = a.merge(b)
        assert merged.codes(FormField.SIZE) == {
            ErrorCode.REQUIRED,
            ErrorCode.INVALID_SIZE_OBJECT,
        }
        assert merged.has_error(FormField.NAME, ErrorCode.REQUIRED)

    def test_as_dict(self) -> None:
        result = ValidationResult(
            errors={FormField.STRIPING_UNIT: frozenset({ErrorCode.INVALID_STRIPING_UNIT})}
        )
        assert result.as_dict() == {"striping_unit": ["invalidStripingUnit"]}


class TestPoolInfo:
    def test_flags_from_string(self) -> None:
        pool = PoolInfo(pool_name="ec", type="erasure", flags_names="hashpspool,ec_overwrites")
        assert pool.type == PoolType.ERASURE
        assert pool.flags_names == ["hashpspool", "ec_overwrites"]

    def test_application_list(self) -> None:
        pool = PoolInfo(pool_name="rbd", type="replicated", application_metadata=["rbd"])
        assert "rbd" in pool.application_metadata

    def test_unknown_type(self) -> None:
        with pytest.raises(ValidationError):
            PoolInfo(pool_name="x", type="tiered")


class TestImageResponse:
    def test_defaults(self) -> None:
        resp = ImageResponse(name="a", pool_name="rbd", size=1024, obj_size=4096)
        assert resp.features_name == []
        assert resp.stripe_count == 1
        assert resp.data_pool is None

    def test_object_size_positive(self) -> None:
        with pytest.raises(ValidationError):
            ImageResponse(name="a", pool_name="rbd", size=1024, obj_size=0)
