"""Pydantic-settings configuration for the RBD form engine."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rbd_form.catalog import DEFAULT_OBJECT_SIZE, default_catalog, load_catalog
from rbd_form.schemas import FeatureDescriptor
from rbd_form.units import to_bytes


class EngineSettings(BaseSettings):
    """Engine configuration.

    All values can be overridden via environment variables prefixed
    with ``RBD_FORM_``, e.g. ``RBD_FORM_DEFAULT_OBJECT_SIZE=8MiB``.
    """

    model_config = SettingsConfigDict(env_prefix="RBD_FORM_")

    default_object_size: str = Field(
        default=DEFAULT_OBJECT_SIZE,
        description="Object size assumed when the field is left empty.",
    )
    catalog_path: str = Field(
        default="",
        description="YAML feature catalog. Empty string uses the built-in catalog.",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_logs: bool = True

    @field_validator("default_object_size")
    @classmethod
    def _positive_size(cls, v: str) -> str:
        if not to_bytes(v):
            raise ValueError(f"default_object_size must be a positive size, got {v!r}")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    def descriptors(self) -> list[FeatureDescriptor]:
        """Feature descriptors from ``catalog_path``, or the built-in ones."""
        if not self.catalog_path:
            return default_catalog()
        return load_catalog(Path(self.catalog_path))
