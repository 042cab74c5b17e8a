"""Exception hierarchy for the RBD form engine.

All exceptions inherit from RbdFormError so callers can catch
engine-level errors with a single except clause. Validation problems
are never raised: they are reported as a ValidationResult.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Generator

    from rbd_form.schemas import ValidationResult


class RbdFormError(Exception):
    """Base exception for all RBD form engine errors."""

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


# =============================================================================
# Config Errors
# =============================================================================


class ConfigError(RbdFormError):
    """Base for configuration errors. Fatal at construction time."""


class FeatureGraphError(ConfigError):
    """Base for malformed feature dependency graphs."""


class DuplicateFeatureError(FeatureGraphError):
    """Raised when two descriptors share the same key."""


class UnknownDependencyError(FeatureGraphError):
    """Raised when a descriptor requires a feature that does not exist."""

    def __init__(
        self,
        message: str = "",
        *,
        key: str = "",
        requires: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.key = key
        self.requires = requires
        super().__init__(message, details=details)


class DependencyCycleError(FeatureGraphError):
    """Raised when the requires relation loops back on itself."""

    def __init__(
        self,
        message: str = "",
        *,
        cycle: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.cycle = cycle or []
        super().__init__(message, details=details)


class CatalogNotFoundError(ConfigError):
    """Raised when a feature catalog file does not exist."""


class CatalogValidationError(ConfigError):
    """Raised when a feature catalog fails Pydantic validation."""


# =============================================================================
# Feature Errors
# =============================================================================


class FeatureError(RbdFormError):
    """Base for runtime feature-graph errors."""


class FeatureNotFoundError(FeatureError):
    """Raised when a toggle names a feature the graph does not know."""


class BaselineAlreadySetError(FeatureError):
    """Raised when the baseline snapshot is set a second time."""


# =============================================================================
# Form Errors
# =============================================================================


class FormError(RbdFormError):
    """Base for form-session errors."""


class FieldLockedError(FormError):
    """Raised when a read-only field is written in edit mode."""


class FormValidationError(FormError):
    """Raised when a request is built from a form that does not validate."""

    def __init__(
        self,
        message: str = "",
        *,
        result: ValidationResult | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.result = result
        super().__init__(message, details=details)


# =============================================================================
# Unit Errors
# =============================================================================


class UnitConversionError(RbdFormError):
    """Raised by strict size parsing on malformed input."""


# =============================================================================
# Error Context Manager
# =============================================================================


@contextmanager
def error_context(**context: Any) -> Generator[None, None, None]:
    """Enrich RbdFormError exceptions with contextual metadata.

    Any RbdFormError raised inside the block will have its ``details``
    dict updated with the provided key-value pairs. Other exceptions
    pass through unchanged.

    Example::

        with error_context(catalog="features.yaml"):
            raise DependencyCycleError("cycle")
        # error.details == {"catalog": "features.yaml"}
    """
    try:
        yield
    except RbdFormError as exc:
        exc.details.update(context)
        raise
