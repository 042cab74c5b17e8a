"""Cross-field validation of image size and striping parameters.

``validate`` is a pure function: the same NumericFieldSet always yields
the same ValidationResult and nothing is raised. Unparseable sizes count
as empty fields.
"""

from __future__ import annotations

from rbd_form.catalog import DEFAULT_OBJECT_SIZE
from rbd_form.schemas import NumericFieldSet, ValidationResult
from rbd_form.types import ErrorCode, FormField
from rbd_form.units import to_bytes


def parse_count(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def validate(
    fields: NumericFieldSet,
    *,
    default_object_size: str = DEFAULT_OBJECT_SIZE,
) -> ValidationResult:
    """Check size, object size, striping unit and striping count together.

    Args:
        fields: Current field values.
        default_object_size: Used when the object size is empty or malformed.

    Returns:
        ValidationResult listing only the fields that failed.
    """
    errors: dict[FormField, set[ErrorCode]] = {}

    def fail(field: FormField, code: ErrorCode) -> None:
        errors.setdefault(field, set()).add(code)

    # Data pool
    if fields.use_data_pool and fields.data_pool is None:
        fail(FormField.DATA_POOL, ErrorCode.REQUIRED)

    object_bytes = to_bytes(fields.object_size)
    if object_bytes is None:
        object_bytes = to_bytes(default_object_size) or 0

    striping_unit = to_bytes(fields.striping_unit)
    count_given = parse_count(fields.striping_count)
    count = 1 if count_given is None else count_given

    # Size
    size_bytes = to_bytes(fields.size)
    if size_bytes is None:
        fail(FormField.SIZE, ErrorCode.REQUIRED)
    elif count * object_bytes > size_bytes:
        fail(FormField.SIZE, ErrorCode.INVALID_SIZE_OBJECT)

    # Striping unit
    if striping_unit is None and count_given is not None:
        fail(FormField.STRIPING_UNIT, ErrorCode.REQUIRED)
    elif striping_unit is not None and striping_unit > object_bytes:
        fail(FormField.STRIPING_UNIT, ErrorCode.INVALID_STRIPING_UNIT)

    # Striping count
    if count_given is None and striping_unit is not None:
        fail(FormField.STRIPING_COUNT, ErrorCode.REQUIRED)
    elif count < 1:
        fail(FormField.STRIPING_COUNT, ErrorCode.MIN)

    return ValidationResult(errors={field: frozenset(codes) for field, codes in errors.items()})
