"""Form state for one create or edit session of an RBD image.

ImageForm holds the raw field values, owns the session's FeatureGraph,
and turns a valid form into a create or edit request. Network calls
(pool listing, fetching the image, submitting) stay with the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rbd_form.exceptions import (
    BaselineAlreadySetError,
    FieldLockedError,
    FormError,
    FormValidationError,
    error_context,
)
from rbd_form.features import FeatureGraph
from rbd_form.observability import StructuredLogger
from rbd_form.pools import exclude_pool, select_pools
from rbd_form.schemas import (
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
from rbd_form.types import EDIT_LOCKED_FIELDS, ErrorCode, FormField, FormMode
from rbd_form.units import from_bytes, parse_bytes, to_bytes
from rbd_form.validation import parse_count, validate

if TYPE_CHECKING:
    from collections.abc import Iterable

    from rbd_form.schemas import FeatureDescriptor


class ImageForm:
    """Create/edit session for an RBD image."""

    def __init__(
        self,
        mode: FormMode | str = FormMode.CREATE,
        *,
        descriptors: Iterable[FeatureDescriptor] | None = None,
        settings: EngineSettings | None = None,
    ) -> None:
        self._settings = settings or EngineSettings()
        self._mode = FormMode(mode)
        with error_context(mode=str(self._mode)):
            self.graph = FeatureGraph(
                self._settings.descriptors() if descriptors is None else descriptors
            )

        self._values: dict[FormField, Any] = {
            FormField.NAME: None,
            FormField.POOL: None,
            FormField.USE_DATA_POOL: False,
            FormField.DATA_POOL: None,
            FormField.SIZE: None,
            FormField.OBJECT_SIZE: self._settings.default_object_size,
            FormField.STRIPING_UNIT: None,
            FormField.STRIPING_COUNT: None,
        }
        self._response: ImageResponse | None = None
        self._all_pools: list[PoolInfo] = []
        self._all_data_pools: list[PoolInfo] = []
        self._pools: list[PoolInfo] = []
        self._data_pools: list[PoolInfo] = []

        self._log = StructuredLogger(__name__, session=str(self._mode))
        self._log.info("Form session started", event="session.created")

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def mode(self) -> FormMode:
        return self._mode

    @property
    def editing(self) -> bool:
        return self._mode == FormMode.EDIT

    @property
    def response(self) -> ImageResponse | None:
        return self._response

    def get(self, field: FormField | str) -> Any:
        return self._values[FormField(field)]

    def is_locked(self, field: FormField | str) -> bool:
        return self.editing and FormField(field) in EDIT_LOCKED_FIELDS

    @property
    def fields(self) -> NumericFieldSet:
        return NumericFieldSet(
            size=self._values[FormField.SIZE],
            object_size=self._values[FormField.OBJECT_SIZE],
            striping_unit=self._values[FormField.STRIPING_UNIT],
            striping_count=self._values[FormField.STRIPING_COUNT],
            use_data_pool=self._values[FormField.USE_DATA_POOL],
            data_pool=self._values[FormField.DATA_POOL],
        )

    @property
    def features(self) -> FeatureSet:
        return self.graph.snapshot()

    @property
    def pool_choices(self) -> list[str]:
        return [pool.pool_name for pool in self._pools]

    @property
    def data_pool_choices(self) -> list[str]:
        return [pool.pool_name for pool in self._data_pools]

    # ------------------------------------------------------------------
    # Field input
    # ------------------------------------------------------------------

    def set_field(self, field: FormField | str, value: Any) -> None:
        """Write a field as the user would. Locked fields raise in edit mode."""
        field = FormField(field)
        if self.is_locked(field):
            raise FieldLockedError(
                f"Field {field} cannot be changed on an existing image",
                details={"field": str(field)},
            )

        if field == FormField.POOL:
            self.select_pool(value)
        elif field == FormField.DATA_POOL:
            self.select_data_pool(value)
        elif field == FormField.USE_DATA_POOL:
            self.set_use_data_pool(bool(value))
        elif field == FormField.NAME:
            self._values[field] = value.strip() if isinstance(value, str) else value
        else:
            self._values[field] = value

    def select_pool(self, name: str | None) -> None:
        """Select the image pool; it can no longer be used as data pool."""
        self._values[FormField.POOL] = name
        self._data_pools = exclude_pool(self._all_data_pools, name)
        if name is not None and self._values[FormField.DATA_POOL] == name:
            self._values[FormField.DATA_POOL] = None

    def select_data_pool(self, name: str | None) -> None:
        """Select the data pool; it can no longer be used as image pool."""
        self._values[FormField.DATA_POOL] = name
        self._pools = exclude_pool(self._all_pools, name)
        if name is not None and self._values[FormField.POOL] == name:
            self._values[FormField.POOL] = None

    def set_use_data_pool(self, use_data_pool: bool) -> None:
        self._values[FormField.USE_DATA_POOL] = use_data_pool
        if not use_data_pool:
            self.select_data_pool(None)

    def set_pool_listing(self, listing: Iterable[PoolInfo | dict[str, Any]]) -> None:
        """Populate pool choices from the cluster's pool listing.

        When exactly one pool is eligible and none is selected yet, it is
        selected automatically.
        """
        pools, data_pools = select_pools(listing)
        self._all_pools, self._all_data_pools = pools, data_pools
        self._pools = exclude_pool(pools, self._values[FormField.DATA_POOL])
        self._data_pools = exclude_pool(data_pools, self._values[FormField.POOL])
        if len(pools) == 1 and self._values[FormField.POOL] is None:
            self.select_pool(pools[0].pool_name)

    # ------------------------------------------------------------------
    # Features
    # ------------------------------------------------------------------

    def toggle_feature(self, key: str, checked: bool) -> ToggleResult:
        return self.graph.request_toggle(key, checked)

    def set_use_defaults(self, use_defaults: bool) -> FeatureSet:
        return self.graph.set_defaults_mode(use_defaults)

    # ------------------------------------------------------------------
    # Edit sessions
    # ------------------------------------------------------------------

    def load_response(self, response: ImageResponse | dict[str, Any]) -> None:
        """Fill the form from an existing image and capture its baseline."""
        if not self.editing:
            raise FormError("Only edit sessions can load an existing image")
        if self._response is not None:
            raise BaselineAlreadySetError("Image representation already loaded")

        if not isinstance(response, ImageResponse):
            response = ImageResponse.model_validate(response)

        self._values[FormField.NAME] = response.name
        self._values[FormField.POOL] = response.pool_name
        if response.data_pool:
            self._values[FormField.USE_DATA_POOL] = True
            self._values[FormField.DATA_POOL] = response.data_pool
        self._values[FormField.SIZE] = from_bytes(response.size, exact=True)
        self._values[FormField.OBJECT_SIZE] = from_bytes(response.obj_size, exact=True)
        self._values[FormField.STRIPING_UNIT] = from_bytes(response.stripe_unit, exact=True)
        self._values[FormField.STRIPING_COUNT] = str(response.stripe_count)

        self.graph.set_baseline(response.features_name)
        self._response = response
        self._log.info(
            "Loaded existing image",
            event="response.loaded",
            pool=response.pool_name,
            image=response.name,
            features=response.features_name,
        )

    # ------------------------------------------------------------------
    # Validation & requests
    # ------------------------------------------------------------------

    def validate(self) -> ValidationResult:
        """Run the cross-field rules plus the per-field required checks.

        Fields that are read-only in edit mode never report errors.
        """
        errors: dict[FormField, frozenset[ErrorCode]] = {}
        if not self._values[FormField.NAME]:
            errors[FormField.NAME] = frozenset({ErrorCode.REQUIRED})
        if not self._values[FormField.POOL]:
            errors[FormField.POOL] = frozenset({ErrorCode.REQUIRED})

        result = ValidationResult(errors=errors).merge(
            validate(self.fields, default_object_size=self._settings.default_object_size)
        )
        if self.editing:
            result = ValidationResult(
                errors={f: c for f, c in result.errors.items() if f not in EDIT_LOCKED_FIELDS}
            )
        return result

    def _require_valid(self) -> None:
        result = self.validate()
        if not result.is_valid:
            raise FormValidationError(
                "Form has invalid fields: " + ", ".join(sorted(result.as_dict())),
                result=result,
            )

    def build_create_request(self) -> ImageCreateRequest:
        if self.editing:
            raise FormError("Edit sessions build edit requests")
        self._require_valid()

        count = parse_count(self._values[FormField.STRIPING_COUNT])
        # same fallback as the validator: an unusable object size means the default
        obj_size = to_bytes(self._values[FormField.OBJECT_SIZE])
        if obj_size is None:
            obj_size = parse_bytes(self._settings.default_object_size)
        request = ImageCreateRequest(
            pool_name=self._values[FormField.POOL],
            name=self._values[FormField.NAME],
            size=parse_bytes(self._values[FormField.SIZE]),
            obj_size=obj_size,
            features=self.graph.selected_features(),
            stripe_unit=to_bytes(self._values[FormField.STRIPING_UNIT]),
            stripe_count=count,
            data_pool=self._values[FormField.DATA_POOL]
            if self._values[FormField.USE_DATA_POOL]
            else None,
        )
        self._log.info(
            "Built create request",
            event="request.create",
            pool=request.pool_name,
            image=request.name,
        )
        return request

    def build_edit_request(self) -> ImageEditRequest:
        if not self.editing:
            raise FormError("Create sessions build create requests")
        if self._response is None:
            raise FormError("No image loaded for this edit session")
        self._require_valid()

        request = ImageEditRequest(
            name=self._values[FormField.NAME],
            size=parse_bytes(self._values[FormField.SIZE]),
            features=self.graph.selected_features() or [],
        )
        self._log.info(
            "Built edit request",
            event="request.edit",
            pool=self._response.pool_name,
            image=self._response.name,
        )
        return request
