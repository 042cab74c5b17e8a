"""Feature dependency graph with cascading toggles and edit-mode policy.

Each feature may require one other feature. The graph keeps, per feature,
a value (on/off) and whether its control is enabled (user-toggleable).

Rules applied on every toggle:

- A feature cannot be turned on while its prerequisite is off.
- Turning a feature off forces every transitive dependent off and locks it.
- Turning a feature on only unlocks its direct dependents; their values
  stay under user control.
- In edit mode, once the dependency walk is done, the baseline policy
  locks features that may not be added or removed on an existing image.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rbd_form.catalog import default_catalog
from rbd_form.exceptions import (
    BaselineAlreadySetError,
    DependencyCycleError,
    DuplicateFeatureError,
    FeatureNotFoundError,
    UnknownDependencyError,
)
from rbd_form.schemas import FeatureControl, FeatureSet, ToggleResult
from rbd_form.types import FeatureState, FormMode

if TYPE_CHECKING:
    from collections.abc import Iterable

    from rbd_form.schemas import FeatureDescriptor

logger = logging.getLogger(__name__)


class FeatureGraph:
    """Runtime state of one editing session's feature controls.

    Construction validates the descriptor list and refuses malformed
    graphs (duplicate keys, unknown prerequisites, cycles).
    """

    def __init__(self, descriptors: Iterable[FeatureDescriptor]) -> None:
        self._descriptors: dict[str, FeatureDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.key in self._descriptors:
                raise DuplicateFeatureError(
                    f"Duplicate feature key: {descriptor.key}",
                    details={"key": descriptor.key},
                )
            self._descriptors[descriptor.key] = descriptor

        self._dependents: dict[str, list[str]] = {key: [] for key in self._descriptors}
        for key, descriptor in self._descriptors.items():
            if descriptor.requires is None:
                continue
            if descriptor.requires not in self._descriptors:
                raise UnknownDependencyError(
                    f"Feature {key!r} requires unknown feature {descriptor.requires!r}",
                    key=key,
                    requires=descriptor.requires,
                )
            self._dependents[descriptor.requires].append(key)

        self._check_acyclic()
        self._order = self._topological_order()

        self._values: dict[str, bool] = dict.fromkeys(self._descriptors, False)
        self._enabled: dict[str, bool] = {
            key: descriptor.requires is None for key, descriptor in self._descriptors.items()
        }
        self._use_defaults = True
        self._baseline: frozenset[str] | None = None

    # ------------------------------------------------------------------
    # Construction checks
    # ------------------------------------------------------------------

    def _check_acyclic(self) -> None:
        acyclic: set[str] = set()
        for start in self._descriptors:
            path: list[str] = []
            key: str | None = start
            while key is not None and key not in acyclic:
                if key in path:
                    cycle = [*path[path.index(key) :], key]
                    raise DependencyCycleError(
                        f"Feature dependency cycle: {' -> '.join(cycle)}",
                        cycle=cycle,
                    )
                path.append(key)
                key = self._descriptors[key].requires
            acyclic.update(path)

    def _topological_order(self) -> list[str]:
        """Prerequisites before dependents, siblings in catalog order."""
        order: list[str] = []
        pending = [key for key, d in self._descriptors.items() if d.requires is None]
        while pending:
            key = pending.pop(0)
            order.append(key)
            pending.extend(self._dependents[key])
        return order

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def mode(self) -> FormMode:
        return FormMode.CREATE if self._baseline is None else FormMode.EDIT

    @property
    def use_defaults(self) -> bool:
        return self._use_defaults

    @property
    def baseline(self) -> frozenset[str] | None:
        return self._baseline

    @property
    def keys(self) -> list[str]:
        return list(self._descriptors)

    def descriptor(self, key: str) -> FeatureDescriptor:
        try:
            return self._descriptors[key]
        except KeyError:
            raise FeatureNotFoundError(f"Unknown feature: {key}", details={"key": key}) from None

    def dependents(self, key: str) -> list[str]:
        """Direct dependents of *key*."""
        self.descriptor(key)
        return list(self._dependents[key])

    def state_of(self, key: str) -> FeatureState:
        self.descriptor(key)
        return FeatureControl(value=self._values[key], enabled=self._enabled[key]).state

    def snapshot(self) -> FeatureSet:
        return FeatureSet(
            use_defaults=self._use_defaults,
            features={
                key: FeatureControl(value=self._values[key], enabled=self._enabled[key])
                for key in self._descriptors
            },
        )

    def selected_features(self) -> list[str] | None:
        """Features to request explicitly, or None when platform defaults apply."""
        if self._use_defaults:
            return None
        return [key for key in self._descriptors if self._values[key]]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def request_toggle(self, key: str, checked: bool) -> ToggleResult:
        """Apply a user toggle and report what changed."""
        key = str(key)
        descriptor = self.descriptor(key)
        before = self.snapshot()

        if self._use_defaults:
            logger.debug("Ignoring toggle of %s: default features in use", key)
            accepted = False
        elif checked and descriptor.requires and not self._values[descriptor.requires]:
            logger.debug("Rejecting %s: prerequisite %s is off", key, descriptor.requires)
            self._values[key] = False
            accepted = False
        elif not self._enabled[key]:
            logger.debug("Ignoring toggle of locked feature %s", key)
            accepted = False
        else:
            self._values[key] = checked
            self.cascade(key, checked)
            self.apply_edit_policy()
            accepted = True

        return self._result(key, checked, accepted, before)

    def cascade(self, key: str, checked: bool, _visited: set[str] | None = None) -> None:
        """Propagate a value change of *key* to its dependents.

        Enabling unlocks direct dependents only. Disabling forces every
        transitive dependent off and locks it.
        """
        visited = {key} if _visited is None else _visited
        for dependent in self._dependents[key]:
            if dependent in visited:
                raise DependencyCycleError(
                    f"Cascade revisited {dependent!r} from {key!r}",
                    cycle=[key, dependent],
                )
            visited.add(dependent)
            if checked:
                self._enabled[dependent] = True
                continue
            if self._values[dependent]:
                logger.debug("Cascade: %s off because %s is off", dependent, key)
            self._values[dependent] = False
            self._enabled[dependent] = False
            self.cascade(dependent, False, visited)

    def apply_edit_policy(self) -> None:
        """Lock controls the baseline policy forbids changing.

        A feature already on the image with ``allow_disable`` false is
        pinned: it is locked, and so is every prerequisite above it, so a
        cascade can never turn it off. A feature missing from the image
        with ``allow_enable`` false is locked where it is.
        """
        if self._baseline is None:
            return

        for key in self._order:
            if not self._enabled[key]:
                continue
            descriptor = self._descriptors[key]
            present = key in self._baseline
            if (present and not descriptor.allow_disable) or (
                not present and not descriptor.allow_enable
            ):
                logger.debug("Edit policy locks %s", key)
                self._enabled[key] = False

        for key in self._order:
            descriptor = self._descriptors[key]
            if key not in self._baseline or descriptor.allow_disable or not self._values[key]:
                continue
            parent = descriptor.requires
            while parent is not None:
                self._enabled[parent] = False
                parent = self._descriptors[parent].requires

    def set_baseline(self, present_keys: Iterable[str]) -> FeatureSet:
        """Record the features of the image being edited and enter edit mode.

        May be called once per session. Unknown keys are ignored.
        """
        if self._baseline is not None:
            raise BaselineAlreadySetError("Baseline snapshot is already set")

        present = {str(key) for key in present_keys}
        unknown = sorted(present - self._descriptors.keys())
        if unknown:
            logger.warning("Ignoring unmanaged features in baseline: %s", ", ".join(unknown))
        self._baseline = frozenset(present & self._descriptors.keys())
        self._use_defaults = False

        for key in self._order:
            requires = self._descriptors[key].requires
            prerequisite_on = requires is None or self._values[requires]
            self._values[key] = key in self._baseline and prerequisite_on

        self._sync_locks()
        return self.snapshot()

    def set_defaults_mode(self, use_defaults: bool) -> FeatureSet:
        """Switch between platform default features and explicit selection.

        Stored values are kept either way; leaving defaults mode recomputes
        the locks from them.
        """
        self._use_defaults = use_defaults
        if not use_defaults:
            self._sync_locks()
        return self.snapshot()

    def _sync_locks(self) -> None:
        for key in self._order:
            requires = self._descriptors[key].requires
            self._enabled[key] = requires is None or self._values[requires]
        self.apply_edit_policy()

    def _result(
        self, key: str, checked: bool, accepted: bool, before: FeatureSet
    ) -> ToggleResult:
        after = self.snapshot()
        value_changes = [
            k for k in sorted(after.features)
            if after.features[k].value != before.features[k].value
        ]
        lock_changes = [
            k for k in sorted(after.features)
            if after.features[k].enabled != before.features[k].enabled
        ]
        return ToggleResult(
            key=key,
            requested=checked,
            accepted=accepted,
            features=after,
            value_changes=value_changes,
            lock_changes=lock_changes,
        )


# =============================================================================
# Functional interface
# =============================================================================


def init_feature_graph(descriptors: Iterable[FeatureDescriptor] | None = None) -> FeatureGraph:
    """Build a FeatureGraph, using the built-in catalog when none is given."""
    return FeatureGraph(default_catalog() if descriptors is None else descriptors)


def request_toggle(handle: FeatureGraph, key: str, checked: bool) -> ToggleResult:
    return handle.request_toggle(key, checked)


def set_baseline(handle: FeatureGraph, present_keys: Iterable[str]) -> FeatureSet:
    return handle.set_baseline(present_keys)
