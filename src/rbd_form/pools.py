"""Pool eligibility for RBD images.

An image lives in a replicated pool tagged for the ``rbd`` application.
Its data may be placed in a separate data pool, which can also be an
erasure-coded pool provided overwrites are enabled on it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rbd_form.schemas import PoolInfo
from rbd_form.types import PoolType

if TYPE_CHECKING:
    from collections.abc import Iterable

RBD_APPLICATION = "rbd"
EC_OVERWRITES_FLAG = "ec_overwrites"


def select_pools(
    listing: Iterable[PoolInfo | dict[str, Any]],
) -> tuple[list[PoolInfo], list[PoolInfo]]:
    """Split a pool listing into (image pools, data pools)."""
    pools: list[PoolInfo] = []
    data_pools: list[PoolInfo] = []
    for raw in listing:
        pool = raw if isinstance(raw, PoolInfo) else PoolInfo.model_validate(raw)
        if RBD_APPLICATION not in pool.application_metadata:
            continue
        if pool.type == PoolType.REPLICATED:
            pools.append(pool)
            data_pools.append(pool)
        elif pool.type == PoolType.ERASURE and EC_OVERWRITES_FLAG in pool.flags_names:
            data_pools.append(pool)
    return pools, data_pools


def exclude_pool(pools: Iterable[PoolInfo], name: str | None) -> list[PoolInfo]:
    """Pools other than *name*, preserving order."""
    return [pool for pool in pools if pool.pool_name != name]
