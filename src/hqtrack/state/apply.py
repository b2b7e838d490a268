"""Execution of merge plans against a location store."""

from __future__ import annotations

import logging

from hqtrack.models import Reading
from hqtrack.state.events import MergeAction, MergePlan
from hqtrack.state.policy import decide_merge
from hqtrack.state.store import LocationStore

_logger = logging.getLogger(__name__)


async def apply_merge(store: LocationStore, reading: Reading, plan: MergePlan) -> None:
    """Run the store operation described by *plan*.

    Store errors propagate as :class:`~hqtrack.exceptions.HqStoreError`.
    """
    if plan.action == MergeAction.INSERT:
        row_id = await store.insert(reading)
        _logger.debug("Inserted location id=%d for device=%s", row_id, reading.device_id)
    elif plan.action == MergeAction.UPDATE:
        assert plan.target_id is not None
        await store.update(plan.target_id, reading.timestamp, reading.battery)
        _logger.debug("Extended location id=%d to %s", plan.target_id, reading.timestamp)
    elif plan.action == MergeAction.DELETE:
        assert plan.target_id is not None
        await store.delete(plan.target_id)
        _logger.debug("Removed redundant location id=%d for device=%s", plan.target_id, reading.device_id)
    else:
        _logger.debug("Reading for device=%s at %s already covered", reading.device_id, reading.timestamp)


async def merge_reading(store: LocationStore, reading: Reading) -> MergePlan:
    """Look up the reading's neighbours, decide, and apply the result."""
    before = await store.find_before(reading.device_id, reading.timestamp, reading.position)
    after = await store.find_after(reading.device_id, reading.timestamp, reading.position)
    plan = decide_merge(before, after)
    await apply_merge(store, reading, plan)
    return plan
