"""Deterministic merge policy.

Terminals keep re-sending their position at a fixed cadence while parked.
Storing every report would bloat the history with one row per interval, so
each stay is compacted into a single row whose ``obtained_at`` tracks the
latest report, while arrival and departure remain visible as neighbouring
rows at other positions.

This module contains *no* I/O. Position equality arrives precomputed by the
store as :attr:`Neighbor.same_position`.
"""

from __future__ import annotations

from hqtrack.models import Neighbor
from hqtrack.state.events import MergeAction, MergePlan


def _same(neighbor: Neighbor | None) -> bool:
    return neighbor is not None and neighbor.same_position


def decide_merge(before: Neighbor | None, after: Neighbor | None) -> MergePlan:
    """Pick the store operation for a new reading.

    Parameters
    ----------
    before
        Latest stored row for the device strictly older than the reading.
    after
        Earliest stored row for the device strictly newer than the reading.

    Policy (first match wins):

    1. Sandwiched between two rows at the same position: the older of the
       two is redundant, delete it and drop the reading.
    2. Continues the stay of the previous row: move that row forward.
    3. A later row already covers this position: drop the reading.
    4. Otherwise the reading starts something new: insert it.
    """
    if _same(before) and _same(after):
        assert before is not None
        return MergePlan(action=MergeAction.DELETE, target_id=before.id)
    if _same(before):
        assert before is not None
        return MergePlan(action=MergeAction.UPDATE, target_id=before.id)
    if _same(after):
        return MergePlan(action=MergeAction.SKIP)
    return MergePlan(action=MergeAction.INSERT)
