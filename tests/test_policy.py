from __future__ import annotations

import pytest

from hqtrack.models import Neighbor
from hqtrack.state.events import MergeAction, MergePlan
from hqtrack.state.policy import decide_merge

SAME_BEFORE = Neighbor(id=1, same_position=True)
OTHER_BEFORE = Neighbor(id=1, same_position=False)
SAME_AFTER = Neighbor(id=2, same_position=True)
OTHER_AFTER = Neighbor(id=2, same_position=False)


def test_sandwiched_duplicate_deletes_before() -> None:
    assert decide_merge(SAME_BEFORE, SAME_AFTER) == MergePlan(action=MergeAction.DELETE, target_id=1)


@pytest.mark.parametrize("after", [None, OTHER_AFTER])
def test_continuing_stay_updates_before(after: Neighbor | None) -> None:
    assert decide_merge(SAME_BEFORE, after) == MergePlan(action=MergeAction.UPDATE, target_id=1)


@pytest.mark.parametrize("before", [None, OTHER_BEFORE])
def test_covered_by_later_row_is_skipped(before: Neighbor | None) -> None:
    assert decide_merge(before, SAME_AFTER) == MergePlan(action=MergeAction.SKIP)


@pytest.mark.parametrize(
    ("before", "after"),
    [(None, None), (OTHER_BEFORE, None), (None, OTHER_AFTER), (OTHER_BEFORE, OTHER_AFTER)],
)
def test_new_position_is_inserted(before: Neighbor | None, after: Neighbor | None) -> None:
    assert decide_merge(before, after) == MergePlan(action=MergeAction.INSERT)


def test_plan_requires_target_for_update() -> None:
    with pytest.raises(ValueError):
        MergePlan(action=MergeAction.UPDATE)


def test_plan_rejects_target_for_insert() -> None:
    with pytest.raises(ValueError):
        MergePlan(action=MergeAction.INSERT, target_id=3)
