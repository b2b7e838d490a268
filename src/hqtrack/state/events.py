"""Merge outcomes.

A :class:`MergePlan` is what the decision policy hands to the executor.
Only the executor touches the store.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, model_validator


class MergeAction(StrEnum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    SKIP = "skip"


class MergePlan(BaseModel):
    """The store operation chosen for one reading.

    ``target_id`` names the existing row for ``UPDATE`` and ``DELETE``
    and is ``None`` otherwise.
    """

    model_config = ConfigDict(frozen=True)

    action: MergeAction
    target_id: int | None = None

    @model_validator(mode="after")
    def _check_target(self) -> MergePlan:
        needs_target = self.action in (MergeAction.UPDATE, MergeAction.DELETE)
        if needs_target and self.target_id is None:
            raise ValueError(f"{self.action} requires a target_id")
        if not needs_target and self.target_id is not None:
            raise ValueError(f"{self.action} takes no target_id")
        return self
