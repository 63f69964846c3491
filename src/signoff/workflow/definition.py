"""Artifact stage sequence and required sign-off groups."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

COMPLETE = "complete"

DEFAULT_STAGES: tuple[str, ...] = (
    "prd",
    "ux",
    "architecture",
    "epics_stories",
    "readiness",
)

DEFAULT_REQUIRED_GROUPS: dict[str, tuple[str, ...]] = {
    "prd": ("ba", "design", "dev"),
    "ux": ("ba", "design"),
    "architecture": ("dev",),
    "epics_stories": ("ba", "dev"),
    "readiness": ("ba", "design", "dev"),
}


class UnknownStageError(ValueError):
    """Raised when a stage identifier is not part of the workflow."""

    def __init__(self, stage: str, valid: Iterable[str]) -> None:
        self.stage = stage
        self.valid = tuple(valid)
        super().__init__(f"Unknown stage `{stage}`. Valid stages: {', '.join(self.valid)}")


@dataclass(frozen=True)
class WorkflowDefinition:
    """Ordered artifact stages with the groups that must sign off each one."""

    stages: tuple[str, ...]
    required_groups: Mapping[str, frozenset[str]]

    def __post_init__(self) -> None:
        if not self.stages:
            raise ValueError("workflow must declare at least one stage")
        if COMPLETE in self.stages:
            raise ValueError(f"`{COMPLETE}` is reserved and cannot be used as a stage")
        if len(set(self.stages)) != len(self.stages):
            raise ValueError(f"workflow stages must be unique: {self.stages}")

        missing = [stage for stage in self.stages if stage not in self.required_groups]
        if missing:
            raise ValueError(f"no required groups declared for stages: {missing}")
        extra = sorted(set(self.required_groups) - set(self.stages))
        if extra:
            raise ValueError(f"required groups declared for unknown stages: {extra}")
        empty = [stage for stage in self.stages if not self.required_groups[stage]]
        if empty:
            raise ValueError(f"required groups must be non-empty for stages: {empty}")

    @classmethod
    def from_mapping(
        cls,
        stages: Iterable[str],
        required_groups: Mapping[str, Iterable[str]],
    ) -> WorkflowDefinition:
        return cls(
            stages=tuple(stages),
            required_groups={stage: frozenset(groups) for stage, groups in required_groups.items()},
        )

    def stage_sequence(self) -> tuple[str, ...]:
        return self.stages

    def is_stage(self, value: str) -> bool:
        return value in self.stages

    def required_groups_for(self, stage: str) -> frozenset[str]:
        if stage not in self.stages:
            raise UnknownStageError(stage, self.stages)
        return self.required_groups[stage]

    def next_stage(self, stage: str) -> str:
        """Return the stage after ``stage``, or ``COMPLETE`` after the last one."""
        if stage not in self.stages:
            raise UnknownStageError(stage, self.stages)
        index = self.stages.index(stage)
        if index == len(self.stages) - 1:
            return COMPLETE
        return self.stages[index + 1]

    def position(self, stage: str) -> int:
        """1-based position of ``stage``; a completed initiative sits at the end."""
        if stage == COMPLETE:
            return len(self.stages)
        if stage not in self.stages:
            raise UnknownStageError(stage, self.stages)
        return self.stages.index(stage) + 1

    def signoff_rules(self) -> dict[str, list[str]]:
        return {stage: sorted(self.required_groups[stage]) for stage in self.stages}


DEFAULT_WORKFLOW = WorkflowDefinition.from_mapping(DEFAULT_STAGES, DEFAULT_REQUIRED_GROUPS)
