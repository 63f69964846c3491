"""Workflow definition contract tests."""

from __future__ import annotations

import pytest

from signoff.workflow.definition import (
    COMPLETE,
    DEFAULT_WORKFLOW,
    UnknownStageError,
    WorkflowDefinition,
)


def test_default_stage_order() -> None:
    assert DEFAULT_WORKFLOW.stage_sequence() == ("prd", "ux", "architecture", "epics_stories", "readiness")


@pytest.mark.parametrize(
    ("stage", "groups"),
    [
        ("prd", {"ba", "design", "dev"}),
        ("ux", {"ba", "design"}),
        ("architecture", {"dev"}),
        ("epics_stories", {"ba", "dev"}),
        ("readiness", {"ba", "design", "dev"}),
    ],
)
def test_default_required_groups(stage: str, groups: set[str]) -> None:
    assert DEFAULT_WORKFLOW.required_groups_for(stage) == frozenset(groups)


def test_required_groups_non_empty_and_stable() -> None:
    for stage in DEFAULT_WORKFLOW.stage_sequence():
        first = DEFAULT_WORKFLOW.required_groups_for(stage)
        assert first
        assert DEFAULT_WORKFLOW.required_groups_for(stage) == first


def test_next_stage_walks_every_stage_once_then_completes() -> None:
    visited = []
    stage = DEFAULT_WORKFLOW.stage_sequence()[0]
    while stage != COMPLETE:
        visited.append(stage)
        stage = DEFAULT_WORKFLOW.next_stage(stage)

    assert tuple(visited) == DEFAULT_WORKFLOW.stage_sequence()


def test_unknown_stage_raises() -> None:
    with pytest.raises(UnknownStageError) as exc_info:
        DEFAULT_WORKFLOW.required_groups_for("qa")
    assert exc_info.value.stage == "qa"
    assert "prd" in str(exc_info.value)

    with pytest.raises(UnknownStageError):
        DEFAULT_WORKFLOW.next_stage("qa")

    # The sentinel is not a stage either.
    with pytest.raises(UnknownStageError):
        DEFAULT_WORKFLOW.next_stage(COMPLETE)


def test_position_is_one_based_and_complete_sits_at_end() -> None:
    assert DEFAULT_WORKFLOW.position("prd") == 1
    assert DEFAULT_WORKFLOW.position("readiness") == 5
    assert DEFAULT_WORKFLOW.position(COMPLETE) == 5


def test_signoff_rules_are_sorted_lists() -> None:
    assert DEFAULT_WORKFLOW.signoff_rules()["ux"] == ["ba", "design"]


@pytest.mark.parametrize(
    ("stages", "groups", "message"),
    [
        ((), {}, "at least one stage"),
        (("a", "a"), {"a": ["x"]}, "unique"),
        (("a", "b"), {"a": ["x"]}, "no required groups"),
        (("a",), {"a": ["x"], "b": ["y"]}, "unknown stages"),
        (("a",), {"a": []}, "non-empty"),
        (("complete",), {"complete": ["x"]}, "reserved"),
    ],
)
def test_invalid_definitions_rejected(stages, groups, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        WorkflowDefinition.from_mapping(stages, groups)


def test_single_stage_workflow() -> None:
    workflow = WorkflowDefinition.from_mapping(["only"], {"only": ["dev"]})
    assert workflow.next_stage("only") == COMPLETE
