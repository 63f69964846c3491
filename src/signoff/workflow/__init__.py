"""Initiative workflow: stage definition, lifecycle manager and results."""

from signoff.workflow.definition import (
    COMPLETE,
    DEFAULT_WORKFLOW,
    UnknownStageError,
    WorkflowDefinition,
)
from signoff.workflow.lifecycle import LifecycleManager
from signoff.workflow.types import GovernanceRecord, GroupLeads, HistoryRecord, Initiative

__all__ = [
    "COMPLETE",
    "DEFAULT_WORKFLOW",
    "GovernanceRecord",
    "GroupLeads",
    "HistoryRecord",
    "Initiative",
    "LifecycleManager",
    "UnknownStageError",
    "WorkflowDefinition",
]
