"""Domain types for initiatives and governance."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

DEFAULT_PHASE = "planning"


@dataclass(frozen=True)
class HistoryRecord:
    """One entry of an initiative's append-only history."""

    timestamp: str
    stage: str
    action: str
    required_groups: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "stage": self.stage,
            "action": self.action,
            "required_groups": list(self.required_groups),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryRecord:
        return cls(
            timestamp=str(data["timestamp"]),
            stage=str(data["stage"]),
            action=str(data["action"]),
            required_groups=tuple(data.get("required_groups") or ()),
        )


@dataclass(frozen=True)
class Initiative:
    """A tracked unit of work moving through the artifact stages."""

    key: str
    title: str
    current_stage: str
    created_at: str
    history: tuple[HistoryRecord, ...] = ()
    phase: str = DEFAULT_PHASE

    def with_transition(self, record: HistoryRecord, next_stage: str) -> Initiative:
        """Return a copy that has moved to ``next_stage`` with ``record`` appended."""
        return replace(self, current_stage=next_stage, history=(*self.history, record))


@dataclass(frozen=True)
class GroupLeads:
    """Approver identities recorded for one stakeholder group."""

    github_users: tuple[str, ...] = ()
    jira_account_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class GovernanceRecord:
    """Which approvers belong to which group, plus the ticket project."""

    groups: dict[str, GroupLeads] = field(default_factory=dict)
    jira_project_key: str = ""

    def approvers(self) -> dict[str, list[str]]:
        return {name: list(leads.github_users) for name, leads in sorted(self.groups.items())}
