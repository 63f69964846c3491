"""Tagged result variants returned by lifecycle operations.

Every operation returns exactly one of these dataclasses. Callers branch on
the concrete type (or the ``kind`` tag once serialized) instead of catching
exceptions, so "not found" and friends are ordinary outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar


@dataclass(frozen=True)
class _Result:
    kind: ClassVar[str] = ""
    ok: ClassVar[bool] = True

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"kind": self.kind, "ok": self.ok}
        for name, value in self.__dict__.items():
            payload[name] = _jsonable(value)
        return payload


def _jsonable(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (frozenset, set)):
        return sorted(value)
    if isinstance(value, tuple):
        return [_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    return value


# Success variants


@dataclass(frozen=True)
class InitiativeCreated(_Result):
    kind: ClassVar[str] = "initiative_created"

    key: str
    title: str
    current_stage: str
    path: Path


@dataclass(frozen=True)
class GovernanceStatus(_Result):
    kind: ClassVar[str] = "governance_status"

    configured: bool
    groups: dict[str, list[str]] = field(default_factory=dict)
    jira_project_key: str = ""


@dataclass(frozen=True)
class InitiativeStatus(_Result):
    kind: ClassVar[str] = "initiative_status"

    key: str
    title: str
    current_stage: str
    position: int
    total: int
    complete: bool
    stages: tuple[str, ...]


@dataclass(frozen=True)
class StageAdvanced(_Result):
    kind: ClassVar[str] = "stage_advanced"

    key: str
    stage: str
    artifact: Path
    required_groups: frozenset[str]
    next_stage: str
    branch: str


@dataclass(frozen=True)
class AlreadyComplete(_Result):
    kind: ClassVar[str] = "already_complete"

    key: str


@dataclass(frozen=True)
class GovernanceConfigured(_Result):
    kind: ClassVar[str] = "governance_configured"

    path: Path
    groups: dict[str, list[str]]
    jira_project_key: str


@dataclass(frozen=True)
class TicketPlan(_Result):
    kind: ClassVar[str] = "ticket_plan"

    key: str
    stage: str
    tickets: tuple[dict[str, Any], ...]


@dataclass(frozen=True)
class ProjectSelected(_Result):
    kind: ClassVar[str] = "project_selected"

    name: str
    path: Path
    has_governance: bool


@dataclass(frozen=True)
class ProjectListing(_Result):
    kind: ClassVar[str] = "project_listing"

    projects_dir: Path
    projects: tuple[dict[str, Any], ...]


# Error variants


@dataclass(frozen=True)
class AlreadyExists(_Result):
    kind: ClassVar[str] = "already_exists"
    ok: ClassVar[bool] = False

    key: str


@dataclass(frozen=True)
class NotFound(_Result):
    kind: ClassVar[str] = "not_found"
    ok: ClassVar[bool] = False

    key: str


@dataclass(frozen=True)
class GovernanceNotConfigured(_Result):
    kind: ClassVar[str] = "governance_not_configured"
    ok: ClassVar[bool] = False

    hint: str = "Configure governance with `signoff_setup_governance` first."


@dataclass(frozen=True)
class UnknownStage(_Result):
    kind: ClassVar[str] = "unknown_stage"
    ok: ClassVar[bool] = False

    stage: str
    valid_stages: tuple[str, ...]
    key: str | None = None


@dataclass(frozen=True)
class NoProjectSelected(_Result):
    kind: ClassVar[str] = "no_project_selected"
    ok: ClassVar[bool] = False

    hint: str = "Select a project with `signoff_select_project` first."


@dataclass(frozen=True)
class ProjectNotFound(_Result):
    kind: ClassVar[str] = "project_not_found"
    ok: ClassVar[bool] = False

    project: str
    searched: tuple[Path, ...]


@dataclass(frozen=True)
class InvalidArguments(_Result):
    kind: ClassVar[str] = "invalid_arguments"
    ok: ClassVar[bool] = False

    message: str


CreateResult = InitiativeCreated | AlreadyExists | GovernanceNotConfigured
StatusResult = GovernanceStatus | InitiativeStatus | NotFound | UnknownStage
AdvanceResult = StageAdvanced | AlreadyComplete | NotFound | UnknownStage
TicketPlanResult = TicketPlan | NotFound | UnknownStage
