"""Initiative lifecycle: create, status and advance."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import AbstractContextManager
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from signoff.workflow.definition import COMPLETE, DEFAULT_WORKFLOW, WorkflowDefinition
from signoff.workflow.results import (
    AdvanceResult,
    AlreadyComplete,
    AlreadyExists,
    CreateResult,
    GovernanceNotConfigured,
    GovernanceStatus,
    InitiativeCreated,
    InitiativeStatus,
    NotFound,
    StageAdvanced,
    StatusResult,
    TicketPlan,
    TicketPlanResult,
    UnknownStage,
)
from signoff.workflow.types import GovernanceRecord, HistoryRecord, Initiative

logger = logging.getLogger(__name__)

DEFAULT_BRANCH_PREFIX = "bmad"
TICKET_ISSUE_TYPE = "Task"


class InitiativeStore(Protocol):
    def exists(self, key: str) -> bool: ...

    def load(self, key: str) -> Initiative | None: ...

    def save(self, initiative: Initiative) -> Path: ...

    def append_history(self, key: str, record: HistoryRecord) -> None: ...

    def lock(self, key: str) -> AbstractContextManager[object]:
        """Exclusive hold on one initiative, shared by every process using the store."""
        ...


class GovernanceSource(Protocol):
    def is_configured(self) -> bool: ...

    def groups_and_approvers(self) -> dict[str, list[str]]: ...

    def load(self) -> GovernanceRecord | None: ...


class ArtifactMaterializer(Protocol):
    def create(self, key: str, stage: str) -> Path: ...

    def discard(self, key: str, stage: str) -> None: ...


def utc_timestamp() -> str:
    return datetime.now(UTC).isoformat()


def ticket_description(key: str, stage: str, group: str, pr_url: str | None) -> str:
    return "\n".join(
        [
            "BMAD signoff requested (lead-only).",
            "",
            f"Initiative: {key}",
            f"Artifact: {stage.upper()}",
            f"Group: {group.upper()}",
            "",
            f"PR: {pr_url or '(pending)'}",
            "",
            "Action: Approve the PR to sign off.",
        ]
    )


class LifecycleManager:
    """Walks initiatives through the workflow stages.

    The manager holds no per-project state of its own; everything it needs
    is read from the collaborators on each call, and every read-modify-write
    for one key runs under the store's lock for that key.
    """

    def __init__(
        self,
        *,
        store: InitiativeStore,
        governance: GovernanceSource,
        artifacts: ArtifactMaterializer,
        workflow: WorkflowDefinition = DEFAULT_WORKFLOW,
        clock: Callable[[], str] = utc_timestamp,
        branch_prefix: str = DEFAULT_BRANCH_PREFIX,
    ) -> None:
        self.store = store
        self.governance = governance
        self.artifacts = artifacts
        self.workflow = workflow
        self.clock = clock
        self.branch_prefix = branch_prefix

    def create(self, key: str, title: str) -> CreateResult:
        if not self.governance.is_configured():
            logger.warning("refusing to create %s: governance not configured", key)
            return GovernanceNotConfigured()

        with self.store.lock(key):
            if self.store.exists(key):
                logger.warning("refusing to create %s: key already in use", key)
                return AlreadyExists(key=key)

            now = self.clock()
            first_stage = self.workflow.stage_sequence()[0]
            record = HistoryRecord(timestamp=now, stage=first_stage, action="Initiative created")
            initiative = Initiative(
                key=key,
                title=title,
                current_stage=first_stage,
                created_at=now,
                history=(record,),
            )
            path = self.store.save(initiative)
            self.store.append_history(key, record)

        logger.info("created initiative %s at stage %s", key, first_stage)
        return InitiativeCreated(key=key, title=title, current_stage=first_stage, path=path)

    def status(self, key: str | None = None) -> StatusResult:
        if key is None:
            configured = self.governance.is_configured()
            if not configured:
                return GovernanceStatus(configured=False)
            record = self.governance.load()
            return GovernanceStatus(
                configured=True,
                groups=self.governance.groups_and_approvers(),
                jira_project_key=record.jira_project_key if record else "",
            )

        initiative = self.store.load(key)
        if initiative is None:
            return NotFound(key=key)

        stage = initiative.current_stage
        if stage != COMPLETE and not self.workflow.is_stage(stage):
            return self._unknown_stage(key, stage)

        return InitiativeStatus(
            key=initiative.key,
            title=initiative.title,
            current_stage=stage,
            position=self.workflow.position(stage),
            total=len(self.workflow.stage_sequence()),
            complete=stage == COMPLETE,
            stages=self.workflow.stage_sequence(),
        )

    def advance(self, key: str) -> AdvanceResult:
        with self.store.lock(key):
            initiative = self.store.load(key)
            if initiative is None:
                return NotFound(key=key)

            stage = initiative.current_stage
            if stage == COMPLETE:
                logger.info("initiative %s already complete; nothing to advance", key)
                return AlreadyComplete(key=key)
            if not self.workflow.is_stage(stage):
                return self._unknown_stage(key, stage)

            groups = self.workflow.required_groups_for(stage)
            next_stage = self.workflow.next_stage(stage)

            artifact = self.artifacts.create(key, stage)
            record = HistoryRecord(
                timestamp=self.clock(),
                stage=stage,
                action="Created artifact stub",
                required_groups=tuple(sorted(groups)),
            )
            try:
                self.store.save(initiative.with_transition(record, next_stage))
            except Exception:
                logger.error("could not save %s after writing %s; discarding the artifact", key, artifact)
                self.artifacts.discard(key, stage)
                raise
            self.store.append_history(key, record)

        logger.info("advanced initiative %s: %s -> %s", key, stage, next_stage)
        return StageAdvanced(
            key=key,
            stage=stage,
            artifact=artifact,
            required_groups=groups,
            next_stage=next_stage,
            branch=self.review_branch(key, stage),
        )

    def ticket_plan(self, key: str, stage: str, pr_url: str | None = None) -> TicketPlanResult:
        """Describe the sign-off tickets to open for one stage of an initiative."""
        if not self.workflow.is_stage(stage):
            return self._unknown_stage(key, stage)
        if not self.store.exists(key):
            return NotFound(key=key)

        record = self.governance.load()
        project_key = record.jira_project_key if record and record.jira_project_key else "UNKNOWN"
        approvers = record.approvers() if record else {}

        tickets = []
        for group in sorted(self.workflow.required_groups_for(stage)):
            tickets.append(
                {
                    "group": group,
                    "summary": f"[BMAD][{key}][{stage}] Signoff required - {group.upper()}",
                    "project": project_key,
                    "issue_type": TICKET_ISSUE_TYPE,
                    "labels": ["bmad", f"initiative-{key}", f"artifact-{stage}", f"group-{group}"],
                    "approvers": approvers.get(group, []),
                    "pr_url": pr_url,
                    "description": ticket_description(key, stage, group, pr_url),
                }
            )
        return TicketPlan(key=key, stage=stage, tickets=tuple(tickets))

    def review_branch(self, key: str, stage: str) -> str:
        return f"{self.branch_prefix}/{key}/{stage}"

    def _unknown_stage(self, key: str, stage: str) -> UnknownStage:
        logger.error("initiative %s has unrecognized stage `%s`", key, stage)
        return UnknownStage(stage=stage, valid_stages=self.workflow.stage_sequence(), key=key)
