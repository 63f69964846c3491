"""File-backed initiative persistence: ``state.yaml`` plus a ``timeline.md`` log."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from filelock import FileLock

from signoff.store.files import ProjectLayout, dump_yaml, load_yaml
from signoff.workflow.definition import DEFAULT_WORKFLOW, WorkflowDefinition
from signoff.workflow.types import HistoryRecord, Initiative

logger = logging.getLogger(__name__)

STATE_SCHEMA = "initiative_state"
STATE_VERSION = 1
LOCK_TIMEOUT = 30.0


class FileInitiativeStore:
    """Stores each initiative under ``<output>/initiatives/<key>/``.

    ``state.yaml`` is rewritten whole on every save and carries the
    authoritative history. ``timeline.md`` is an append-only human log.
    Writers serialize on ``<output>/.locks/<key>.lock`` so the CLI and a
    running server can share one checkout.
    """

    def __init__(
        self,
        layout: ProjectLayout,
        *,
        workflow: WorkflowDefinition = DEFAULT_WORKFLOW,
        branch_prefix: str = "bmad",
        lock_timeout: float | None = None,
    ) -> None:
        self.layout = layout
        self.workflow = workflow
        self.branch_prefix = branch_prefix
        self.lock_timeout = LOCK_TIMEOUT if lock_timeout is None else lock_timeout

    def lock(self, key: str) -> FileLock:
        """Inter-process lock for one initiative; raises filelock.Timeout when held too long."""
        path = self.layout.lock_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        return FileLock(path, timeout=self.lock_timeout)

    def exists(self, key: str) -> bool:
        return self.layout.state_path(key).exists()

    def load(self, key: str) -> Initiative | None:
        path = self.layout.state_path(key)
        if not path.exists():
            return None
        return decode_state(load_yaml(path, schema_name=STATE_SCHEMA))

    def save(self, initiative: Initiative) -> Path:
        path = self.layout.state_path(initiative.key)
        dump_yaml(path, self.encode_state(initiative), schema_name=STATE_SCHEMA)
        logger.debug("wrote %s", path)
        return self.layout.initiative_dir(initiative.key)

    def append_history(self, key: str, record: HistoryRecord) -> None:
        path = self.layout.timeline_path(key)
        if not path.exists():
            initiative = self.load(key)
            title = initiative.title if initiative else key
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(f"# Timeline: {key}\n\n## {title}\n\n---\n", encoding="utf-8")

        lines = [
            "",
            f"### {record.timestamp} - {record.action}",
            "",
            f"- **Stage:** {record.stage}",
        ]
        if record.required_groups:
            lines.append(f"- **Required groups:** {', '.join(record.required_groups)}")
        lines.extend(["", "---", ""])
        with path.open("a", encoding="utf-8") as handle:
            handle.write("\n".join(lines))

    def encode_state(self, initiative: Initiative) -> dict[str, Any]:
        key = initiative.key
        return {
            "version": STATE_VERSION,
            "key": key,
            "title": initiative.title,
            "phase": initiative.phase,
            "current_step": initiative.current_stage,
            "created_at": initiative.created_at,
            "governance_ref": {"path": self.layout.relative(self.layout.governance_path)},
            "artifacts": {
                stage: {
                    "path": self.layout.relative(self.layout.artifact_path(key, stage)),
                    "required_groups": sorted(self.workflow.required_groups_for(stage)),
                    "branch": f"{self.branch_prefix}/{key}/{stage}",
                }
                for stage in self.workflow.stage_sequence()
            },
            "history": [record.to_dict() for record in initiative.history],
        }


def decode_state(data: dict[str, Any]) -> Initiative:
    """Build an Initiative from an already validated state record.

    The stage is passed through verbatim; deciding whether it is valid
    belongs to the lifecycle manager, which reports it rather than guessing.
    """
    return Initiative(
        key=str(data["key"]),
        title=str(data["title"]),
        current_stage=str(data["current_step"]),
        created_at=str(data["created_at"]),
        history=tuple(HistoryRecord.from_dict(item) for item in data["history"]),
        phase=str(data["phase"]),
    )
