"""Request-scoped project context.

A ``Session`` is handed to every tool call. It knows which project is
selected and builds the file-backed collaborators for it; there is no
module-level "current project".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from signoff.config import SignoffConfig
from signoff.exec import remote_url
from signoff.store import FileGovernanceStore, FileInitiativeStore, ProjectLayout, StubArtifactWriter
from signoff.workflow.definition import DEFAULT_WORKFLOW, WorkflowDefinition
from signoff.workflow.lifecycle import LifecycleManager
from signoff.workflow.results import ProjectListing, ProjectNotFound, ProjectSelected

logger = logging.getLogger(__name__)


@dataclass
class Session:
    config: SignoffConfig
    project_root: Path | None = None
    workflow: WorkflowDefinition = DEFAULT_WORKFLOW

    def __post_init__(self) -> None:
        if self.project_root is None and self.config.default_project_root is not None:
            self.project_root = self.config.default_project_root.resolve()

    @property
    def has_project(self) -> bool:
        return self.project_root is not None

    def layout(self) -> ProjectLayout:
        if self.project_root is None:
            raise RuntimeError("no project selected")
        project_config = self.config.for_project(self.project_root)
        return ProjectLayout(self.project_root, output_dirname=project_config.output_dirname)

    def governance(self) -> FileGovernanceStore:
        return FileGovernanceStore(self.layout(), workflow=self.workflow)

    def manager(self) -> LifecycleManager:
        layout = self.layout()
        branch_prefix = self.config.for_project(layout.project_root).branch_prefix
        return LifecycleManager(
            store=FileInitiativeStore(layout, workflow=self.workflow, branch_prefix=branch_prefix),
            governance=FileGovernanceStore(layout, workflow=self.workflow),
            artifacts=StubArtifactWriter(layout),
            workflow=self.workflow,
            branch_prefix=branch_prefix,
        )

    def select_project(self, identifier: str) -> ProjectSelected | ProjectNotFound:
        """Select a project by absolute path or by folder name under ``projects_dir``."""
        candidate = Path(identifier).expanduser()
        searched = [candidate] if candidate.is_absolute() else [self.config.projects_dir / identifier]
        for path in searched:
            if path.is_dir():
                self.project_root = path.resolve()
                logger.info("selected project %s", self.project_root)
                return ProjectSelected(
                    name=self.project_root.name,
                    path=self.project_root,
                    has_governance=self.governance().is_configured(),
                )
        return ProjectNotFound(project=identifier, searched=tuple(searched))

    def list_projects(self) -> ProjectListing:
        """List git checkouts under ``projects_dir``."""
        projects_dir = self.config.projects_dir
        projects: list[dict[str, Any]] = []
        if projects_dir.is_dir():
            for entry in sorted(projects_dir.iterdir()):
                if not entry.is_dir() or not (entry / ".git").exists():
                    continue
                layout = ProjectLayout(entry, output_dirname=self.config.for_project(entry).output_dirname)
                projects.append(
                    {
                        "name": entry.name,
                        "path": str(entry),
                        "has_governance": layout.governance_path.exists(),
                        "remote_url": remote_url(entry),
                        "selected": self.project_root == entry.resolve(),
                    }
                )
        return ProjectListing(projects_dir=projects_dir, projects=tuple(projects))
