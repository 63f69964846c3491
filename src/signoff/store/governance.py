"""Governance file: group leads and sign-off rules for a project."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from signoff.store.files import ProjectLayout, dump_yaml, load_yaml
from signoff.workflow.definition import DEFAULT_WORKFLOW, WorkflowDefinition
from signoff.workflow.types import GovernanceRecord, GroupLeads

GOVERNANCE_SCHEMA = "governance"
GOVERNANCE_VERSION = 1
SIGNOFF_ISSUE_TYPE = "Task"


class FileGovernanceStore:
    def __init__(self, layout: ProjectLayout, *, workflow: WorkflowDefinition = DEFAULT_WORKFLOW) -> None:
        self.layout = layout
        self.workflow = workflow

    @property
    def path(self) -> Path:
        return self.layout.governance_path

    def is_configured(self) -> bool:
        return self.path.exists()

    def load(self) -> GovernanceRecord | None:
        if not self.is_configured():
            return None
        return decode_governance(load_yaml(self.path, schema_name=GOVERNANCE_SCHEMA))

    def groups_and_approvers(self) -> dict[str, list[str]]:
        record = self.load()
        return record.approvers() if record else {}

    def write(self, leads: Mapping[str, Sequence[str]], jira_project_key: str) -> GovernanceRecord:
        """Write (or overwrite) the governance file from per-group GitHub leads."""
        record = GovernanceRecord(
            groups={name: GroupLeads(github_users=tuple(users)) for name, users in leads.items()},
            jira_project_key=jira_project_key,
        )
        dump_yaml(self.path, self.encode(record), schema_name=GOVERNANCE_SCHEMA)
        return record

    def encode(self, record: GovernanceRecord) -> dict[str, Any]:
        return {
            "version": GOVERNANCE_VERSION,
            "groups": {
                name: {
                    "leads": {
                        "github_users": list(leads.github_users),
                        "jira_account_ids": list(leads.jira_account_ids),
                    },
                    "github": {"team_slug": ""},
                }
                for name, leads in record.groups.items()
            },
            "jira": {
                "project_key": record.jira_project_key,
                "issue_types": {"signoff_request": SIGNOFF_ISSUE_TYPE},
            },
            "signoff_rules": {
                stage: {"required_groups": groups}
                for stage, groups in self.workflow.signoff_rules().items()
            },
        }


def decode_governance(data: dict[str, Any]) -> GovernanceRecord:
    groups: dict[str, GroupLeads] = {}
    for name, entry in data["groups"].items():
        leads = entry["leads"]
        groups[str(name)] = GroupLeads(
            github_users=tuple(str(user) for user in leads.get("github_users") or ()),
            jira_account_ids=tuple(str(item) for item in leads.get("jira_account_ids") or ()),
        )
    return GovernanceRecord(groups=groups, jira_project_key=str(data["jira"]["project_key"]))
