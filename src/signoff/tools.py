"""Named tool dispatch.

Each tool takes a session and a plain ``arguments`` mapping and returns a
JSON-compatible payload carrying ``kind`` and ``ok``. Both the MCP server
and the CLI go through here.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from typing import Any

from filelock import Timeout

from signoff.session import Session
from signoff.store.files import StateFileError
from signoff.workflow.results import (
    GovernanceConfigured,
    InvalidArguments,
    NoProjectSelected,
)

logger = logging.getLogger(__name__)

KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")

ToolHandler = Callable[[Session, Mapping[str, Any]], dict[str, Any]]


class ArgumentError(ValueError):
    """Tool arguments are missing or malformed."""


def _require_text(arguments: Mapping[str, Any], name: str) -> str:
    value = arguments.get(name)
    if not isinstance(value, str) or not value.strip():
        raise ArgumentError(f"`{name}` must be a non-empty string")
    return value.strip()


def _optional_text(arguments: Mapping[str, Any], name: str) -> str | None:
    value = arguments.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ArgumentError(f"`{name}` must be a string")
    return value.strip() or None


def _require_key(arguments: Mapping[str, Any], name: str = "key") -> str:
    key = _require_text(arguments, name)
    if not KEY_PATTERN.match(key):
        raise ArgumentError(f"`{name}` may only contain letters, digits, '.', '_' and '-': {key!r}")
    return key


def _require_list(arguments: Mapping[str, Any], name: str) -> list[str]:
    value = arguments.get(name)
    if not isinstance(value, list) or not value or not all(isinstance(v, str) and v.strip() for v in value):
        raise ArgumentError(f"`{name}` must be a non-empty list of strings")
    return [v.strip() for v in value]


def _status(session: Session, arguments: Mapping[str, Any]) -> dict[str, Any]:
    if not session.has_project:
        return NoProjectSelected().to_dict()
    key = _optional_text(arguments, "initiative_key")
    if key is not None and not KEY_PATTERN.match(key):
        raise ArgumentError(f"`initiative_key` is not a valid key: {key!r}")
    payload = session.manager().status(key).to_dict()
    payload["project"] = str(session.project_root)
    return payload


def _setup_governance(session: Session, arguments: Mapping[str, Any]) -> dict[str, Any]:
    if not session.has_project:
        return NoProjectSelected().to_dict()
    leads = {
        "ba": _require_list(arguments, "ba_leads"),
        "design": _require_list(arguments, "design_leads"),
        "dev": _require_list(arguments, "dev_leads"),
    }
    jira_project_key = _require_text(arguments, "jira_project_key")
    store = session.governance()
    record = store.write(leads, jira_project_key)
    logger.info("governance written to %s", store.path)
    return GovernanceConfigured(
        path=store.path,
        groups=record.approvers(),
        jira_project_key=record.jira_project_key,
    ).to_dict()


def _new_initiative(session: Session, arguments: Mapping[str, Any]) -> dict[str, Any]:
    if not session.has_project:
        return NoProjectSelected().to_dict()
    key = _require_key(arguments)
    title = _require_text(arguments, "title")
    return session.manager().create(key, title).to_dict()


def _advance(session: Session, arguments: Mapping[str, Any]) -> dict[str, Any]:
    if not session.has_project:
        return NoProjectSelected().to_dict()
    return session.manager().advance(_require_key(arguments)).to_dict()


def _ticket_plan(session: Session, arguments: Mapping[str, Any]) -> dict[str, Any]:
    if not session.has_project:
        return NoProjectSelected().to_dict()
    key = _require_key(arguments)
    artifact = _require_text(arguments, "artifact")
    pr_url = _optional_text(arguments, "pr_url")
    return session.manager().ticket_plan(key, artifact, pr_url=pr_url).to_dict()


def _list_projects(session: Session, arguments: Mapping[str, Any]) -> dict[str, Any]:
    return session.list_projects().to_dict()


def _select_project(session: Session, arguments: Mapping[str, Any]) -> dict[str, Any]:
    return session.select_project(_require_text(arguments, "project")).to_dict()


TOOLS: dict[str, ToolHandler] = {
    "signoff_status": _status,
    "signoff_setup_governance": _setup_governance,
    "signoff_new_initiative": _new_initiative,
    "signoff_advance": _advance,
    "signoff_create_jira_tickets": _ticket_plan,
    "signoff_list_projects": _list_projects,
    "signoff_select_project": _select_project,
}


def dispatch(session: Session, name: str, arguments: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Run tool ``name`` and return its payload.

    Argument problems come back as ``invalid_arguments``. Corrupt state files,
    a busy initiative lock and other unexpected failures come back as
    ``error`` so one bad call never takes the server down.
    """
    handler = TOOLS.get(name)
    if handler is None:
        return {"kind": "error", "ok": False, "error": f"Unknown tool: {name}"}

    try:
        return handler(session, arguments or {})
    except ArgumentError as exc:
        return InvalidArguments(message=str(exc)).to_dict()
    except StateFileError as exc:
        logger.error("tool %s failed on corrupt state: %s", name, exc)
        return {"kind": "error", "ok": False, "error": str(exc), "reason_code": exc.reason_code}
    except Timeout as exc:
        logger.warning("tool %s gave up waiting for %s", name, exc.lock_file)
        return {
            "kind": "error",
            "ok": False,
            "error": f"Initiative is busy: {exc.lock_file} is held by another caller",
            "reason_code": "LOCK_TIMEOUT",
        }
    except Exception as exc:
        logger.exception("tool %s failed", name)
        return {"kind": "error", "ok": False, "error": str(exc)}
