"""Runtime configuration from environment variables and ``.signoff/config.toml``.

Environment:
    SIGNOFF_PROJECTS_DIR   directory holding local project checkouts
    SIGNOFF_PROJECT_ROOT   project to use when none has been selected
                           (``PROJECT_ROOT`` is honoured as a fallback)
    SIGNOFF_LOG_LEVEL      logging level name for the CLI and server
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

from signoff.store.files import DEFAULT_OUTPUT_DIRNAME
from signoff.workflow.lifecycle import DEFAULT_BRANCH_PREFIX

CONFIG_RELATIVE_PATH = Path(".signoff/config.toml")


@dataclass(frozen=True)
class SignoffConfig:
    projects_dir: Path
    default_project_root: Path | None = None
    output_dirname: str = DEFAULT_OUTPUT_DIRNAME
    branch_prefix: str = DEFAULT_BRANCH_PREFIX
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> SignoffConfig:
        env = os.environ if environ is None else environ
        projects_dir = env.get("SIGNOFF_PROJECTS_DIR")
        project_root = env.get("SIGNOFF_PROJECT_ROOT") or env.get("PROJECT_ROOT")
        return cls(
            projects_dir=Path(projects_dir).expanduser() if projects_dir else Path.home() / "signoff-projects",
            default_project_root=Path(project_root).expanduser() if project_root else None,
            log_level=env.get("SIGNOFF_LOG_LEVEL", "INFO").upper(),
        )

    def for_project(self, project_root: Path) -> SignoffConfig:
        """Overlay the project's ``.signoff/config.toml`` if it has one."""
        path = project_root / CONFIG_RELATIVE_PATH
        if not path.exists():
            return self

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise RuntimeError(f"Malformed TOML config at {path}: {e}") from e

        section = data.get("signoff", {})
        if not isinstance(section, dict):
            raise RuntimeError(f"Invalid config structure in {path}: [signoff] must be a table")

        overrides: dict[str, str] = {}
        for name in ("output_dirname", "branch_prefix"):
            if name in section:
                value = section[name]
                if not isinstance(value, str) or not value.strip():
                    raise RuntimeError(f"Invalid config structure in {path}: `{name}` must be a non-empty string")
                overrides[name] = value.strip()
        return replace(self, **overrides)
