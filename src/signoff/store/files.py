"""Project file layout and shared file helpers for the stores."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from signoff.schemas.validator import RecordInvalid, check_record

DEFAULT_OUTPUT_DIRNAME = "_bmad-output"

STATE_REASON_PARSE_ERROR = "STATE_PARSE_ERROR"
STATE_REASON_SCHEMA_INVALID = "STATE_SCHEMA_INVALID"


class StateFileError(ValueError):
    """A persisted YAML record could not be decoded or failed validation."""

    reason_code: str

    def __init__(self, message: str, reason_code: str = STATE_REASON_SCHEMA_INVALID) -> None:
        super().__init__(message)
        self.reason_code = reason_code


@dataclass(frozen=True)
class ProjectLayout:
    """Deterministic file locations inside one project checkout."""

    project_root: Path
    output_dirname: str = DEFAULT_OUTPUT_DIRNAME

    @property
    def output_dir(self) -> Path:
        return self.project_root / self.output_dirname

    @property
    def governance_path(self) -> Path:
        return self.output_dir / "governance" / "governance.yaml"

    def initiative_dir(self, key: str) -> Path:
        return self.output_dir / "initiatives" / key

    def state_path(self, key: str) -> Path:
        return self.initiative_dir(key) / "state.yaml"

    def timeline_path(self, key: str) -> Path:
        return self.initiative_dir(key) / "timeline.md"

    def lock_path(self, key: str) -> Path:
        return self.output_dir / ".locks" / f"{key}.lock"

    def artifact_path(self, key: str, stage: str) -> Path:
        return self.initiative_dir(key) / "artifacts" / f"{stage.upper()}.md"

    def relative(self, path: Path) -> str:
        return path.relative_to(self.project_root).as_posix()


def atomic_write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.signoff.tmp")
    tmp.write_text(content, encoding="utf-8")
    os.replace(tmp, path)


def dump_yaml(path: Path, data: dict[str, Any], *, schema_name: str) -> None:
    """Validate ``data`` and write it as YAML, replacing the file atomically."""
    check_record(data, schema_name)
    atomic_write(path, yaml.safe_dump(data, sort_keys=False, allow_unicode=True))


def load_yaml(path: Path, *, schema_name: str) -> dict[str, Any]:
    """Read a YAML record and validate it, raising StateFileError with the path on failure."""
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise StateFileError(f"{path}: parse error: {exc}", STATE_REASON_PARSE_ERROR) from exc
    if not isinstance(raw, dict):
        raise StateFileError(
            f"{path}: parse error: expected mapping at top level",
            STATE_REASON_PARSE_ERROR,
        )

    try:
        check_record(raw, schema_name)
    except RecordInvalid as exc:
        raise StateFileError(f"{path}: {exc}") from exc
    return raw
