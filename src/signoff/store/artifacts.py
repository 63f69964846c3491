"""Stub artifact documents for each workflow stage."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from signoff.store.files import ProjectLayout, atomic_write
from signoff.workflow.lifecycle import utc_timestamp


def render_stub(key: str, stage: str, generated_at: str) -> str:
    lines = [
        f"# {stage.upper()} (Mock)",
        "",
        f"**Initiative:** `{key}`  ",
        f"**Current step:** `{stage}`  ",
        f"**Generated at:** `{generated_at}`",
        "",
        "---",
        "",
        "This is a **stub artifact** for the signoff workflow.",
        "Signoff happens via PR approval; the repo and its PRs are the source of truth.",
        "",
    ]
    return "\n".join(lines)


class StubArtifactWriter:
    """Writes ``artifacts/<STAGE>.md`` placeholders, overwriting any previous stub."""

    def __init__(self, layout: ProjectLayout, *, clock: Callable[[], str] = utc_timestamp) -> None:
        self.layout = layout
        self.clock = clock

    def create(self, key: str, stage: str) -> Path:
        path = self.layout.artifact_path(key, stage)
        atomic_write(path, render_stub(key, stage, self.clock()))
        return path

    def discard(self, key: str, stage: str) -> None:
        self.layout.artifact_path(key, stage).unlink(missing_ok=True)
