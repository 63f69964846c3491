"""Pytest configuration and fixtures for signoff tests."""

from __future__ import annotations

from collections.abc import Callable
from itertools import count
from pathlib import Path

import pytest

from signoff.config import SignoffConfig
from signoff.session import Session
from signoff.store import FileGovernanceStore, FileInitiativeStore, ProjectLayout, StubArtifactWriter
from signoff.workflow import LifecycleManager

LEADS = {"ba": ["alice"], "design": ["bob"], "dev": ["carol", "dave"]}


def pytest_sessionfinish(session, exitstatus):
    """Fail the run if --cov was requested but no coverage data was collected."""
    cov_enabled = any("--cov" in str(arg) for arg in session.config.args)
    if not cov_enabled:
        return

    if not list(Path.cwd().glob(".coverage*")):
        pytest.exit(
            "Coverage was enabled but no data was collected. "
            "Check that tests import from 'signoff' (the package) not 'src/signoff' (filesystem path).",
            returncode=1,
        )


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "projects" / "acme"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def layout(project: Path) -> ProjectLayout:
    return ProjectLayout(project)


@pytest.fixture
def clock() -> Callable[[], str]:
    """Deterministic, strictly increasing timestamps."""
    ticks = count()
    return lambda: f"2026-01-01T00:00:{next(ticks):02d}+00:00"


@pytest.fixture
def governed(layout: ProjectLayout) -> FileGovernanceStore:
    store = FileGovernanceStore(layout)
    store.write(LEADS, "ACME")
    return store


@pytest.fixture
def manager(layout: ProjectLayout, governed: FileGovernanceStore, clock) -> LifecycleManager:
    return LifecycleManager(
        store=FileInitiativeStore(layout),
        governance=governed,
        artifacts=StubArtifactWriter(layout, clock=clock),
        clock=clock,
    )


@pytest.fixture
def session(tmp_path: Path, project: Path) -> Session:
    config = SignoffConfig(projects_dir=tmp_path / "projects")
    return Session(config, project_root=project)
