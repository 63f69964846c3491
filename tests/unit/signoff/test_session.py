"""Session project selection and config overlay."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from signoff.config import SignoffConfig
from signoff.session import Session
from signoff.workflow.results import ProjectNotFound, ProjectSelected


def _git_init(path: Path, remote: str | None = None) -> None:
    path.mkdir(parents=True, exist_ok=True)
    subprocess.run(["git", "init"], cwd=path, check=True, capture_output=True)
    if remote:
        subprocess.run(["git", "remote", "add", "origin", remote], cwd=path, check=True, capture_output=True)


def test_config_from_env(tmp_path: Path) -> None:
    config = SignoffConfig.from_env(
        {
            "SIGNOFF_PROJECTS_DIR": str(tmp_path),
            "PROJECT_ROOT": str(tmp_path / "acme"),
            "SIGNOFF_LOG_LEVEL": "debug",
        }
    )
    assert config.projects_dir == tmp_path
    assert config.default_project_root == tmp_path / "acme"
    assert config.log_level == "DEBUG"


def test_config_defaults() -> None:
    config = SignoffConfig.from_env({})
    assert config.projects_dir == Path.home() / "signoff-projects"
    assert config.default_project_root is None
    assert config.output_dirname == "_bmad-output"


def test_project_config_overlay(tmp_path: Path) -> None:
    (tmp_path / ".signoff").mkdir()
    (tmp_path / ".signoff" / "config.toml").write_text(
        '[signoff]\noutput_dirname = "_approvals"\nbranch_prefix = "signoff"\n',
        encoding="utf-8",
    )
    config = SignoffConfig(projects_dir=tmp_path).for_project(tmp_path)
    assert config.output_dirname == "_approvals"
    assert config.branch_prefix == "signoff"


def test_project_config_malformed(tmp_path: Path) -> None:
    (tmp_path / ".signoff").mkdir()
    (tmp_path / ".signoff" / "config.toml").write_text("[signoff\n", encoding="utf-8")
    with pytest.raises(RuntimeError, match="Malformed TOML"):
        SignoffConfig(projects_dir=tmp_path).for_project(tmp_path)


def test_default_project_root_seeds_session(tmp_path: Path) -> None:
    config = SignoffConfig(projects_dir=tmp_path, default_project_root=tmp_path)
    assert Session(config).project_root == tmp_path.resolve()


def test_select_by_folder_name(tmp_path: Path, project: Path) -> None:
    session = Session(SignoffConfig(projects_dir=tmp_path / "projects"))
    assert not session.has_project

    result = session.select_project("acme")
    assert isinstance(result, ProjectSelected)
    assert result.path == project.resolve()
    assert not result.has_governance
    assert session.project_root == project.resolve()


def test_select_missing_project(tmp_path: Path) -> None:
    session = Session(SignoffConfig(projects_dir=tmp_path))
    result = session.select_project("ghost")
    assert isinstance(result, ProjectNotFound)
    assert result.searched == (tmp_path / "ghost",)
    assert session.project_root is None


def test_sessions_do_not_share_selection(tmp_path: Path, project: Path) -> None:
    config = SignoffConfig(projects_dir=tmp_path / "projects")
    first, second = Session(config), Session(config)
    first.select_project("acme")
    assert second.project_root is None


def test_list_projects_only_git_checkouts(tmp_path: Path) -> None:
    projects_dir = tmp_path / "projects"
    _git_init(projects_dir / "alpha", remote="git@github.com:acme/alpha.git")
    _git_init(projects_dir / "beta")
    (projects_dir / "notes").mkdir()

    session = Session(SignoffConfig(projects_dir=projects_dir))
    session.select_project("beta")
    listing = session.list_projects()

    assert [p["name"] for p in listing.projects] == ["alpha", "beta"]
    alpha, beta = listing.projects
    assert alpha["remote_url"] == "git@github.com:acme/alpha.git"
    assert beta["remote_url"] is None
    assert beta["selected"] is True
    assert alpha["has_governance"] is False


def test_list_projects_missing_dir(tmp_path: Path) -> None:
    listing = Session(SignoffConfig(projects_dir=tmp_path / "none")).list_projects()
    assert listing.projects == ()
