"""File-backed initiative store: encoding, validation on load, timeline log."""

from __future__ import annotations

import pytest
import yaml

from signoff.store import FileInitiativeStore, ProjectLayout, StateFileError
from signoff.store.files import STATE_REASON_PARSE_ERROR, STATE_REASON_SCHEMA_INVALID
from signoff.workflow import HistoryRecord, Initiative


def _initiative(stage: str = "prd") -> Initiative:
    return Initiative(
        key="INIT-1",
        title="Payments",
        current_stage=stage,
        created_at="2026-01-01T00:00:00+00:00",
        history=(HistoryRecord(timestamp="2026-01-01T00:00:00+00:00", stage="prd", action="Initiative created"),),
    )


def test_save_then_load_preserves_initiative(layout: ProjectLayout) -> None:
    store = FileInitiativeStore(layout)
    assert not store.exists("INIT-1")
    assert store.load("INIT-1") is None

    path = store.save(_initiative())
    assert path == layout.initiative_dir("INIT-1")
    assert store.exists("INIT-1")
    assert store.load("INIT-1") == _initiative()


def test_state_file_layout(layout: ProjectLayout) -> None:
    FileInitiativeStore(layout).save(_initiative())
    data = yaml.safe_load(layout.state_path("INIT-1").read_text(encoding="utf-8"))

    assert data["current_step"] == "prd"
    assert data["governance_ref"]["path"] == "_bmad-output/governance/governance.yaml"
    assert data["artifacts"]["epics_stories"] == {
        "path": "_bmad-output/initiatives/INIT-1/artifacts/EPICS_STORIES.md",
        "required_groups": ["ba", "dev"],
        "branch": "bmad/INIT-1/epics_stories",
    }
    # Timestamps survive as strings, not YAML datetimes.
    assert isinstance(data["created_at"], str)


def test_unknown_stage_loads_verbatim(layout: ProjectLayout) -> None:
    store = FileInitiativeStore(layout)
    store.save(_initiative())
    path = layout.state_path("INIT-1")
    path.write_text(path.read_text(encoding="utf-8").replace("current_step: prd", "current_step: qa"), encoding="utf-8")

    loaded = store.load("INIT-1")
    assert loaded is not None
    assert loaded.current_stage == "qa"


def test_missing_field_is_rejected_with_path(layout: ProjectLayout) -> None:
    path = layout.state_path("INIT-1")
    path.parent.mkdir(parents=True)
    path.write_text("version: 1\nkey: INIT-1\ntitle: Payments\n", encoding="utf-8")

    with pytest.raises(StateFileError) as exc_info:
        FileInitiativeStore(layout).load("INIT-1")
    assert exc_info.value.reason_code == STATE_REASON_SCHEMA_INVALID
    assert "current_step" in str(exc_info.value)
    assert str(path) in str(exc_info.value)


@pytest.mark.parametrize("content", ["key: [unclosed\n", "- just\n- a list\n"])
def test_unparseable_state_is_rejected(layout: ProjectLayout, content: str) -> None:
    path = layout.state_path("INIT-1")
    path.parent.mkdir(parents=True)
    path.write_text(content, encoding="utf-8")

    with pytest.raises(StateFileError) as exc_info:
        FileInitiativeStore(layout).load("INIT-1")
    assert exc_info.value.reason_code == STATE_REASON_PARSE_ERROR


def test_append_history_writes_timeline(layout: ProjectLayout) -> None:
    store = FileInitiativeStore(layout)
    store.save(_initiative())
    store.append_history("INIT-1", _initiative().history[0])
    store.append_history(
        "INIT-1",
        HistoryRecord(
            timestamp="2026-01-01T00:00:05+00:00",
            stage="prd",
            action="Created artifact stub",
            required_groups=("ba", "design", "dev"),
        ),
    )

    text = layout.timeline_path("INIT-1").read_text(encoding="utf-8")
    assert text.startswith("# Timeline: INIT-1\n\n## Payments\n")
    assert text.index("Initiative created") < text.index("Created artifact stub")
    assert "- **Required groups:** ba, design, dev" in text


def test_output_dirname_is_configurable(tmp_path) -> None:
    layout = ProjectLayout(tmp_path, output_dirname=".signoff-state")
    FileInitiativeStore(layout).save(_initiative())
    assert (tmp_path / ".signoff-state" / "initiatives" / "INIT-1" / "state.yaml").exists()
