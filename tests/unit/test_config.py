"""Unit tests for configuration."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from workflow_source.config import WorkflowSourceSettings
from workflow_source.entities import EntityType, Transition
from workflow_source.providers import JsonDirectoryDefinitionProvider


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "WORKFLOW_SOURCE_PROVIDER",
        "WORKFLOW_SOURCE_NAMESPACE",
        "WORKFLOW_SOURCE_DEFINITIONS_PATH",
        "WORKFLOW_SOURCE_CLASS_MAP",
        "WORKFLOW_SOURCE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_settings_defaults() -> None:
    """Test default setting values."""
    settings = WorkflowSourceSettings(_env_file=None)

    assert settings.provider == "module"
    assert settings.namespace == "app.workflows"
    assert settings.definitions_path == Path("workflows")
    assert settings.class_map == {}
    assert settings.log_level == "INFO"


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WORKFLOW_SOURCE_PROVIDER", "directory")
    monkeypatch.setenv("WORKFLOW_SOURCE_DEFINITIONS_PATH", "/srv/workflows")
    monkeypatch.setenv(
        "WORKFLOW_SOURCE_CLASS_MAP", json.dumps({"transition": "workflow_source.entities.Transition"})
    )

    settings = WorkflowSourceSettings(_env_file=None)

    assert settings.provider == "directory"
    assert settings.definitions_path == Path("/srv/workflows")
    assert settings.class_map == {"transition": "workflow_source.entities.Transition"}


def test_settings_from_env_file(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("WORKFLOW_SOURCE_NAMESPACE=myapp.workflows\nWORKFLOW_SOURCE_LOG_LEVEL=DEBUG\n")

    settings = WorkflowSourceSettings(_env_file=env_file)

    assert settings.namespace == "myapp.workflows"
    assert settings.log_level == "DEBUG"


def test_settings_reject_unknown_provider() -> None:
    with pytest.raises(ValidationError):
        WorkflowSourceSettings(_env_file=None, provider="database")


def test_settings_reject_unknown_class_map_types() -> None:
    with pytest.raises(ValidationError, match="state"):
        WorkflowSourceSettings(_env_file=None, class_map={"state": "myapp.State"})


def test_create_source(tmp_path: Path) -> None:
    definition = {"initialStatusId": "open", "status": {"open": {"transition": "closed"}, "closed": None}}
    (tmp_path / "Ticket.json").write_text(json.dumps(definition), encoding="utf-8")
    settings = WorkflowSourceSettings(
        _env_file=None,
        provider="directory",
        definitions_path=tmp_path,
        class_map={"transition": "workflow_source.entities.Transition"},
    )

    source = settings.create_source()

    assert isinstance(source.provider, JsonDirectoryDefinitionProvider)
    assert source.get_class_map_by_type(EntityType.TRANSITION) is Transition
    assert source.get_transition("Ticket/open", "Ticket/closed") is not None
