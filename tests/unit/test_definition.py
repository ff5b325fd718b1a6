"""Unit tests for raw definition normalization."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from workflow_source.definition import StatusDefinition, WorkflowDefinition, normalize
from workflow_source.errors import WorkflowError, WorkflowValidationError


def _definition(statuses: Any, initial: str = "A", **extra: Any) -> dict[str, Any]:
    return {"initialStatusId": initial, "status": statuses, **extra}


def test_status_ids_are_canonicalized() -> None:
    definition = normalize("W", _definition(["A", "W/B"]))

    assert definition.initial_status_id == "W/A"
    assert definition.status_ids == ["W/A", "W/B"]
    assert definition.get_status("W/A") == StatusDefinition()
    assert definition.get_status("W/C") is None


def test_initial_status_id_may_be_canonical() -> None:
    definition = normalize("W", _definition(["A"], initial="W/A"))

    assert definition.initial_status_id == "W/A"


@pytest.mark.parametrize(
    "statuses",
    [
        ["A", "B"],
        {"A": None, "B": None},
        {"A": {}, "B": []},
        {"A": "A", "W/B": "B"},
    ],
)
def test_status_shapes_normalize_identically(statuses: Any) -> None:
    expected = WorkflowDefinition(
        initial_status_id="W/A",
        statuses={"W/A": StatusDefinition(), "W/B": StatusDefinition()},
    )

    assert normalize("W", _definition(statuses)) == expected


@pytest.mark.parametrize(
    "transition",
    [
        "B, C",
        " B ,W/C ",
        ["B", "C"],
        ("B", "W/C"),
        {"B": {}, "C": {}},
        {"B": None, "W/C": []},
    ],
)
def test_transition_shapes_normalize_identically(transition: Any) -> None:
    statuses = {"A": {"transition": transition}, "B": None, "C": None}

    definition = normalize("W", _definition(statuses))

    assert definition.statuses["W/A"].transitions == {"W/B": {}, "W/C": {}}
    assert definition == normalize("W", _definition({"A": {"transition": "B, C"}, "B": None, "C": None}))


def test_transition_config_is_kept() -> None:
    statuses = {"A": {"transition": {"B": {"label": "Go", "guard": "isReady"}}}, "B": None}

    definition = normalize("W", _definition(statuses))

    assert definition.statuses["W/A"].transitions == {"W/B": {"label": "Go", "guard": "isReady"}}


def test_duplicate_transition_targets_keep_the_last_definition() -> None:
    statuses = {
        "A": {"transition": {"B": {"label": "first"}, "W/B": {"label": "second"}}},
        "B": None,
    }

    definition = normalize("W", _definition(statuses))

    assert definition.statuses["W/A"].transitions == {"W/B": {"label": "second"}}


def test_null_transition_means_no_transitions() -> None:
    definition = normalize("W", _definition({"A": {"transition": None}}))

    assert definition.statuses["W/A"].transitions == {}


def test_metadata_and_other_keys_pass_through() -> None:
    statuses = {"A": {"label": "Start here", "metadata": {"color": "red", "rank": 1}}}

    status = normalize("W", _definition(statuses)).statuses["W/A"]

    assert status.metadata == {"color": "red", "rank": 1}
    assert status.properties == {"label": "Start here"}
    assert status.transitions == {}


def test_empty_metadata_mapping_is_accepted() -> None:
    status = normalize("W", _definition({"A": {"metadata": {}}})).statuses["W/A"]

    assert status.metadata == {}


def test_workflow_level_keys_are_kept_as_properties() -> None:
    definition = normalize("W", _definition(["A"], label="My workflow", owner="ops"))

    assert definition.properties == {"label": "My workflow", "owner": "ops"}


@pytest.mark.parametrize("metadata", [["red", "green"], "color=red", 3, {1: "one"}])
def test_invalid_metadata_is_rejected(metadata: Any) -> None:
    with pytest.raises(WorkflowValidationError, match="metadata"):
        normalize("W", _definition({"A": {"metadata": metadata}}))


def test_missing_initial_status_id_is_rejected() -> None:
    with pytest.raises(WorkflowValidationError, match="initialStatusId"):
        normalize("W", {"status": ["A"]})


def test_missing_status_collection_is_rejected() -> None:
    with pytest.raises(WorkflowValidationError, match="No status definition"):
        normalize("W", {"initialStatusId": "A"})


def test_non_mapping_definition_is_rejected() -> None:
    with pytest.raises(WorkflowValidationError):
        normalize("W", ["A"])  # type: ignore[arg-type]


def test_undeclared_initial_status_is_rejected() -> None:
    with pytest.raises(WorkflowValidationError, match="Initial status not defined: W/Z"):
        normalize("W", _definition(["A", "B"], initial="Z"))


def test_undeclared_target_in_same_workflow_is_rejected() -> None:
    statuses = {"A": {"transition": "B, X"}, "B": None}

    with pytest.raises(WorkflowValidationError, match="W/X"):
        normalize("W", _definition(statuses))


def test_target_in_other_workflow_is_not_checked() -> None:
    statuses = {"A": {"transition": "OtherWorkflow/X"}}

    definition = normalize("W", _definition(statuses))

    assert definition.statuses["W/A"].transitions == {"OtherWorkflow/X": {}}


def test_cycles_are_accepted() -> None:
    statuses = {"A": {"transition": "B"}, "B": {"transition": "A"}}

    definition = normalize("W", _definition(statuses))

    assert definition.statuses["W/B"].transitions == {"W/A": {}}


def test_status_of_another_workflow_is_rejected() -> None:
    with pytest.raises(WorkflowValidationError, match="declare it in the definition of workflow Other"):
        normalize("W", _definition(["A", "Other/B"]))


@pytest.mark.parametrize(
    "statuses",
    [
        "A, B",
        ["A", 3],
        {"A": 3},
        {"A": "B", "B": None},
        {1: None},
    ],
)
def test_malformed_status_collection_is_rejected(statuses: Any) -> None:
    with pytest.raises(WorkflowValidationError):
        normalize("W", _definition(statuses))


@pytest.mark.parametrize("transition", [3, ["B", None], {"B": "yes"}, {3: {}}])
def test_malformed_transitions_are_rejected(transition: Any) -> None:
    with pytest.raises(WorkflowValidationError):
        normalize("W", _definition({"A": {"transition": transition}, "B": None}))


def test_malformed_ids_raise_a_resolution_error() -> None:
    with pytest.raises(WorkflowError) as exc_info:
        normalize("W", _definition({"A": {"transition": "B,"}, "B": None}))
    assert not isinstance(exc_info.value, WorkflowValidationError)

    with pytest.raises(WorkflowError):
        normalize("W", _definition(["A", "1B"]))


def test_normalized_definition_does_not_share_raw_data() -> None:
    raw = _definition({"A": {"metadata": {"color": "red"}, "transition": {"B": {"label": "Go"}}}, "B": None})

    definition = normalize("W", raw)
    raw["status"]["A"]["metadata"]["color"] = "blue"
    raw["status"]["A"]["transition"]["B"]["label"] = "Stop"

    assert definition.statuses["W/A"].metadata == {"color": "red"}
    assert definition.statuses["W/A"].transitions["W/B"] == {"label": "Go"}


def test_normalized_definition_is_frozen() -> None:
    definition = normalize("W", _definition(["A"]))

    with pytest.raises(ValidationError):
        definition.initial_status_id = "W/B"  # type: ignore[misc]


@pytest.mark.parametrize(
    "raw",
    [
        {"initialStatusId": "A\n", "status": ["A\n"]},
        {"initialStatusId": "A", "status": ["A", "A\n"]},
        {"initialStatusId": "A", "status": {"A": {"transition": ["A\n"]}}},
    ],
)
def test_ids_with_trailing_newline_are_rejected(raw: dict[str, Any]) -> None:
    with pytest.raises(WorkflowError, match="incorrect status local id format"):
        normalize("W", raw)
