"""Normalization of raw workflow definitions.

Hosts describe a workflow with a forgiving shorthand. All of these describe the
same graph::

    {"initialStatusId": "draft",
     "status": {"draft": {"transition": "published, archived"},
                "published": {"transition": ["archived"]},
                "archived": None}}

    {"initialStatusId": "post/draft",
     "status": {"draft": {"transition": {"published": {}, "archived": None}},
                "published": {"transition": {"archived": {}}},
                "archived": {}}}

`normalize` decodes the shorthand once, at this boundary, into a frozen
`WorkflowDefinition` keyed by canonical status ids, and validates that the
graph is well formed.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from workflow_source.errors import WorkflowValidationError
from workflow_source.ids import canonical_status_id, parse_status_id

logger = logging.getLogger(__name__)

KEY_INITIAL_STATUS_ID = "initialStatusId"
KEY_NODES = "status"
KEY_EDGES = "transition"
KEY_METADATA = "metadata"


class StatusDefinition(BaseModel):
    """Normalized definition of one status."""

    model_config = ConfigDict(frozen=True)

    metadata: dict[str, Any] | None = Field(default=None)
    transitions: dict[str, dict[Any, Any]] = Field(
        default_factory=dict,
        description="Transition configuration indexed by canonical end status id",
    )
    properties: dict[str, Any] = Field(
        default_factory=dict,
        description="Any other status keys (label, ...) passed through verbatim",
    )


class WorkflowDefinition(BaseModel):
    """Normalized definition of one workflow."""

    model_config = ConfigDict(frozen=True)

    initial_status_id: str
    statuses: dict[str, StatusDefinition]
    properties: dict[str, Any] = Field(
        default_factory=dict,
        description="Top-level definition keys other than the initial status and statuses",
    )

    @property
    def status_ids(self) -> list[str]:
        return list(self.statuses)

    def get_status(self, status_id: str) -> StatusDefinition | None:
        return self.statuses.get(status_id)


@dataclass(frozen=True, slots=True)
class _StatusEntry:
    raw_id: str
    config: Mapping[str, Any] | None


@dataclass(frozen=True, slots=True)
class _TransitionEntry:
    raw_target: str
    config: dict[Any, Any]


def _is_empty_config(value: object) -> bool:
    return value is None or (isinstance(value, (list, tuple)) and len(value) == 0)


def _decode_statuses(workflow_id: str, raw: object) -> list[_StatusEntry]:
    """Decode the status collection.

    Accepted shapes:
    - ``["A", "B"]``
    - ``{"A": None, "B": [], "C": {...}}``
    - ``{"A": "A"}`` (a bare id restating its key)
    """

    if isinstance(raw, Mapping):
        entries: list[_StatusEntry] = []
        for key, value in raw.items():
            if not isinstance(key, str):
                raise WorkflowValidationError(
                    f"Wrong status definition: key = {key!r} value = {value!r}"
                )
            if _is_empty_config(value):
                entries.append(_StatusEntry(key, None))
            elif isinstance(value, Mapping):
                entries.append(_StatusEntry(key, value))
            elif isinstance(value, str):
                if canonical_status_id(value, workflow_id) != canonical_status_id(key, workflow_id):
                    raise WorkflowValidationError(
                        f"Wrong definition for status {key!r}: bare id {value!r} names another status"
                    )
                entries.append(_StatusEntry(key, None))
            else:
                raise WorkflowValidationError(
                    f"Wrong definition for status {key!r}: mapping expected, got {value!r}"
                )
        return entries

    if isinstance(raw, (list, tuple)):
        for value in raw:
            if not isinstance(value, str):
                raise WorkflowValidationError(f"Wrong status definition: {value!r}")
        return [_StatusEntry(value, None) for value in raw]

    raise WorkflowValidationError(
        f"Invalid status definition: list or mapping expected, got {raw!r}"
    )


def _decode_transitions(status_id: str, raw: object) -> list[_TransitionEntry]:
    """Decode the transition entry of a status.

    Accepted shapes:
    - ``"A, B, other/C"``
    - ``["A", "B"]``
    - ``{"A": None, "B": {"label": "..."}}``
    """

    if raw is None:
        return []

    if isinstance(raw, str):
        return [_TransitionEntry(token.strip(), {}) for token in raw.split(",")]

    if isinstance(raw, Mapping):
        entries: list[_TransitionEntry] = []
        for key, value in raw.items():
            if not isinstance(key, str):
                raise WorkflowValidationError(
                    f"Wrong transition definition for status {status_id}: key = {key!r} value = {value!r}"
                )
            if _is_empty_config(value):
                entries.append(_TransitionEntry(key, {}))
            elif isinstance(value, Mapping):
                entries.append(_TransitionEntry(key, dict(value)))
            else:
                raise WorkflowValidationError(
                    f"Wrong definition for transition between {status_id} and {key}: mapping expected"
                )
        return entries

    if isinstance(raw, (list, tuple)):
        for value in raw:
            if not isinstance(value, str):
                raise WorkflowValidationError(
                    f"Wrong transition definition for status {status_id}: {value!r}"
                )
        return [_TransitionEntry(value, {}) for value in raw]

    raise WorkflowValidationError(
        f"Invalid transition definition format for status {status_id}: string, list or mapping expected"
    )


def _normalize_metadata(status_id: str, raw: object) -> dict[str, Any]:
    if not isinstance(raw, Mapping):
        raise WorkflowValidationError(
            f"Invalid metadata definition for status {status_id}: mapping expected"
        )
    if not all(isinstance(key, str) for key in raw):
        raise WorkflowValidationError(
            f"Invalid metadata definition for status {status_id}: string keys expected"
        )
    return dict(raw)


def _normalize_status(
    workflow_id: str, status_id: str, config: Mapping[str, Any] | None
) -> StatusDefinition:
    if not config:
        return StatusDefinition()

    metadata: dict[str, Any] | None = None
    transitions: dict[str, dict[Any, Any]] = {}
    properties: dict[str, Any] = {}

    for key, value in config.items():
        if not isinstance(key, str):
            raise WorkflowValidationError(
                f"Invalid definition for status {status_id}: key {key!r} is not a string"
            )
        if key == KEY_METADATA:
            metadata = _normalize_metadata(status_id, value)
        elif key == KEY_EDGES:
            for entry in _decode_transitions(status_id, value):
                end_id = canonical_status_id(entry.raw_target, workflow_id)
                if end_id in transitions:
                    logger.debug(
                        f"Duplicate transition {status_id} -> {end_id}: keeping the last definition"
                    )
                transitions[end_id] = entry.config
        else:
            properties[key] = value

    return StatusDefinition(metadata=metadata, transitions=transitions, properties=properties)


def normalize(workflow_id: str, raw: Mapping[str, Any]) -> WorkflowDefinition:
    """Turn a raw workflow definition into its canonical form.

    Args:
        workflow_id: Id of the workflow being defined. Used to complete status
            ids given without their workflow part.
        raw: The raw (shorthand) definition.

    Returns:
        The normalized definition.

    Raises:
        WorkflowValidationError: If the definition is malformed or the graph is
            not well formed.
        WorkflowError: If a status id cannot be parsed.
    """
    if not isinstance(raw, Mapping):
        raise WorkflowValidationError(f"Invalid workflow definition: mapping expected, got {raw!r}")
    raw = copy.deepcopy(raw)

    if raw.get(KEY_INITIAL_STATUS_ID) is None:
        raise WorkflowValidationError(f'Missing "{KEY_INITIAL_STATUS_ID}"')
    initial_status_id = canonical_status_id(raw[KEY_INITIAL_STATUS_ID], workflow_id)

    if raw.get(KEY_NODES) is None:
        raise WorkflowValidationError("No status definition found")

    statuses: dict[str, StatusDefinition] = {}
    end_status_ids: list[str] = []
    for entry in _decode_statuses(workflow_id, raw[KEY_NODES]):
        status_id = parse_status_id(entry.raw_id, workflow_id)
        if status_id.workflow_id != workflow_id:
            raise WorkflowValidationError(
                f"Status {status_id} does not belong to workflow {workflow_id}: "
                f"declare it in the definition of workflow {status_id.workflow_id}"
            )
        status = _normalize_status(workflow_id, str(status_id), entry.config)
        statuses[str(status_id)] = status
        end_status_ids.extend(status.transitions)

    if initial_status_id not in statuses:
        raise WorkflowValidationError(f"Initial status not defined: {initial_status_id}")

    # End statuses in other workflows are checked when those workflows load.
    missing: list[str] = []
    for end_id in end_status_ids:
        if end_id in statuses or end_id in missing:
            continue
        if parse_status_id(end_id).workflow_id == workflow_id:
            missing.append(end_id)
    if missing:
        raise WorkflowValidationError(f"One or more end status are not defined: {missing!r}")

    properties: dict[str, Any] = {}
    for key, value in raw.items():
        if key in (KEY_INITIAL_STATUS_ID, KEY_NODES):
            continue
        if not isinstance(key, str):
            raise WorkflowValidationError(f"Invalid workflow definition key: {key!r}")
        properties[key] = value

    return WorkflowDefinition(
        initial_status_id=initial_status_id,
        statuses=statuses,
        properties=properties,
    )
