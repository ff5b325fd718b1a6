"""Status and workflow identifiers.

A status is identified across all workflows by its canonical id
``"<workflow id>/<status local id>"``. Both parts start with a letter followed by
letters, digits or hyphens.

When only the local part is given (``"draft"``), the workflow part is completed
from a context: either an explicit fallback workflow id, or a host entity that
knows which workflow it is currently in.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, NamedTuple, Protocol, runtime_checkable

from workflow_source.errors import WorkflowError

if TYPE_CHECKING:
    from workflow_source.entities import Status

SEPARATOR = "/"
ID_PATTERN = re.compile(r"[a-zA-Z]+[a-zA-Z0-9-]*")


@runtime_checkable
class WorkflowContext(Protocol):
    """A host entity able to tell which workflow an incomplete status id refers to."""

    def has_workflow_status(self) -> bool: ...

    def get_workflow_status(self) -> Status | None: ...

    def get_default_workflow_id(self) -> str | None: ...


ResolutionContext = WorkflowContext | str | None


class StatusId(NamedTuple):
    workflow_id: str
    local_id: str

    def __str__(self) -> str:
        return f"{self.workflow_id}{SEPARATOR}{self.local_id}"


def is_valid_workflow_id(value: object) -> bool:
    return isinstance(value, str) and ID_PATTERN.fullmatch(value) is not None


def is_valid_status_local_id(value: object) -> bool:
    return isinstance(value, str) and ID_PATTERN.fullmatch(value) is not None


def evaluate_workflow_id(context: ResolutionContext) -> str | None:
    """Return the workflow id a context resolves to, or None."""

    if context is None:
        return None
    if isinstance(context, str):
        return context or None
    if not isinstance(context, WorkflowContext):
        raise WorkflowError(f"Not a valid resolution context: {context!r}")

    if context.has_workflow_status():
        status = context.get_workflow_status()
        if status is not None:
            return status.workflow_id
    return context.get_default_workflow_id()


def parse_status_id(value: object, context: ResolutionContext = None) -> StatusId:
    """Split a status id into its workflow id and local id.

    Args:
        value: A canonical (``"post/draft"``) or local (``"draft"``) status id.
        context: Fallback workflow id, or a host entity used to complete a
            local status id.

    Returns:
        The (workflow id, local id) pair.

    Raises:
        WorkflowError: If the value is malformed or its workflow id cannot be
            resolved.
    """
    if not value or not isinstance(value, str):
        raise WorkflowError(f"Not a valid status id: a non-empty string is expected - status = {value!r}")

    tokens = value.split(SEPARATOR)
    if len(tokens) == 1:
        workflow_id = evaluate_workflow_id(context)
        if workflow_id is None:
            raise WorkflowError(
                f"Not a valid status id format: failed to get workflow id - status = {value!r}"
            )
        tokens = [workflow_id, tokens[0]]
    elif len(tokens) != 2:
        raise WorkflowError(f"Not a valid status id format: {value!r}")

    workflow_id, local_id = tokens
    if not is_valid_workflow_id(workflow_id):
        raise WorkflowError(f"Not a valid status id: incorrect workflow id format in {value!r}")
    if not is_valid_status_local_id(local_id):
        raise WorkflowError(f"Not a valid status id: incorrect status local id format in {value!r}")
    return StatusId(workflow_id, local_id)


def canonical_status_id(value: object, context: ResolutionContext = None) -> str:
    return str(parse_status_id(value, context))


def is_valid_status_id(value: object) -> bool:
    """Return True if ``value`` is a complete, well-formed status id."""

    try:
        parse_status_id(value)
    except WorkflowError:
        return False
    return True


_UPPER_RUN = re.compile(r"(?<![A-Z])[A-Z]")


def camel_to_words(name: str) -> str:
    """Turn a local status id into a human-readable label.

    ``"readyToPublish"`` becomes ``"Ready To Publish"`` and ``"in-review"``
    becomes ``"In Review"``.
    """

    spaced = _UPPER_RUN.sub(lambda m: " " + m.group(0), name)
    for char in "-_.":
        spaced = spaced.replace(char, " ")
    label = spaced.strip().lower()
    return " ".join(word[:1].upper() + word[1:] for word in label.split(" "))
