"""Exception hierarchy for workflow sources."""

from __future__ import annotations


class WorkflowError(Exception):
    """Raised when a workflow item cannot be resolved.

    Covers invalid identifiers, unknown workflows or statuses, and definition
    providers that fail to supply a definition.
    """


class WorkflowValidationError(WorkflowError):
    """Raised when a raw workflow definition is malformed."""


class InvalidClassMapError(WorkflowError):
    """Raised when the entity class map is incomplete or invalid."""


class WorkflowNotFoundError(WorkflowError):
    """Raised when no definition can be obtained for a workflow id."""
