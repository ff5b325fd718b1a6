"""Workflow source.

Turns human-friendly workflow definitions (statuses connected by transitions)
into a validated, lazily built graph of Workflow, Status and Transition items:
- status ids canonicalized as ``workflow/status``
- raw definitions normalized and validated once per workflow
- one shared instance per workflow, status and transition list
"""

__version__ = "0.1.0"

from workflow_source.definition import StatusDefinition, WorkflowDefinition, normalize
from workflow_source.entities import EntityClassMap, EntityType, Status, Transition, Workflow
from workflow_source.errors import (
    InvalidClassMapError,
    WorkflowError,
    WorkflowNotFoundError,
    WorkflowValidationError,
)
from workflow_source.ids import WorkflowContext, parse_status_id
from workflow_source.source import WorkflowSource

__all__ = [
    "__version__",
    "EntityClassMap",
    "EntityType",
    "InvalidClassMapError",
    "Status",
    "StatusDefinition",
    "Transition",
    "Workflow",
    "WorkflowContext",
    "WorkflowDefinition",
    "WorkflowError",
    "WorkflowNotFoundError",
    "WorkflowSource",
    "WorkflowValidationError",
    "normalize",
    "parse_status_id",
]
