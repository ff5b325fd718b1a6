"""Workflow, status and transition entities, and the class map used to build them."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ImportString, ValidationError

from workflow_source.errors import InvalidClassMapError
from workflow_source.ids import SEPARATOR


class EntityType(str, Enum):
    WORKFLOW = "workflow"
    STATUS = "status"
    TRANSITION = "transition"


@dataclass(frozen=True, slots=True, eq=False)
class Workflow:
    id: str
    initial_status_id: str
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True, eq=False)
class Status:
    """A named state within exactly one workflow.

    Instances are shared: a source builds at most one `Status` per canonical id,
    so identity comparison is meaningful.
    """

    id: str
    workflow_id: str
    label: str
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def local_id(self) -> str:
        return self.id.split(SEPARATOR, 1)[1]

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)


@dataclass(frozen=True, slots=True, eq=False)
class Transition:
    """A directed edge between two statuses.

    `properties` holds the per-transition configuration found in the
    definition; it is interpreted by the host.
    """

    start_status: Status
    end_status: Status
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return f"{self.start_status.id}->{self.end_status.id}"

    @property
    def label(self) -> str | None:
        label = self.properties.get("label")
        return label if isinstance(label, str) else None


EntityFactory = ImportString[Callable[..., Any]]


class EntityClassMap(BaseModel):
    """Implementation used to build each entity type.

    Values are callables invoked with keyword arguments matching the default
    entity dataclasses, or dotted import paths to such callables
    (e.g. ``"myapp.workflow.AuditedStatus"``).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    workflow: EntityFactory = Workflow
    status: EntityFactory = Status
    transition: EntityFactory = Transition

    @classmethod
    def from_config(cls, class_map: Mapping[Any, Any] | None) -> EntityClassMap:
        """Build a class map, merging ``class_map`` over the default implementations.

        Raises:
            InvalidClassMapError: If ``class_map`` is not a non-empty mapping, names an
                unknown entity type, or leaves an entity type without implementation.
        """
        if class_map is None:
            return cls()
        if not isinstance(class_map, Mapping) or len(class_map) == 0:
            raise InvalidClassMapError("Invalid property type: 'class_map' must be a non-empty mapping")

        overrides: dict[str, Any] = {}
        for key, value in class_map.items():
            try:
                entity_type = EntityType(key)
            except ValueError as e:
                raise InvalidClassMapError(f"Invalid class map key: unknown type {key!r}") from e
            if not value:
                raise InvalidClassMapError(
                    f"Invalid class map value: missing class for type {entity_type.value}"
                )
            overrides[entity_type.value] = value

        try:
            return cls(**overrides)
        except ValidationError as e:
            raise InvalidClassMapError(f"Invalid class map value: {e}") from e

    def get(self, entity_type: EntityType | str) -> Callable[..., Any]:
        return getattr(self, EntityType(entity_type).value)

    def as_dict(self) -> dict[EntityType, Callable[..., Any]]:
        return {entity_type: self.get(entity_type) for entity_type in EntityType}
