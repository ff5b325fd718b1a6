"""In-memory definition provider."""

from collections.abc import Mapping
from typing import Any

from workflow_source.errors import WorkflowNotFoundError
from workflow_source.providers.provider import DefinitionProvider


class MappingDefinitionProvider(DefinitionProvider):
    """Serve raw definitions held in memory, indexed by workflow id."""

    def __init__(self, definitions: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._definitions: dict[str, Mapping[str, Any]] = dict(definitions or {})

    def add(self, workflow_id: str, definition: Mapping[str, Any]) -> None:
        self._definitions[workflow_id] = definition

    def get_definition(self, workflow_id: str) -> Mapping[str, Any]:
        try:
            return self._definitions[workflow_id]
        except KeyError as e:
            raise WorkflowNotFoundError(f"No workflow definition found for id {workflow_id!r}") from e
