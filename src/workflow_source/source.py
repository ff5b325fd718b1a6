"""Workflow source: lazy, cached access to workflows, statuses and transitions.

Definitions are fetched from a `DefinitionProvider` the first time a workflow is
needed and normalized immediately. Workflow, Status and Transition instances are
then built on demand, the first time each id is queried, and reused afterwards:
a source never holds two instances for the same id.

Thread safety:
    All cache lookups and insertions run under a single re-entrant lock, so
    concurrent first-time lookups of the same id yield the same instance.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Mapping
from typing import Any

from workflow_source.definition import StatusDefinition, WorkflowDefinition, normalize
from workflow_source.entities import EntityClassMap, EntityType, Status, Transition, Workflow
from workflow_source.errors import WorkflowError, WorkflowNotFoundError
from workflow_source.ids import (
    ResolutionContext,
    StatusId,
    camel_to_words,
    is_valid_status_id,
    is_valid_status_local_id,
    is_valid_workflow_id,
    parse_status_id,
)
from workflow_source.providers.provider import DefinitionProvider

logger = logging.getLogger(__name__)


class WorkflowSource:
    """Provide workflow items built from normalized definitions."""

    def __init__(
        self,
        provider: DefinitionProvider,
        class_map: Mapping[Any, Any] | None = None,
    ) -> None:
        """Initialize the source.

        Args:
            provider: Supplies raw definitions by workflow id.
            class_map: Optional implementations for the workflow, status and
                transition entities, merged over the defaults.

        Raises:
            InvalidClassMapError: If ``class_map`` is invalid.
        """
        self.provider = provider
        self._class_map = EntityClassMap.from_config(class_map)

        self._lock = threading.RLock()
        self._definitions: dict[str, WorkflowDefinition] = {}
        self._workflows: dict[str, Workflow] = {}
        self._statuses: dict[str, Status] = {}
        self._transitions: dict[str, list[Transition]] = {}

    # -- identifiers -----------------------------------------------------

    def parse_status_id(self, value: object, context: ResolutionContext = None) -> StatusId:
        return parse_status_id(value, context)

    def is_valid_status_id(self, value: object) -> bool:
        return is_valid_status_id(value)

    def is_valid_workflow_id(self, value: object) -> bool:
        return is_valid_workflow_id(value)

    def is_valid_status_local_id(self, value: object) -> bool:
        return is_valid_status_local_id(value)

    # -- class map -------------------------------------------------------

    def get_class_map(self) -> dict[EntityType, Any]:
        return self._class_map.as_dict()

    def get_class_map_by_type(self, entity_type: EntityType | str) -> Any | None:
        """Return the implementation used for ``entity_type``, or None if the type is unknown."""

        try:
            return self._class_map.get(entity_type)
        except ValueError:
            return None

    # -- definitions -----------------------------------------------------

    def get_workflow_definition(self, workflow_id: str) -> WorkflowDefinition:
        """Return the normalized definition of a workflow, loading it if needed.

        The returned definition is a deep copy: changing it does not affect the
        items served by this source. Use `add_workflow_definition` instead.

        Raises:
            WorkflowNotFoundError: If the provider has no definition for the id.
            WorkflowError: If the id is invalid or the provider fails.
            WorkflowValidationError: If the provided definition is malformed.
        """
        return self._load_definition(workflow_id).model_copy(deep=True)

    def _load_definition(self, workflow_id: str) -> WorkflowDefinition:
        if not is_valid_workflow_id(workflow_id):
            raise WorkflowError(f"Invalid workflow id: {workflow_id!r}")

        with self._lock:
            definition = self._definitions.get(workflow_id)
            if definition is None:
                logger.info(f"Loading workflow definition: {workflow_id}")
                try:
                    raw = self.provider.get_definition(workflow_id)
                except WorkflowError:
                    raise
                except Exception as e:
                    logger.error(
                        f"Definition provider failed for workflow {workflow_id}",
                        extra={"error": str(e)},
                    )
                    raise WorkflowError(
                        f"Failed to load workflow definition {workflow_id}: {e}"
                    ) from e
                definition = normalize(workflow_id, raw)
                self._definitions[workflow_id] = definition
            return definition

    def add_workflow_definition(
        self,
        workflow_id: str,
        definition: Mapping[str, Any],
        overwrite: bool = False,
    ) -> bool:
        """Register a raw definition directly, bypassing the provider.

        Args:
            workflow_id: Id of the workflow.
            definition: The raw definition; it is normalized immediately.
            overwrite: Replace an existing definition for this id.

        Returns:
            True if the definition was stored, False if one already existed and
            ``overwrite`` is False.
        """
        if not is_valid_workflow_id(workflow_id):
            raise WorkflowError(f"Not a valid workflow id: {workflow_id!r}")

        normalized = normalize(workflow_id, definition)
        with self._lock:
            if workflow_id in self._definitions and not overwrite:
                logger.debug(f"Workflow definition already exists: {workflow_id}")
                return False

            replaced = workflow_id in self._definitions
            self._definitions[workflow_id] = normalized
            self._invalidate(workflow_id)
            if replaced:
                logger.info(f"Workflow definition overwritten: {workflow_id}")
            return True

    def _invalidate(self, workflow_id: str) -> None:
        """Drop every cached item built from the definition of ``workflow_id``."""

        self._workflows.pop(workflow_id, None)

        stale_statuses = [
            status_id
            for status_id, status in self._statuses.items()
            if status.workflow_id == workflow_id
        ]
        for status_id in stale_statuses:
            del self._statuses[status_id]

        # Transition lists of other workflows may point into this one.
        stale_transitions = [
            start_id
            for start_id, transitions in self._transitions.items()
            if parse_status_id(start_id).workflow_id == workflow_id
            or any(t.end_status.workflow_id == workflow_id for t in transitions)
        ]
        for start_id in stale_transitions:
            del self._transitions[start_id]

        if stale_statuses or stale_transitions:
            logger.info(
                f"Invalidated cached items of workflow {workflow_id}",
                extra={"statuses": len(stale_statuses), "transition_lists": len(stale_transitions)},
            )

    # -- entities --------------------------------------------------------

    def get_workflow(self, workflow_id: str) -> Workflow | None:
        """Return the workflow ``workflow_id``, or None if no definition can be found for it.

        Raises:
            WorkflowError: If the id is invalid or the provider fails.
            WorkflowValidationError: If the definition is malformed.
        """
        with self._lock:
            workflow = self._workflows.get(workflow_id)
            if workflow is None:
                try:
                    definition = self._load_definition(workflow_id)
                except WorkflowNotFoundError as e:
                    logger.info(f"Workflow not found: {workflow_id}", extra={"reason": str(e)})
                    return None
                initial_status_id = str(parse_status_id(definition.initial_status_id, workflow_id))
                factory = self._class_map.get(EntityType.WORKFLOW)
                workflow = factory(
                    id=workflow_id,
                    initial_status_id=initial_status_id,
                    properties=copy.deepcopy(definition.properties),
                )
                self._workflows[workflow_id] = workflow
            return workflow

    def get_initial_status(self, workflow_id: str) -> Status:
        workflow = self.get_workflow(workflow_id)
        if workflow is None:
            raise WorkflowError(f"No workflow found with id {workflow_id}")
        return self.get_status(workflow.initial_status_id)

    def get_status(self, status_id: str, context: ResolutionContext = None) -> Status:
        """Return the status ``status_id``, building it on first use.

        Args:
            status_id: Canonical or local status id.
            context: Used to complete a local status id.

        Raises:
            WorkflowError: If the id is invalid or no such status is defined.
        """
        workflow_id, local_id = parse_status_id(status_id, context)
        canonical_id = str(StatusId(workflow_id, local_id))

        with self._lock:
            status = self._statuses.get(canonical_id)
            if status is None:
                definition = self._load_definition(workflow_id)
                status_def = definition.get_status(canonical_id)
                if status_def is None:
                    raise WorkflowError(f"No status found with id {canonical_id}")
                status = self._build_status(canonical_id, workflow_id, local_id, status_def)
                self._statuses[canonical_id] = status
            return status

    def _build_status(
        self,
        status_id: str,
        workflow_id: str,
        local_id: str,
        status_def: StatusDefinition,
    ) -> Status:
        properties = copy.deepcopy(status_def.properties)
        label = properties.pop("label", None) or camel_to_words(local_id)
        logger.debug(f"Building status {status_id}")
        factory = self._class_map.get(EntityType.STATUS)
        return factory(
            id=status_id,
            workflow_id=workflow_id,
            label=label,
            metadata=copy.deepcopy(status_def.metadata or {}),
            properties=properties,
        )

    def get_workflow_status_ids(self, workflow_id: str) -> list[str]:
        return self._load_definition(workflow_id).status_ids

    def get_all_statuses(self, workflow_id: str) -> list[Status]:
        """Return every status declared by a workflow."""

        return [self.get_status(status_id) for status_id in self.get_workflow_status_ids(workflow_id)]

    def get_transitions(self, status_id: str, context: ResolutionContext = None) -> list[Transition]:
        """Return the transitions leaving ``status_id``.

        The start status and every end status are built (once) along the way.
        A status without transitions yields an empty list.
        """
        start_id = str(parse_status_id(status_id, context))

        with self._lock:
            transitions = self._transitions.get(start_id)
            if transitions is None:
                start = self.get_status(start_id)
                definition = self._load_definition(start.workflow_id)
                status_def = definition.get_status(start.id)
                factory = self._class_map.get(EntityType.TRANSITION)

                transitions = []
                for end_id, config in (status_def.transitions if status_def else {}).items():
                    end = self.get_status(end_id, start.workflow_id)
                    transitions.append(
                        factory(
                            start_status=start,
                            end_status=end,
                            properties=copy.deepcopy(config),
                        )
                    )
                self._transitions[start_id] = transitions
            return transitions

    def get_transition(
        self, start_id: str, end_id: str, context: ResolutionContext = None
    ) -> Transition | None:
        """Return the transition from ``start_id`` to ``end_id``, or None if there is none.

        ``context`` completes ``start_id`` only. A local ``end_id`` is taken to be
        in the workflow of the start status.
        """
        transitions = self.get_transitions(start_id, context)
        if not transitions:
            return None
        try:
            target = str(parse_status_id(end_id, transitions[0].start_status.workflow_id))
        except WorkflowError:
            logger.debug(f"Not a valid end status id: {end_id!r}")
            return None
        for transition in transitions:
            if transition.end_status.id == target:
                return transition
        return None
