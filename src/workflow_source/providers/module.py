"""Definition provider backed by Python modules."""

import importlib
import inspect
import logging
from collections.abc import Mapping
from typing import Any

from workflow_source.errors import WorkflowError, WorkflowNotFoundError
from workflow_source.ids import is_valid_workflow_id
from workflow_source.providers.provider import DefinitionProvider

logger = logging.getLogger(__name__)


class ModuleDefinitionProvider(DefinitionProvider):
    """Look definitions up as attributes of a Python module.

    The workflow id is the attribute name inside ``namespace``. The attribute may be:
    - a class whose instances have a ``get_definition()`` method
    - an object with a ``get_definition()`` method
    - a mapping (the definition itself)
    - a callable returning the definition
    """

    def __init__(self, namespace: str = "app.workflows") -> None:
        self.namespace = namespace

    def get_class_name(self, workflow_id: str) -> str:
        """Return the dotted path of the object providing ``workflow_id``."""

        if not is_valid_workflow_id(workflow_id):
            raise WorkflowError(f"Not a valid workflow id: {workflow_id!r}")
        return f"{self.namespace}.{workflow_id}"

    def get_definition(self, workflow_id: str) -> Mapping[str, Any]:
        name = self.get_class_name(workflow_id)
        try:
            module = importlib.import_module(self.namespace)
        except ImportError as e:
            raise WorkflowError(f"Failed to load workflow definition: {e}") from e

        try:
            target = getattr(module, workflow_id)
        except AttributeError as e:
            raise WorkflowNotFoundError(
                f"Failed to load workflow definition: {name} not found"
            ) from e

        if inspect.isclass(target):
            target = target()

        if isinstance(target, Mapping):
            definition: object = target
        elif callable(getattr(target, "get_definition", None)):
            definition = target.get_definition()
        elif callable(target):
            definition = target()
        else:
            raise WorkflowError(f"Invalid workflow provider class: {name}")

        if not isinstance(definition, Mapping):
            raise WorkflowError(f"Invalid workflow definition returned by {name}: mapping expected")
        logger.debug(f"Loaded workflow definition from {name}")
        return definition
