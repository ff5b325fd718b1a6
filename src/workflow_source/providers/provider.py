"""Abstract base class for definition providers."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class DefinitionProvider(ABC):
    """Abstract base class for definition providers.

    A provider supplies the raw definition of a workflow given its id. How the
    definition is stored (module, file, database) is entirely the provider's
    concern; the source only normalizes what it gets back.
    """

    @abstractmethod
    def get_definition(self, workflow_id: str) -> Mapping[str, Any]:
        """Return the raw definition of a workflow.

        Args:
            workflow_id: A valid workflow id.

        Returns:
            The raw definition.

        Raises:
            WorkflowNotFoundError: If there is no definition for this id.
            WorkflowError: If the definition exists but cannot be supplied.
        """
        pass
