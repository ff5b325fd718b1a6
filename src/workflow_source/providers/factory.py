"""Factory for creating definition providers."""

import logging

from workflow_source.config import WorkflowSourceSettings
from workflow_source.providers.directory import JsonDirectoryDefinitionProvider
from workflow_source.providers.module import ModuleDefinitionProvider
from workflow_source.providers.provider import DefinitionProvider

logger = logging.getLogger(__name__)


class ProviderFactory:
    """Factory for creating definition provider instances."""

    @staticmethod
    def create(settings: WorkflowSourceSettings) -> DefinitionProvider:
        """Create a definition provider based on configuration.

        Args:
            settings: Settings specifying the provider.

        Returns:
            Configured definition provider instance.

        Raises:
            ValueError: If provider type is not supported.
        """
        logger.info(f"Creating definition provider: {settings.provider}")

        if settings.provider == "module":
            return ModuleDefinitionProvider(settings.namespace)
        elif settings.provider == "directory":
            return JsonDirectoryDefinitionProvider(settings.definitions_path)
        else:
            raise ValueError(f"Unsupported definition provider: {settings.provider}")
