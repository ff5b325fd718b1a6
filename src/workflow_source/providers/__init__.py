"""Definition providers package initialization."""

from workflow_source.providers.directory import JsonDirectoryDefinitionProvider
from workflow_source.providers.memory import MappingDefinitionProvider
from workflow_source.providers.module import ModuleDefinitionProvider
from workflow_source.providers.provider import DefinitionProvider

__all__ = [
    "DefinitionProvider",
    "JsonDirectoryDefinitionProvider",
    "MappingDefinitionProvider",
    "ModuleDefinitionProvider",
]
