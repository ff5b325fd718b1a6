"""Configuration for workflow sources.

Configuration is loaded from:
- environment variables prefixed with ``WORKFLOW_SOURCE_``
- and a local `.env` file (if present)
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from workflow_source.entities import EntityType

if TYPE_CHECKING:
    from workflow_source.source import WorkflowSource


class WorkflowSourceSettings(BaseSettings):
    """Settings for building a workflow source.

    Environment variables:
    - WORKFLOW_SOURCE_PROVIDER          (module | directory)
    - WORKFLOW_SOURCE_NAMESPACE         (optional)
    - WORKFLOW_SOURCE_DEFINITIONS_PATH  (optional)
    - WORKFLOW_SOURCE_CLASS_MAP         (optional, JSON object)
    - WORKFLOW_SOURCE_LOG_LEVEL         (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `WorkflowSourceSettings(_env_file=path_to_env)`.
    """

    provider: Literal["module", "directory"] = Field(
        default="module",
        description="Definition provider to use",
    )
    namespace: str = Field(
        default="app.workflows",
        description="Module holding workflow definitions (module provider)",
    )
    definitions_path: Path = Field(
        default=Path("workflows"),
        description="Directory holding <workflow id>.json files (directory provider)",
    )
    class_map: dict[str, str] = Field(
        default_factory=dict,
        description="Dotted import paths of alternate workflow/status/transition classes",
    )
    log_level: str = Field(
        default="INFO",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_SOURCE_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("class_map")
    @classmethod
    def _known_entity_types(cls, value: dict[str, str]) -> dict[str, str]:
        known = {entity_type.value for entity_type in EntityType}
        unknown = sorted(set(value) - known)
        if unknown:
            raise ValueError(f"Unknown entity types in class_map: {', '.join(unknown)}")
        return value

    def create_source(self) -> WorkflowSource:
        """Build a workflow source from these settings."""
        from workflow_source.providers.factory import ProviderFactory
        from workflow_source.source import WorkflowSource

        provider = ProviderFactory.create(self)
        return WorkflowSource(provider, class_map=self.class_map or None)
