"""Definition provider reading JSON files from a directory."""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from workflow_source.errors import WorkflowError, WorkflowNotFoundError
from workflow_source.ids import is_valid_workflow_id
from workflow_source.providers.provider import DefinitionProvider

logger = logging.getLogger(__name__)


class JsonDirectoryDefinitionProvider(DefinitionProvider):
    """Read definitions from ``<directory>/<workflow id>.json`` files."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, workflow_id: str) -> Path:
        if not is_valid_workflow_id(workflow_id):
            raise WorkflowError(f"Not a valid workflow id: {workflow_id!r}")
        return self.directory / f"{workflow_id}.json"

    def get_definition(self, workflow_id: str) -> Mapping[str, Any]:
        path = self.path_for(workflow_id)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise WorkflowNotFoundError(f"No workflow definition file found: {path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise WorkflowError(f"Failed to read workflow definition {path}: {e}") from e

        if not isinstance(raw, dict):
            raise WorkflowError(f"Invalid workflow definition in {path}: JSON object expected")
        logger.debug("Loaded workflow definition", extra={"path": str(path)})
        return raw
