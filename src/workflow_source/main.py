"""CLI entrypoint for inspecting workflow definitions."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from workflow_source import __version__
from workflow_source.config import WorkflowSourceSettings
from workflow_source.definition import normalize
from workflow_source.errors import WorkflowError, WorkflowValidationError
from workflow_source.logging import configure_logging
from workflow_source.source import WorkflowSource

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-source",
        description="Validate and inspect workflow definitions",
    )
    parser.add_argument("--version", action="version", version=f"workflow-source {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser(
        "validate",
        help="Normalize a JSON workflow definition file and print the result",
    )
    validate.add_argument("path", type=Path, help="Path to the JSON definition file")
    validate.add_argument(
        "--workflow-id",
        default=None,
        help="Workflow id (defaults to the file name without extension)",
    )

    show = subparsers.add_parser(
        "show",
        help="Load a workflow through the configured provider and print its graph",
    )
    show.add_argument("workflow_id", help="Id of the workflow to show")

    return parser


def _validate(path: Path, workflow_id: str | None) -> int:
    workflow_id = workflow_id or path.stem
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to read definition file", extra={"path": str(path), "error": str(e)})
        return 1

    try:
        definition = normalize(workflow_id, raw)
    except WorkflowValidationError as e:
        logger.error("Invalid workflow definition", extra={"workflow_id": workflow_id, "error": str(e)})
        print(f"invalid: {e}")
        return 1

    print(json.dumps(definition.model_dump(mode="json"), indent=2, ensure_ascii=False))
    return 0


def _show(source: WorkflowSource, workflow_id: str) -> int:
    workflow = source.get_workflow(workflow_id)
    if workflow is None:
        print(f"Workflow not found: {workflow_id}")
        return 1

    print(f"Workflow {workflow.id} (initial status: {workflow.initial_status_id})")
    for status in source.get_all_statuses(workflow_id):
        print(f"  {status.id} [{status.label}]")
        for transition in source.get_transitions(status.id):
            print(f"    -> {transition.end_status.id}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = WorkflowSourceSettings()
    except ValidationError as e:
        # Logging isn't configured yet; print a concise error.
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    configure_logging(settings.log_level)

    try:
        if args.command == "validate":
            return _validate(args.path, args.workflow_id)
        if args.command == "show":
            return _show(settings.create_source(), args.workflow_id)
    except WorkflowError as e:
        logger.error("Workflow error", extra={"error": str(e)})
        print(f"error: {e}")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
