"""Test configuration and fixtures."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator
from typing import Any

import pytest

from workflow_source.logging import JsonFormatter
from workflow_source.providers import MappingDefinitionProvider
from workflow_source.source import WorkflowSource

ORDER_DEFINITION: dict[str, Any] = {
    "initialStatusId": "new",
    "label": "Customer order",
    "status": {
        "new": {"transition": "paid, cancelled"},
        "paid": {
            "label": "Paid in full",
            "metadata": {"color": "green"},
        },
        "cancelled": None,
    },
}


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """Undo any handler changes made by configure_logging()."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, JsonFormatter):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def order_definition() -> dict[str, Any]:
    """Provide a fresh copy of the Order workflow definition."""
    return copy.deepcopy(ORDER_DEFINITION)


@pytest.fixture
def provider(order_definition: dict[str, Any]) -> MappingDefinitionProvider:
    """Provide an in-memory provider serving the Order workflow."""
    return MappingDefinitionProvider({"Order": order_definition})


@pytest.fixture
def source(provider: MappingDefinitionProvider) -> WorkflowSource:
    """Provide a workflow source backed by the in-memory provider."""
    return WorkflowSource(provider)
