#!/usr/bin/env python3
"""Programmatic usage example.

This demonstrates using a workflow source directly:

* register a workflow written in the shorthand syntax
* walk its graph starting from the initial status
* resolve a local status id against a host entity
"""

from __future__ import annotations

from dataclasses import dataclass

from workflow_source import Status, WorkflowSource
from workflow_source.logging import configure_logging
from workflow_source.providers import MappingDefinitionProvider

ORDER = {
    "initialStatusId": "new",
    "label": "Customer order",
    "status": {
        "new": {"transition": "paid, cancelled"},
        "paid": {
            "label": "Paid in full",
            "metadata": {"color": "green"},
            "transition": {"shipped": {"label": "Ship"}, "refunded": None},
        },
        "shipped": None,
        "refunded": None,
        "cancelled": [],
    },
}


@dataclass
class Order:
    """A minimal host entity able to complete local status ids."""

    status: Status | None = None

    def has_workflow_status(self) -> bool:
        return self.status is not None

    def get_workflow_status(self) -> Status | None:
        return self.status

    def get_default_workflow_id(self) -> str | None:
        return "Order"


def main() -> int:
    configure_logging("INFO")

    source = WorkflowSource(MappingDefinitionProvider({"Order": ORDER}))

    workflow = source.get_workflow("Order")
    assert workflow is not None
    print(f"{workflow.id}: {workflow.properties.get('label')}")

    for status in source.get_all_statuses("Order"):
        targets = ", ".join(t.end_status.id for t in source.get_transitions(status.id))
        print(f"  {status.label:<14} -> {targets or '(final)'}")

    order = Order()
    order.status = source.get_status("new", order)
    transition = source.get_transition(order.status.id, "paid", order)
    print(f"Can pay a new order: {transition is not None}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
