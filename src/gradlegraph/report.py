"""Fold per-project partial reports into one NodeReport."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from gradlegraph.errors import ReportConflictError
from gradlegraph.model import NodeReport

logger = logging.getLogger(__name__)


def merge_into(report: NodeReport, partial: NodeReport) -> None:
    """Merge *partial* into *report* in place.

    Raises ReportConflictError when two partials claim the same project root
    with different nodes, or the same external key with different data.
    """
    for root, node in partial.nodes.items():
        existing = report.nodes.get(root)
        if existing is not None and existing != node:
            raise ReportConflictError(
                f"Projects {existing.name!r} and {node.name!r} share root {root}"
            )
        report.nodes[root] = node

    report.dependencies |= partial.dependencies

    for key, external in partial.external_nodes.items():
        existing_external = report.external_nodes.get(key)
        if existing_external is not None and existing_external != external:
            logger.error(
                "Conflicting external node %s: %s vs %s",
                key,
                existing_external.data,
                external.data,
            )
            raise ReportConflictError(f"Conflicting data for external node {key}")
        report.external_nodes[key] = external


def aggregate(partials: Iterable[NodeReport]) -> NodeReport:
    report = NodeReport()
    for partial in partials:
        merge_into(report, partial)
    logger.debug(
        "Report: %d nodes, %d dependencies, %d external nodes",
        len(report.nodes),
        len(report.dependencies),
        len(report.external_nodes),
    )
    return report
