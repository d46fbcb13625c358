"""Convert a Gradle build's project and task model into a project graph report."""

from gradlegraph.model import (
    Dependency,
    ExternalNode,
    NodeReport,
    ProjectNode,
    Target,
)
from gradlegraph.pipeline import create_nodes_for_all_projects, run

__all__ = [
    "Dependency",
    "ExternalNode",
    "NodeReport",
    "ProjectNode",
    "Target",
    "create_nodes_for_all_projects",
    "run",
]
