"""Root-relative path rewriting and workspace root discovery."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

PROJECT_ROOT_TOKEN = "{projectRoot}"
WORKSPACE_ROOT_TOKEN = "{workspaceRoot}"

# Files that mark the top of an orchestrated workspace.
_WORKSPACE_MARKERS = ("nx.json", ".gradlegraph.toml")


def replace_root_in_path(path: str, project_root: str, workspace_root: str) -> str | None:
    """Rewrite *path* relative to the project or workspace root.

    Returns the path with ``{projectRoot}`` or ``{workspaceRoot}`` in place of
    the matching prefix, or None if the path lies outside the workspace.
    """
    if path.startswith(project_root):
        return PROJECT_ROOT_TOKEN + path[len(project_root) :]
    if path.startswith(workspace_root):
        return WORKSPACE_ROOT_TOKEN + path[len(workspace_root) :]
    return None


def relative_cwd(cwd: str, workspace_root: str) -> str:
    """Return *cwd* as a ``.``-relative path when it is inside the workspace."""
    if cwd.startswith(workspace_root):
        return "." + cwd[len(workspace_root) :]
    return cwd


def find_workspace_root(start: Path) -> Path:
    """Walk up from *start* to the nearest directory holding a workspace marker.

    Falls back to *start* itself when no marker is found.
    """
    start = start.resolve()
    for candidate in (start, *start.parents):
        for marker in _WORKSPACE_MARKERS:
            if (candidate / marker).exists():
                logger.debug("Workspace root %s (found %s)", candidate, marker)
                return candidate
    return start
