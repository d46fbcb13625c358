"""Read plugin options from .gradlegraph.toml or pyproject.toml."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def read_config_options(workspace_dir: Path) -> dict[str, Any]:
    """Return the options table for *workspace_dir*, or an empty dict."""
    # Try .gradlegraph.toml first
    config_toml = workspace_dir / ".gradlegraph.toml"
    if config_toml.exists():
        try:
            with open(config_toml, "rb") as f:
                data = tomllib.load(f)
            return dict(data.get("gradlegraph", {}))
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Could not read %s: %s", config_toml, e)

    # Fall back to [tool.gradlegraph] in pyproject.toml
    pyproject = workspace_dir / "pyproject.toml"
    if pyproject.exists():
        try:
            with open(pyproject, "rb") as f:
                data = tomllib.load(f)
            return dict(data.get("tool", {}).get("gradlegraph", {}))
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Could not read %s: %s", pyproject, e)

    return {}
