"""Command-line interface for gradlegraph."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from gradlegraph.config import read_config_options
from gradlegraph.errors import GradleGraphError
from gradlegraph.pipeline import run

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="gradlegraph",
        description="Turn a Gradle build snapshot into a project graph report.",
    )
    parser.add_argument(
        "snapshot",
        type=Path,
        help="Path to the JSON snapshot written by the Gradle build",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output JSON file path (default: stdout)",
    )
    parser.add_argument(
        "--cache-file",
        type=Path,
        default=None,
        help="Reuse and update synthesized projects stored in this file",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Directory holding .gradlegraph.toml or pyproject.toml (default: cwd)",
    )
    parser.add_argument(
        "--test-target-name",
        default=None,
        help="Name of the non-atomized test target",
    )
    parser.add_argument(
        "--ci-target-name",
        default=None,
        help="Prefix for the atomized CI test targets",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of projects synthesized in parallel (default: CPU count)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) output",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    if args.verbose:
        logging.getLogger("gradlegraph").setLevel(logging.DEBUG)

    options = read_config_options(args.config_dir or Path.cwd())
    for key, value in (
        ("testTargetName", args.test_target_name),
        ("ciTargetName", args.ci_target_name),
        ("workers", args.workers),
    ):
        if value is not None:
            options[key] = value

    cache_file = args.cache_file
    if cache_file is None and options.get("cacheFile"):
        cache_file = Path(options["cacheFile"])

    try:
        report = run(
            args.snapshot,
            output=args.output,
            options=options,
            cache_file=cache_file,
        )
    except GradleGraphError as e:
        logger.error("%s", e)
        return 1

    if args.output is None:
        json.dump(report.to_dict(), sys.stdout, indent=2)
        sys.stdout.write("\n")
    return 0
