"""Orchestrator: snapshot -> per-project synthesis -> aggregated report."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

from gradlegraph.cache import ReportCache, cache_key, fingerprint_project_dir
from gradlegraph.ci import add_test_ci_targets, is_compile_test_task
from gradlegraph.dependencies import dependencies_for_project
from gradlegraph.host import HostProject
from gradlegraph.model import (
    Dependency,
    ExternalNode,
    NodeMetadata,
    NodeReport,
    ProjectNode,
    Target,
)
from gradlegraph.options import (
    apply_gradle_args,
    normalize_options,
    replace_target_group_names,
    replace_target_names,
    synthesis_options,
)
from gradlegraph.paths import find_workspace_root
from gradlegraph.report import aggregate
from gradlegraph.snapshot import load_snapshot
from gradlegraph.targets import process_task

logger = logging.getLogger(__name__)


def project_build_path(project: HostProject) -> str:
    """Return the build tree path used in commands, e.g. ``:app``; root is ``""``."""
    path = project.build_tree_path
    if path.endswith(":"):
        path = path[:-1]
    return path


def process_targets_for_project(
    project: HostProject, workspace_root: str, cwd: str | None = None
) -> tuple[dict[str, Target], dict[str, list[str]], dict[str, ExternalNode]]:
    """Return (targets, target groups, external nodes) for every task of *project*."""
    targets: dict[str, Target] = {}
    target_groups: dict[str, list[str]] = {}
    external_nodes: dict[str, ExternalNode] = {}
    project_root = project.project_dir
    build_path = project_build_path(project)

    logger.debug("%s: process targets", project.name)

    for task in project.tasks:
        try:
            target = process_task(
                task, build_path, project_root, workspace_root, external_nodes, cwd=cwd
            )
            targets[task.name] = target
            if task.group:
                target_groups.setdefault(task.group, []).append(task.name)

            if is_compile_test_task(task.name):
                add_test_ci_targets(
                    task.input_files(),
                    build_path,
                    target,
                    targets,
                    target_groups,
                    project_root,
                    workspace_root,
                )
        except Exception as e:
            logger.info("%s: process task error %s", task.name, e)
            logger.debug("Stack trace:", exc_info=True)

    return targets, target_groups, external_nodes


def create_node_for_project(
    project: HostProject,
    all_projects: Sequence[HostProject],
    workspace_root: str,
    cwd: str | None = None,
) -> NodeReport:
    """Synthesize the partial report for a single project.

    A failure while collecting dependencies leaves the dependency set empty; a
    failure while building targets leaves the project out of ``nodes``.
    """
    logger.info("Create node for %s", project.name)

    dependencies: set[Dependency]
    try:
        dependencies = dependencies_for_project(project, all_projects)
    except Exception as e:
        logger.info("%s: get dependencies error: %s", project.name, e)
        dependencies = set()

    nodes: dict[str, ProjectNode]
    external_nodes: dict[str, ExternalNode]
    try:
        targets, target_groups, external_nodes = process_targets_for_project(
            project, workspace_root, cwd
        )
        node = ProjectNode(
            name=project.name,
            targets=targets,
            metadata=NodeMetadata(
                target_groups=target_groups,
                technologies=["gradle"],
                description=project.description,
            ),
        )
        nodes = {project.project_dir: node}
    except Exception as e:
        logger.info("%s: get nodes error: %s", project.name, e)
        logger.debug("Stack trace:", exc_info=True)
        nodes = {}
        external_nodes = {}

    return NodeReport(nodes, dependencies, external_nodes)


def project_cache_key(
    project: HostProject,
    options: dict[str, Any],
    workspace_root: str,
    cwd: str | None,
    all_projects: Sequence[HostProject] = (),
) -> str:
    """Key a project by identity, effective options and content.

    The content part combines the host's ``fingerprint`` (or, without one, a
    hash of the build declaration files in the project directory) with the
    hash of the project's snapshot entry.  The build tree layout is part of
    the identity since dependency edges point at other projects' directories.
    """
    fingerprint = getattr(project, "fingerprint", None) or fingerprint_project_dir(
        Path(project.project_dir)
    )
    content_hash = getattr(project, "content_hash", None)
    if content_hash:
        fingerprint = f"{fingerprint}:{content_hash}"
    layout = sorted(f"{p.build_tree_path}={p.project_dir}" for p in all_projects)
    identity = (
        f"{project.build_tree_path}@{project.project_dir} in {workspace_root} from {cwd}"
        f" among {','.join(layout)}"
    )
    return cache_key(identity, synthesis_options(options), fingerprint)


def _apply_options(partial: NodeReport, options: dict[str, Any]) -> NodeReport:
    for node in partial.nodes.values():
        node.targets = replace_target_names(node.targets, options)
        apply_gradle_args(node.targets, options)
        replace_target_group_names(node.metadata.target_groups, options)
    return partial


def synthesize_project(
    project: HostProject,
    all_projects: Sequence[HostProject],
    *,
    workspace_root: str,
    cwd: str | None = None,
    options: dict[str, Any] | None = None,
    cache: ReportCache | None = None,
) -> NodeReport:
    """Return the partial report for *project*, reusing *cache* when the key matches."""
    options = normalize_options(options)
    if cwd is None:
        cwd = os.getcwd()
    key = (
        project_cache_key(project, options, workspace_root, cwd, all_projects)
        if cache is not None
        else None
    )

    partial = cache.get(key) if cache is not None else None
    if partial is not None:
        logger.debug("%s: cache hit", project.name)
    else:
        partial = create_node_for_project(project, all_projects, workspace_root, cwd)
        if cache is not None and partial.nodes:
            cache.put(key, partial)

    return _apply_options(partial, options)


def create_nodes_for_all_projects(
    projects: Sequence[HostProject],
    *,
    workspace_root: str,
    cwd: str | None = None,
    options: dict[str, Any] | None = None,
    cache: ReportCache | None = None,
    workers: int | None = None,
) -> NodeReport:
    """Synthesize every project in parallel and fold the partial reports."""
    max_workers = max(1, workers or os.cpu_count() or 1)
    logger.debug("Synthesizing %d projects with %d workers", len(projects), max_workers)

    def _one(project: HostProject) -> NodeReport:
        return synthesize_project(
            project,
            projects,
            workspace_root=workspace_root,
            cwd=cwd,
            options=options,
            cache=cache,
        )

    if max_workers == 1 or len(projects) <= 1:
        partials = [_one(p) for p in projects]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            partials = list(executor.map(_one, projects))

    return aggregate(partials)


def run(
    snapshot_path: Path,
    *,
    output: Path | None = None,
    options: dict[str, Any] | None = None,
    cache_file: Path | None = None,
) -> NodeReport:
    """Run the full synthesis for a snapshot and optionally write the report JSON."""
    snapshot = load_snapshot(snapshot_path)
    workspace_root = snapshot.workspace_root or str(find_workspace_root(Path.cwd()))
    logger.info("Using workspace root %s", workspace_root)

    options = normalize_options(options)
    cache = ReportCache.load(cache_file) if cache_file is not None else ReportCache()

    report = create_nodes_for_all_projects(
        snapshot.projects,
        workspace_root=workspace_root,
        cwd=snapshot.cwd or os.getcwd(),
        options=options,
        cache=cache,
        workers=options.get("workers"),
    )
    logger.debug("Cache: %d hits, %d misses", cache.hits, cache.misses)

    if cache_file is not None:
        cache.save(cache_file)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")
        logger.info("Generated %s", output)

    return report
