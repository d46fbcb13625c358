"""Collect project -> project dependency edges."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from gradlegraph.host import HostProject
from gradlegraph.model import Dependency

logger = logging.getLogger(__name__)

# Configurations whose resolved project references become graph edges.
DEPENDENCY_CONFIGURATIONS = ("compileClasspath", "implementationDependenciesMetadata")


def dependencies_for_project(
    project: HostProject, all_projects: Iterable[HostProject]
) -> set[Dependency]:
    """Return every edge from *project* to another workspace project.

    Edges come from resolved project references in the compile configurations,
    direct subprojects, and included builds.  A configuration that fails to
    resolve contributes nothing; the other sources still apply.
    """
    by_path = {p.build_tree_path: p for p in all_projects}
    source = project.project_dir
    source_file = project.build_file
    dependencies: set[Dependency] = set()

    for config_name in DEPENDENCY_CONFIGURATIONS:
        try:
            configuration = project.find_configuration(config_name)
            if configuration is None:
                logger.debug(
                    "Configuration %s not found in project %s", config_name, project.name
                )
                continue
            resolved = configuration.resolved_projects()
        except Exception as e:
            logger.info(
                "Error checking configuration %s for %s: %s",
                config_name,
                project.name,
                e,
            )
            continue
        for build_tree_path in resolved:
            found = by_path.get(build_tree_path)
            if found is None or found.build_tree_path == project.build_tree_path:
                continue
            dependencies.add(Dependency(source, found.project_dir, source_file))

    for child in project.subprojects:
        dependencies.add(Dependency(source, child.project_dir, source_file))

    for included_build in project.included_builds:
        dependencies.add(Dependency(source, included_build.project_dir, source_file))

    logger.debug("%s: %d dependencies", project.name, len(dependencies))
    return dependencies
