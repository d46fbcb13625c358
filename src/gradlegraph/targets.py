"""Convert host tasks into targets."""

from __future__ import annotations

import functools
import logging
import os
import platform

from gradlegraph.external import external_dep_from_input_file, is_artifact
from gradlegraph.host import HostTask
from gradlegraph.model import (
    ExternalNode,
    Target,
    TargetDependency,
    TargetInput,
    TargetMetadata,
)
from gradlegraph.paths import relative_cwd, replace_root_in_path

logger = logging.getLogger(__name__)


@functools.cache
def gradlew_command() -> str:
    """Return the wrapper invocation for the current operating system."""
    if platform.system().lower().startswith("win"):
        return ".\\gradlew.bat"
    return "./gradlew"


def get_metadata(description: str | None, project_build_path: str, task_name: str) -> TargetMetadata:
    return TargetMetadata(
        description=description,
        technologies=["gradle"],
        help_command=f"{gradlew_command()} help --task {project_build_path}:{task_name}",
    )


def get_inputs_for_task(
    task: HostTask,
    project_root: str,
    workspace_root: str,
    external_nodes: dict[str, ExternalNode] | None,
) -> list[TargetInput] | None:
    """Return the task's inputs with roots replaced, or None if empty or unreadable.

    Artifacts outside the workspace are registered in *external_nodes* and
    collected into a single trailing ``{"externalDependencies": [...]}`` entry.
    """
    try:
        inputs: list[TargetInput] = []
        external_dependencies: list[str] = []
        for path in task.input_files():
            mapped = replace_root_in_path(path, project_root, workspace_root)
            if mapped is not None:
                inputs.append(mapped)
                continue
            if external_nodes is None or not is_artifact(path):
                continue
            try:
                external_dependencies.append(
                    external_dep_from_input_file(path, external_nodes)
                )
            except ValueError as e:
                logger.info("%s: get external dependency error %s", task.name, e)
        if external_dependencies:
            inputs.append({"externalDependencies": external_dependencies})
        return inputs or None
    except Exception as e:
        logger.info("Error getting inputs for %s: %s", task.name, e)
        logger.debug("Stack trace:", exc_info=True)
        return None


def get_outputs_for_task(
    task: HostTask, project_root: str, workspace_root: str
) -> list[str] | None:
    """Return the task's outputs inside the workspace, or None if empty or unreadable."""
    try:
        outputs = []
        for path in task.output_files():
            mapped = replace_root_in_path(path, project_root, workspace_root)
            if mapped is not None:
                outputs.append(mapped)
        return outputs or None
    except Exception as e:
        logger.info("Error getting outputs for %s: %s", task.name, e)
        logger.debug("Stack trace:", exc_info=True)
        return None


def get_depends_on_for_task(task: HostTask) -> list[TargetDependency] | None:
    try:
        depends_on: list[TargetDependency] = [
            f"{project_name}:{task_name}"
            for project_name, task_name in task.task_dependencies()
        ]
        return depends_on or None
    except Exception as e:
        logger.info("Error getting dependencies for %s: %s", task.name, e)
        logger.debug("Stack trace:", exc_info=True)
        return None


def process_task(
    task: HostTask,
    project_build_path: str,
    project_root: str,
    workspace_root: str,
    external_nodes: dict[str, ExternalNode] | None,
    *,
    cwd: str | None = None,
) -> Target:
    """Build the target for *task*.

    Cache is always on and parallelism always off.  Inputs, outputs and
    dependsOn are left unset when empty or when the host cannot report them.
    """
    logger.debug("Process %s for %s", task.name, project_root)
    target = Target(cache=True, parallelism=False)

    target.inputs = get_inputs_for_task(task, project_root, workspace_root, external_nodes)
    if target.inputs:
        logger.debug("%s: processed %d inputs", task.name, len(target.inputs))

    target.outputs = get_outputs_for_task(task, project_root, workspace_root)
    if target.outputs:
        logger.debug("%s: processed %d outputs", task.name, len(target.outputs))

    target.depends_on = get_depends_on_for_task(task)
    if target.depends_on:
        logger.debug("%s: processed %d dependsOn", task.name, len(target.depends_on))

    target.command = f"{gradlew_command()} {project_build_path}:{task.name}"
    target.metadata = get_metadata(
        task.description or f"Run {task.name}", project_build_path, task.name
    )
    target.cwd = relative_cwd(cwd if cwd is not None else os.getcwd(), workspace_root)
    return target
