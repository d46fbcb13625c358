"""Split test compilation into one cacheable CI target per test class."""

from __future__ import annotations

import logging
import os
import re

from gradlegraph.model import Target
from gradlegraph.paths import replace_root_in_path
from gradlegraph.targets import get_metadata, gradlew_command

logger = logging.getLogger(__name__)

TEST_CI_TARGET_GROUP = "verification"
CI_TARGET_NAME = "ci"
CI_TARGET_PREFIX = "ci--"
COMPILE_TEST_PREFIX = "compileTest"

# FooTest, FooTests, FooTest2, FooTests10
_TEST_FILE_RE = re.compile(r".*(Test)(s)?\d*")


def is_compile_test_task(task_name: str) -> bool:
    return task_name.startswith(COMPILE_TEST_PREFIX)


def base_file_name(path: str) -> str:
    """Return the file name of *path* up to its first dot."""
    return os.path.basename(path.replace("\\", "/")).split(".")[0]


def is_test_file(path: str, workspace_root: str) -> bool:
    return path.startswith(workspace_root) and bool(
        _TEST_FILE_RE.fullmatch(base_file_name(path))
    )


def add_test_ci_targets(
    test_files: list[str],
    project_build_path: str,
    target: Target,
    targets: dict[str, Target],
    target_groups: dict[str, list[str]],
    project_root: str,
    workspace_root: str,
) -> None:
    """Add a ``ci--<Class>`` target per test file plus an aggregate ``ci`` target.

    *targets* and *target_groups* are modified in place.  Nothing is added when
    no file looks like a test class.
    """
    depends_on: list[dict[str, str]] = []
    gradlew = gradlew_command()

    for test_file in test_files:
        if not is_test_file(test_file, workspace_root):
            continue
        file_name = base_file_name(test_file)
        test_ci_target = target.clone()
        test_ci_target.command = f"{gradlew} {project_build_path}:test --tests {file_name}"
        test_ci_target.metadata = get_metadata(
            f"Runs Gradle test {file_name} in CI", project_build_path, "test"
        )
        test_ci_target.cache = True
        test_ci_target.parallelism = False
        test_ci_target.inputs = [
            replace_root_in_path(test_file, project_root, workspace_root)
        ]

        target_name = f"{CI_TARGET_PREFIX}{file_name}"
        targets[target_name] = test_ci_target
        target_groups.setdefault(TEST_CI_TARGET_GROUP, []).append(target_name)
        depends_on.append(
            {"target": target_name, "projects": "self", "params": "forward"}
        )

    if not depends_on:
        return

    targets[CI_TARGET_NAME] = Target(
        cache=True,
        parallelism=False,
        executor="nx:noop",
        depends_on=list(depends_on),
        metadata=get_metadata("Runs Gradle Tests in CI", project_build_path, "test"),
    )
    target_groups[TEST_CI_TARGET_GROUP].append(CI_TARGET_NAME)
    logger.debug(
        "%s: added %d CI test targets", project_build_path or ":", len(depends_on)
    )
