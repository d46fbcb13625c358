"""Plugin options: defaults, hashing, and option-driven target renames."""

from __future__ import annotations

import hashlib
import json
import os
from typing import Any

from gradlegraph.ci import CI_TARGET_NAME, CI_TARGET_PREFIX
from gradlegraph.model import Target

DEFAULT_OPTIONS: dict[str, Any] = {
    "testTargetName": "test",
    "classesTargetName": "classes",
    "buildTargetName": "build",
    "ciTargetName": "test-ci",
}

# Options that affect the run but not the content of a project node.
_RUNTIME_ONLY_OPTIONS = frozenset({"workers", "cacheFile"})


def normalize_options(options: dict[str, Any] | None) -> dict[str, Any]:
    normalized = dict(DEFAULT_OPTIONS)
    for key, value in (options or {}).items():
        if value is not None:
            normalized[key] = value
    return normalized


def synthesis_options(options: dict[str, Any]) -> dict[str, Any]:
    """The subset of *options* that can change a synthesized node."""
    return {k: v for k, v in options.items() if k not in _RUNTIME_ONLY_OPTIONS}


def hash_options(options: dict[str, Any]) -> str:
    payload = json.dumps(options, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def is_ci() -> bool:
    value = os.environ.get("CI", "")
    return value.lower() not in ("", "0", "false", "no")


def _is_ci_target(name: str) -> bool:
    return name == CI_TARGET_NAME or name.startswith(CI_TARGET_PREFIX)


def _renamed(name: str, options: dict[str, Any]) -> str:
    explicit = options.get(f"{name}TargetName")
    if isinstance(explicit, str) and explicit:
        return explicit
    ci_target_name = options.get("ciTargetName")
    if ci_target_name and _is_ci_target(name):
        return ci_target_name + name[len(CI_TARGET_NAME) :]
    return name


def replace_target_names(
    targets: dict[str, Target], options: dict[str, Any], ci: bool | None = None
) -> dict[str, Target]:
    """Return *targets* keyed by their option-configured names.

    ``<task>TargetName`` renames a single target; ``ciTargetName`` replaces the
    ``ci`` prefix of the aggregate and atomized test targets.  When running in
    CI, string dependencies on ``:test`` are pointed at the CI target instead.
    """
    if ci is None:
        ci = is_ci()
    ci_target_name = options.get("ciTargetName")
    renamed: dict[str, Target] = {}

    for task_name, target in targets.items():
        target_name = _renamed(task_name, options)
        renamed[target_name] = target

        if task_name == CI_TARGET_NAME and ci_target_name:
            if target.metadata is not None:
                target.metadata.non_atomized_target = options.get("testTargetName")
            for dep in target.depends_on or []:
                if isinstance(dep, dict) and _is_ci_target(dep.get("target", "")):
                    dep["target"] = _renamed(dep["target"], options)

        if ci and ci_target_name and target.depends_on:
            target.depends_on = [
                dep[: -len(":test")] + f":{ci_target_name}"
                if isinstance(dep, str) and dep.endswith(":test")
                else dep
                for dep in target.depends_on
            ]

    return renamed


def replace_target_group_names(
    target_groups: dict[str, list[str]], options: dict[str, Any]
) -> dict[str, list[str]]:
    """Rename group members in place to match replace_target_names."""
    for group_name, members in target_groups.items():
        target_groups[group_name] = [_renamed(name, options) for name in members]
    return target_groups


def apply_gradle_args(targets: dict[str, Target], options: dict[str, Any]) -> dict[str, Target]:
    """Set ``options.args`` from ``gradleArgs`` on every target that runs Gradle."""
    gradle_args = options.get("gradleArgs")
    if not gradle_args:
        return targets
    for target in targets.values():
        if target.command is not None and target.cwd is not None:
            target.args = gradle_args
    return targets
