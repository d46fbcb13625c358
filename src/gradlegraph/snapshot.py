"""Host model read from a JSON snapshot taken after Gradle configuration.

The snapshot is written by the host build once every project is configured,
so the whole synthesis works from one consistent view of the build.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gradlegraph.errors import IntrospectionError, SnapshotError

logger = logging.getLogger(__name__)


@dataclass
class SnapshotTask:
    name: str
    group: str | None = None
    description: str | None = None
    inputs: list[str] = field(default_factory=list)
    outputs: list[str] = field(default_factory=list)
    depends_on: list[tuple[str, str]] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    check_exists: bool = False

    def _check(self, field_name: str) -> None:
        message = self.errors.get(field_name)
        if message is not None:
            raise IntrospectionError(f"{self.name}: {message}")

    def input_files(self) -> list[str]:
        self._check("inputs")
        if self.check_exists:
            return [p for p in self.inputs if os.path.exists(p)]
        return list(self.inputs)

    def output_files(self) -> list[str]:
        self._check("outputs")
        return list(self.outputs)

    def task_dependencies(self) -> list[tuple[str, str]]:
        self._check("dependsOn")
        return list(self.depends_on)


@dataclass
class SnapshotConfiguration:
    name: str
    project_dependencies: list[str] = field(default_factory=list)
    error: str | None = None

    def resolved_projects(self) -> list[str]:
        if self.error is not None:
            raise IntrospectionError(f"Could not resolve {self.name}: {self.error}")
        return list(self.project_dependencies)


@dataclass
class SnapshotIncludedBuild:
    name: str
    project_dir: str


@dataclass
class SnapshotProject:
    name: str
    build_tree_path: str
    project_dir: str
    build_file: str
    description: str | None = None
    fingerprint: str | None = None
    content_hash: str | None = None
    task_list: list[SnapshotTask] = field(default_factory=list)
    configurations: dict[str, SnapshotConfiguration] = field(default_factory=dict)
    subproject_paths: list[str] = field(default_factory=list)
    included_build_list: list[SnapshotIncludedBuild] = field(default_factory=list)
    registry: dict[str, SnapshotProject] = field(default_factory=dict, repr=False, compare=False)

    @property
    def tasks(self) -> Sequence[SnapshotTask]:
        return self.task_list

    @property
    def subprojects(self) -> Sequence[SnapshotProject]:
        children = []
        for path in self.subproject_paths:
            child = self.registry.get(path)
            if child is None:
                logger.debug("%s: unknown subproject %s", self.name, path)
                continue
            children.append(child)
        return children

    @property
    def included_builds(self) -> Sequence[SnapshotIncludedBuild]:
        return self.included_build_list

    def find_configuration(self, name: str) -> SnapshotConfiguration | None:
        return self.configurations.get(name)


@dataclass
class Snapshot:
    workspace_root: str | None
    cwd: str | None
    projects: list[SnapshotProject]


def _require(data: dict[str, Any], key: str, where: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise SnapshotError(f"{where}: missing {key!r}") from None


def _task_from_dict(data: dict[str, Any], check_exists: bool) -> SnapshotTask:
    name = _require(data, "name", "task")
    depends_on = []
    for dep in data.get("dependsOn") or []:
        if isinstance(dep, str):
            project, _, task = dep.rpartition(":")
            depends_on.append((project, task))
        else:
            depends_on.append((dep.get("project", ""), _require(dep, "task", name)))
    return SnapshotTask(
        name=name,
        group=data.get("group"),
        description=data.get("description"),
        inputs=list(data.get("inputs") or []),
        outputs=list(data.get("outputs") or []),
        depends_on=depends_on,
        errors=dict(data.get("error") or {}),
        check_exists=check_exists,
    )


def _content_hash(data: dict[str, Any]) -> str:
    payload = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _project_from_dict(data: dict[str, Any], check_exists: bool) -> SnapshotProject:
    name = _require(data, "name", "project")
    configurations = {}
    for config in data.get("configurations") or []:
        config_name = _require(config, "name", name)
        configurations[config_name] = SnapshotConfiguration(
            name=config_name,
            project_dependencies=list(config.get("projectDependencies") or []),
            error=config.get("error"),
        )
    return SnapshotProject(
        name=name,
        build_tree_path=_require(data, "path", name),
        project_dir=_require(data, "projectDir", name),
        build_file=_require(data, "buildFile", name),
        description=data.get("description"),
        fingerprint=data.get("fingerprint"),
        content_hash=_content_hash(data),
        task_list=[_task_from_dict(t, check_exists) for t in data.get("tasks") or []],
        configurations=configurations,
        subproject_paths=list(data.get("subprojects") or []),
        included_build_list=[
            SnapshotIncludedBuild(
                name=_require(b, "name", name), project_dir=_require(b, "projectDir", name)
            )
            for b in data.get("includedBuilds") or []
        ],
    )


def snapshot_from_dict(data: dict[str, Any]) -> Snapshot:
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")
    check_exists = bool(data.get("checkExists", False))
    try:
        projects = [_project_from_dict(p, check_exists) for p in data.get("projects") or []]
    except (TypeError, AttributeError) as e:
        raise SnapshotError(f"Malformed snapshot: {e}") from e

    registry: dict[str, SnapshotProject] = {}
    for project in projects:
        if project.build_tree_path in registry:
            raise SnapshotError(f"Duplicate project path {project.build_tree_path}")
        registry[project.build_tree_path] = project
    for project in projects:
        project.registry = registry

    return Snapshot(
        workspace_root=data.get("workspaceRoot"),
        cwd=data.get("cwd"),
        projects=projects,
    )


def load_snapshot(path: Path) -> Snapshot:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SnapshotError(f"Could not read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"{path} is not valid JSON: {e}") from e
    logger.debug("Loaded snapshot %s", path)
    return snapshot_from_dict(data)
