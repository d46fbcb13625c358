"""Host protocol: the introspection surface gradlegraph needs from a build tool."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class HostTask(Protocol):
    """A task as seen once the host finished configuration."""

    name: str
    group: str | None
    description: str | None

    def input_files(self) -> list[str]:
        """Absolute paths of the declared source/input files that exist."""
        ...

    def output_files(self) -> list[str]:
        """Absolute paths of the declared output files."""
        ...

    def task_dependencies(self) -> list[tuple[str, str]]:
        """(owning project name, task name) for every task this one depends on."""
        ...


class HostConfiguration(Protocol):
    """A dependency-resolution configuration such as ``compileClasspath``."""

    name: str

    def resolved_projects(self) -> list[str]:
        """Build tree paths of the workspace projects this configuration resolves to."""
        ...


class HostIncludedBuild(Protocol):
    name: str
    project_dir: str


class HostProject(Protocol):
    """An introspectable project."""

    name: str
    build_tree_path: str
    project_dir: str
    build_file: str
    description: str | None

    @property
    def tasks(self) -> Sequence[HostTask]: ...

    @property
    def subprojects(self) -> Sequence[HostProject]: ...

    @property
    def included_builds(self) -> Sequence[HostIncludedBuild]: ...

    def find_configuration(self, name: str) -> HostConfiguration | None:
        """Return the configuration called *name*, or None if the project has none."""
        ...
