"""Serializable data model for Gradle project graph fragments."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Union

# An input is either a root-relative path or {"externalDependencies": [...]}.
TargetInput = Union[str, dict[str, list[str]]]
# A dependsOn entry is "project:task" or a {target, projects, params} descriptor.
TargetDependency = Union[str, dict[str, str]]


@dataclass
class TargetMetadata:
    """Descriptive metadata attached to a target."""

    description: str | None
    technologies: list[str] = field(default_factory=lambda: ["gradle"])
    help_command: str | None = None
    non_atomized_target: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "description": self.description,
            "technologies": list(self.technologies),
            "help": {"command": self.help_command},
        }
        if self.non_atomized_target is not None:
            d["nonAtomizedTarget"] = self.non_atomized_target
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TargetMetadata:
        return cls(
            description=data.get("description"),
            technologies=list(data.get("technologies", ["gradle"])),
            help_command=(data.get("help") or {}).get("command"),
            non_atomized_target=data.get("nonAtomizedTarget"),
        )


@dataclass
class Target:
    """One cacheable, independently invocable unit of work."""

    cache: bool = True
    parallelism: bool = False
    inputs: list[TargetInput] | None = None
    outputs: list[str] | None = None
    depends_on: list[TargetDependency] | None = None
    command: str | None = None
    executor: str | None = None
    metadata: TargetMetadata | None = None
    cwd: str | None = None
    args: str | None = None

    def clone(self) -> Target:
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"cache": self.cache, "parallelism": self.parallelism}
        if self.inputs is not None:
            d["inputs"] = copy.deepcopy(self.inputs)
        if self.outputs is not None:
            d["outputs"] = list(self.outputs)
        if self.depends_on is not None:
            d["dependsOn"] = copy.deepcopy(self.depends_on)
        if self.executor is not None:
            d["executor"] = self.executor
        if self.command is not None:
            d["command"] = self.command
        if self.metadata is not None:
            d["metadata"] = self.metadata.to_dict()
        if self.cwd is not None:
            options: dict[str, str] = {"cwd": self.cwd}
            if self.args is not None:
                options["args"] = self.args
            d["options"] = options
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Target:
        options = data.get("options") or {}
        metadata = data.get("metadata")
        return cls(
            cache=data.get("cache", True),
            parallelism=data.get("parallelism", False),
            inputs=copy.deepcopy(data.get("inputs")),
            outputs=copy.deepcopy(data.get("outputs")),
            depends_on=copy.deepcopy(data.get("dependsOn")),
            command=data.get("command"),
            executor=data.get("executor"),
            metadata=TargetMetadata.from_dict(metadata) if metadata else None,
            cwd=options.get("cwd"),
            args=options.get("args"),
        )


@dataclass
class NodeMetadata:
    """Project-level metadata: target groups, technologies, description."""

    target_groups: dict[str, list[str]] = field(default_factory=dict)
    technologies: list[str] = field(default_factory=lambda: ["gradle"])
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "targetGroups": {k: list(v) for k, v in self.target_groups.items()},
            "technologies": list(self.technologies),
        }
        if self.description is not None:
            d["description"] = self.description
        return d


@dataclass
class ProjectNode:
    """All targets synthesized for one introspected project."""

    name: str
    targets: dict[str, Target] = field(default_factory=dict)
    metadata: NodeMetadata = field(default_factory=NodeMetadata)

    def to_dict(self) -> dict[str, Any]:
        return {
            "targets": {k: t.to_dict() for k, t in self.targets.items()},
            "metadata": self.metadata.to_dict(),
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectNode:
        meta = data.get("metadata") or {}
        return cls(
            name=data["name"],
            targets={
                k: Target.from_dict(v) for k, v in (data.get("targets") or {}).items()
            },
            metadata=NodeMetadata(
                target_groups={
                    k: list(v) for k, v in (meta.get("targetGroups") or {}).items()
                },
                technologies=list(meta.get("technologies", ["gradle"])),
                description=meta.get("description"),
            ),
        )


@dataclass(frozen=True)
class Dependency:
    """A project -> project edge, compared by full value."""

    source: str
    target: str
    source_file: str

    def to_dict(self) -> dict[str, str]:
        return {
            "source": self.source,
            "target": self.target,
            "sourceFile": self.source_file,
        }

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> Dependency:
        return cls(data["source"], data["target"], data["sourceFile"])


@dataclass(frozen=True)
class ExternalDepData:
    version: str | None
    package_name: str
    hash: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "packageName": self.package_name,
            "hash": self.hash,
        }


@dataclass(frozen=True)
class ExternalNode:
    """A resolved third-party artifact."""

    type: str
    name: str
    data: ExternalDepData

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "name": self.name, "data": self.data.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExternalNode:
        dep = data.get("data") or {}
        return cls(
            type=data.get("type", "gradle"),
            name=data["name"],
            data=ExternalDepData(
                version=dep.get("version"),
                package_name=dep["packageName"],
                hash=dep.get("hash"),
            ),
        )


@dataclass
class NodeReport:
    """Complete graph fragment handed to the orchestrator."""

    nodes: dict[str, ProjectNode] = field(default_factory=dict)
    dependencies: set[Dependency] = field(default_factory=set)
    external_nodes: dict[str, ExternalNode] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        deps = sorted(
            self.dependencies, key=lambda d: (d.source, d.target, d.source_file)
        )
        return {
            "nodes": {root: n.to_dict() for root, n in self.nodes.items()},
            "dependencies": [d.to_dict() for d in deps],
            "externalNodes": {k: n.to_dict() for k, n in self.external_nodes.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NodeReport:
        return cls(
            nodes={
                root: ProjectNode.from_dict(n)
                for root, n in (data.get("nodes") or {}).items()
            },
            dependencies={
                Dependency.from_dict(d) for d in data.get("dependencies") or []
            },
            external_nodes={
                k: ExternalNode.from_dict(n)
                for k, n in (data.get("externalNodes") or {}).items()
            },
        )
