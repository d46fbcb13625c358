"""
Tests for project dependency edges.
"""
from unittest.mock import patch

from gradlegraph.dependencies import dependencies_for_project
from gradlegraph.model import Dependency
from gradlegraph.snapshot import snapshot_from_dict


def _project(name, path, configurations=(), subprojects=(), included_builds=()):
    project_dir = "/ws" if path == ":" else f"/ws/{name}"
    return {
        "name": name,
        "path": path,
        "projectDir": project_dir,
        "buildFile": f"{project_dir}/build.gradle.kts",
        "configurations": list(configurations),
        "subprojects": list(subprojects),
        "includedBuilds": list(included_builds),
    }


def _projects(*projects):
    return {p.build_tree_path: p for p in snapshot_from_dict({"projects": list(projects)}).projects}


class TestDependenciesForProject:
    def test_configuration_edges_are_deduplicated(self):
        projects = _projects(
            _project(
                "app",
                ":app",
                configurations=[
                    {"name": "compileClasspath", "projectDependencies": [":lib"]},
                    {"name": "implementationDependenciesMetadata", "projectDependencies": [":lib"]},
                ],
            ),
            _project("lib", ":lib"),
        )
        deps = dependencies_for_project(projects[":app"], projects.values())
        assert deps == {Dependency("/ws/app", "/ws/lib", "/ws/app/build.gradle.kts")}

    def test_other_configurations_are_ignored(self):
        projects = _projects(
            _project(
                "app",
                ":app",
                configurations=[{"name": "testRuntimeClasspath", "projectDependencies": [":lib"]}],
            ),
            _project("lib", ":lib"),
        )
        assert dependencies_for_project(projects[":app"], projects.values()) == set()

    def test_matches_by_identity_not_name(self):
        shared = _project("core", ":feature:core")
        shared["projectDir"] = "/ws/feature/core"
        other = _project("core", ":platform:core")
        other["projectDir"] = "/ws/platform/core"
        projects = _projects(
            _project(
                "app",
                ":app",
                configurations=[
                    {"name": "compileClasspath", "projectDependencies": [":platform:core"]}
                ],
            ),
            shared,
            other,
        )
        deps = dependencies_for_project(projects[":app"], projects.values())
        assert {d.target for d in deps} == {"/ws/platform/core"}

    def test_unknown_project_references_are_skipped(self):
        projects = _projects(
            _project(
                "app",
                ":app",
                configurations=[{"name": "compileClasspath", "projectDependencies": [":gone"]}],
            ),
        )
        assert dependencies_for_project(projects[":app"], projects.values()) == set()

    def test_subprojects_and_included_builds(self):
        projects = _projects(
            _project(
                "ws",
                ":",
                subprojects=[":app"],
                included_builds=[{"name": "build-logic", "projectDir": "/ws/build-logic"}],
            ),
            _project("app", ":app"),
        )
        deps = dependencies_for_project(projects[":"], projects.values())
        assert deps == {
            Dependency("/ws", "/ws/app", "/ws/build.gradle.kts"),
            Dependency("/ws", "/ws/build-logic", "/ws/build.gradle.kts"),
        }

    def test_failing_configuration_is_isolated(self):
        projects = _projects(
            _project(
                "ws",
                ":",
                configurations=[
                    {"name": "compileClasspath", "error": "Could not resolve all files"},
                    {"name": "implementationDependenciesMetadata", "projectDependencies": [":lib"]},
                ],
                subprojects=[":app"],
            ),
            _project("app", ":app"),
            _project("lib", ":lib"),
        )
        deps = dependencies_for_project(projects[":"], projects.values())
        assert {d.target for d in deps} == {"/ws/lib", "/ws/app"}


def test_identical_edges_collapse():
    edges = {Dependency("/ws/app", "/ws/lib", "/ws/app/build.gradle.kts")}
    edges.add(Dependency("/ws/app", "/ws/lib", "/ws/app/build.gradle.kts"))
    assert len(edges) == 1


def test_failing_configuration_lookup_keeps_structural_edges():
    projects = _projects(
        _project("ws", ":", subprojects=[":app"]),
        _project("app", ":app"),
    )
    root = projects[":"]
    with patch.object(type(root), "find_configuration", side_effect=RuntimeError("not configured")):
        deps = dependencies_for_project(root, projects.values())
    assert deps == {Dependency("/ws", "/ws/app", "/ws/build.gradle.kts")}
