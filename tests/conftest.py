"""
Shared fixtures for gradlegraph tests.
"""
import pytest

from gradlegraph.snapshot import SnapshotTask, snapshot_from_dict
from gradlegraph.targets import gradlew_command

WORKSPACE = "/ws"
APP_ROOT = "/ws/app"
GRADLE_CACHE = "/home/dev/.gradle/caches/modules-2/files-2.1"
COMMONS_JAR = (
    f"{GRADLE_CACHE}/org.apache.commons/commons-lang3/3.13.0/"
    "b7263237aa89c1f99b327197c41d0669707a462e/commons-lang3-3.13.0.jar"
)


@pytest.fixture(autouse=True)
def posix_gradlew(monkeypatch):
    """Pin the wrapper command to the POSIX form regardless of the test host."""
    monkeypatch.setattr("platform.system", lambda: "Linux")
    gradlew_command.cache_clear()
    yield
    gradlew_command.cache_clear()


@pytest.fixture(autouse=True)
def no_ci_env(monkeypatch):
    monkeypatch.delenv("CI", raising=False)


@pytest.fixture
def make_task():
    def _make(name="compileJava", **kwargs):
        return SnapshotTask(name=name, **kwargs)

    return _make


@pytest.fixture
def snapshot_data():
    """A three-project build: root, app depending on lib, and lib."""
    return {
        "workspaceRoot": WORKSPACE,
        "cwd": WORKSPACE,
        "projects": [
            {
                "name": "ws",
                "path": ":",
                "projectDir": WORKSPACE,
                "buildFile": f"{WORKSPACE}/build.gradle.kts",
                "fingerprint": "root-v1",
                "subprojects": [":app", ":lib"],
                "tasks": [
                    {"name": "help", "group": "help"},
                ],
            },
            {
                "name": "app",
                "path": ":app",
                "projectDir": APP_ROOT,
                "buildFile": f"{APP_ROOT}/build.gradle.kts",
                "description": "The application",
                "fingerprint": "app-v1",
                "configurations": [
                    {"name": "compileClasspath", "projectDependencies": [":lib"]},
                    {
                        "name": "implementationDependenciesMetadata",
                        "projectDependencies": [":lib"],
                    },
                ],
                "tasks": [
                    {
                        "name": "compileJava",
                        "group": "build",
                        "inputs": [
                            f"{APP_ROOT}/src/main/java/App.java",
                            COMMONS_JAR,
                        ],
                        "outputs": [f"{APP_ROOT}/build/classes/java/main"],
                        "dependsOn": [{"project": "lib", "task": "jar"}],
                    },
                    {
                        "name": "compileTestJava",
                        "inputs": [
                            f"{APP_ROOT}/src/test/java/AppTest.java",
                            f"{APP_ROOT}/src/test/java/HelperUtil.java",
                        ],
                    },
                    {"name": "test", "group": "verification", "dependsOn": ["app:compileTestJava"]},
                ],
            },
            {
                "name": "lib",
                "path": ":lib",
                "projectDir": f"{WORKSPACE}/lib",
                "buildFile": f"{WORKSPACE}/lib/build.gradle.kts",
                "fingerprint": "lib-v1",
                "tasks": [{"name": "jar", "group": "build"}],
            },
        ],
    }


@pytest.fixture
def snapshot(snapshot_data):
    return snapshot_from_dict(snapshot_data)
