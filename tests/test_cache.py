"""
Tests for the content-hash keyed report cache.
"""
from gradlegraph.cache import (
    ReportCache,
    cache_key,
    fingerprint_files,
    fingerprint_project_dir,
)
from gradlegraph.model import (
    Dependency,
    ExternalDepData,
    ExternalNode,
    NodeMetadata,
    NodeReport,
    ProjectNode,
    Target,
    TargetMetadata,
)


def _partial():
    node = ProjectNode(
        name="app",
        targets={
            "jar": Target(
                command="./gradlew :app:jar",
                inputs=["{projectRoot}/src", {"externalDependencies": ["gradle:a-1.0"]}],
                metadata=TargetMetadata("Run jar", help_command="./gradlew help --task :app:jar"),
                cwd=".",
            )
        },
        metadata=NodeMetadata(target_groups={"build": ["jar"]}),
    )
    return NodeReport(
        nodes={"/ws/app": node},
        dependencies={Dependency("/ws/app", "/ws/lib", "/ws/app/build.gradle.kts")},
        external_nodes={
            "gradle:a-1.0": ExternalNode("gradle", "gradle:a-1.0", ExternalDepData("1.0", "g.a", "h"))
        },
    )


class TestCacheKey:
    def test_stable(self):
        assert cache_key(":app", {"a": 1, "b": 2}, "f") == cache_key(":app", {"b": 2, "a": 1}, "f")

    def test_changes_with_each_part(self):
        base = cache_key(":app", {"ciTargetName": "test-ci"}, "f1")
        assert cache_key(":lib", {"ciTargetName": "test-ci"}, "f1") != base
        assert cache_key(":app", {"ciTargetName": "ci"}, "f1") != base
        assert cache_key(":app", {"ciTargetName": "test-ci"}, "f2") != base


class TestFingerprint:
    def test_changes_when_build_file_changes(self, tmp_path):
        build = tmp_path / "build.gradle.kts"
        build.write_text('plugins { java }\n')
        before = fingerprint_project_dir(tmp_path)
        assert fingerprint_project_dir(tmp_path) == before

        build.write_text('plugins { java; application }\n')
        assert fingerprint_project_dir(tmp_path) != before

    def test_missing_files_are_stable(self, tmp_path):
        paths = [tmp_path / "nope.gradle"]
        assert fingerprint_files(paths) == fingerprint_files(paths)


class TestReportCache:
    def test_miss_then_hit(self):
        cache = ReportCache()
        assert cache.get("k") is None
        cache.put("k", _partial())
        assert cache.get("k") == _partial()
        assert (cache.hits, cache.misses) == (1, 1)
        assert len(cache) == 1
        assert "k" in cache

    def test_entries_are_isolated_from_callers(self):
        cache = ReportCache()
        partial = _partial()
        cache.put("k", partial)
        partial.nodes["/ws/app"].targets.clear()

        got = cache.get("k")
        got.nodes["/ws/app"].name = "changed"
        assert cache.get("k") == _partial()

    def test_overwrite(self):
        cache = ReportCache()
        cache.put("k", NodeReport())
        cache.put("k", _partial())
        assert cache.get("k") == _partial()

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "cache" / "gradlegraph.json"
        cache = ReportCache()
        cache.put("k", _partial())
        cache.save(path)

        loaded = ReportCache.load(path)
        assert loaded.get("k") == _partial()

    def test_load_ignores_unknown_format(self, tmp_path):
        path = tmp_path / "cache.json"
        path.write_text('{"version": 99, "entries": {}}')
        assert len(ReportCache.load(path)) == 0

    def test_load_ignores_corrupt_file(self, tmp_path):
        path = tmp_path / "cache.json"
        path.write_text("{not json")
        assert len(ReportCache.load(path)) == 0

    def test_load_missing_file(self, tmp_path):
        assert len(ReportCache.load(tmp_path / "absent.json")) == 0
