"""Content-hash keyed memoization of per-project synthesis results."""

from __future__ import annotations

import copy
import hashlib
import json
import logging
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from gradlegraph.model import NodeReport
from gradlegraph.options import hash_options

logger = logging.getLogger(__name__)

CACHE_FORMAT_VERSION = 1

# Build declaration files that feed a project's fingerprint.
BUILD_DECLARATION_FILES = (
    "build.gradle",
    "build.gradle.kts",
    "settings.gradle",
    "settings.gradle.kts",
    "gradle.properties",
    "gradle/libs.versions.toml",
)


def hash_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        while True:
            chunk = handle.read(8192)
            if not chunk:
                break
            digest.update(chunk)
    return digest.hexdigest()


def fingerprint_files(paths: Iterable[Path]) -> str:
    """Hash the names and contents of *paths*; missing files hash as absent."""
    digest = hashlib.sha256()
    for path in sorted(paths):
        digest.update(str(path).encode("utf-8"))
        digest.update(b"\0")
        if path.is_file():
            digest.update(hash_file(path).encode("ascii"))
        else:
            digest.update(b"<missing>")
        digest.update(b"\n")
    return digest.hexdigest()


def fingerprint_project_dir(project_dir: Path) -> str:
    return fingerprint_files(project_dir / name for name in BUILD_DECLARATION_FILES)


def cache_key(identity: str, options: dict[str, Any], fingerprint: str) -> str:
    """Combine project identity, effective options and a content fingerprint."""
    payload = json.dumps(
        {"identity": identity, "options": hash_options(options), "fingerprint": fingerprint},
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class ReportCache:
    """Thread-safe key -> per-project NodeReport store.

    Each entry holds one project node with its dependency edges and the
    external nodes it discovered.  Entries are copied on the way in and out
    so callers can never mutate one.  There is no eviction; a changed
    fingerprint is a new key.
    """

    def __init__(self, entries: dict[str, NodeReport] | None = None) -> None:
        self._entries: dict[str, NodeReport] = dict(entries or {})
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: str) -> NodeReport | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            self.hits += 1
            return copy.deepcopy(entry)

    def put(self, key: str, entry: NodeReport) -> None:
        with self._lock:
            self._entries[key] = copy.deepcopy(entry)

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            return {
                "version": CACHE_FORMAT_VERSION,
                "entries": {k: e.to_dict() for k, e in self._entries.items()},
            }

    @classmethod
    def load(cls, path: Path) -> ReportCache:
        """Read a cache file, starting empty if it is absent or unreadable."""
        if not path.exists():
            return cls()
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read cache file %s: %s", path, e)
            return cls()
        if not isinstance(payload, dict) or payload.get("version") != CACHE_FORMAT_VERSION:
            logger.debug("Ignoring cache file %s with unknown format", path)
            return cls()
        entries: dict[str, NodeReport] = {}
        for key, data in (payload.get("entries") or {}).items():
            try:
                entries[key] = NodeReport.from_dict(data)
            except (KeyError, TypeError, AttributeError) as e:
                logger.debug("Dropping cache entry %s: %s", key, e)
        logger.debug("Loaded %d cache entries from %s", len(entries), path)
        return cls(entries)

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
