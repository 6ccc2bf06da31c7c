"""In-process membership cache keyed by (file, config, config mtime).

Answers "is this file part of the project rooted at this tsconfig.json"
without re-running the compiler's file listing on every call. State lives
in memory only and resets when the process restarts; the sidecar keeps one
instance alive across editor invocations.

Staleness is detected lazily: an entry is trusted only while the mtime
recorded for its config still equals the config's current mtime exactly.
Filesystems with coarse mtime resolution can therefore report a stale hit
for an edit made within the same tick.
"""

import logging
import os

from .protocols import CompilerTools, MembershipEntry

logger = logging.getLogger(__name__)


class MembershipCache:
    """Per-config membership answers, invalidated by config mtime."""

    def __init__(self, tools: CompilerTools):
        self._tools = tools
        self._config_mtimes: dict[str, int] = {}
        self._entries: dict[str, MembershipEntry] = {}
        self._hits = 0
        self._misses = 0

    def is_file_listed(self, file_path: str, config_path: str) -> bool:
        """Return True if file_path is compiled as part of config_path's project.

        Raises:
            OSError: config_path cannot be stat'ed.
            ToolUnavailable: the file listing failed. The cache is left
                unchanged so a later call can retry.
        """
        mtime = self._tools.read_modification_time(config_path)

        entry = self._entries.get(file_path)
        if (
            entry is not None
            and entry.config_path == config_path
            and self._config_mtimes.get(config_path) == mtime
        ):
            self._hits += 1
            logger.debug(
                "membership_cache.hit",
                extra={"file": file_path, "config": config_path, "listed": entry.is_member},
            )
            return entry.is_member

        self._misses += 1
        logger.debug(
            "membership_cache.miss",
            extra={
                "file": file_path,
                "config": config_path,
                "stale": entry is not None and entry.config_path == config_path,
            },
        )

        files = self._tools.list_project_files(os.path.dirname(config_path))
        self._config_mtimes[config_path] = mtime

        found = False
        for listed in files:
            if listed == file_path:
                found = True
            else:
                self._entries[listed] = MembershipEntry(config_path, True)
        self._entries[file_path] = MembershipEntry(config_path, found)
        return found

    def get(self, file_path: str) -> MembershipEntry | None:
        """Return the raw entry for file_path without checking freshness."""
        return self._entries.get(file_path)

    def stats(self) -> dict:
        return {
            "configs": len(self._config_mtimes),
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
        }

    def clear(self) -> None:
        """Clear all cached entries and counters."""
        self._config_mtimes.clear()
        self._entries.clear()
        self._hits = 0
        self._misses = 0
