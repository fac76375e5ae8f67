#
# File: utils/ignore_cache.py
# Revision: 1
# Description: Optional cache of compiled ignore files shared between
# FileDiscoveryService instances. Entries are keyed by the file's
# modification time, so an edited ignore file is recompiled on next load.
#

import logging
import threading
from pathlib import Path
from typing import Callable, Dict, Tuple

from .ignore_pattern import RuleSet

CacheKey = Tuple[Path, Path, int]


class IgnoreFileCache:
    """
    Caches compiled RuleSets per (project root, ignore file, mtime_ns).
    """
    def __init__(self):
        self._entries: Dict[CacheKey, RuleSet] = {}
        self._lock = threading.Lock()

    def get_or_load(self, project_root: Path, file_path: Path, mtime_ns: int,
                    loader: Callable[[], RuleSet]) -> RuleSet:
        key = (project_root, file_path, mtime_ns)
        with self._lock:
            cached = self._entries.get(key)
        if cached is not None:
            logging.debug(f"Using cached ignore rules for {file_path}")
            return cached

        rule_set = loader()
        with self._lock:
            # Older versions of the same file can never be hit again.
            for stale in [k for k in self._entries if k[:2] == key[:2]]:
                del self._entries[stale]
            self._entries[key] = rule_set
        return rule_set

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
