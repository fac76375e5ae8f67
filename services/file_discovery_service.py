#
# File: services/file_discovery_service.py
# Revision: 3
# Description: Keeps .gitignore, .geminiignore and an optional custom ignore
# file as separate filters, plus a combined filter that evaluates all of them
# as one ordered rule list in git repositories. Adds per-call switches and a
# filtering report.
#

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, TypeVar

from utils.git_ignore_parser import (
    CombinedIgnoreFilter,
    FileIgnoreParser,
    GEMINI_IGNORE_FILE_NAME,
    GitIgnoreParser,
)
from utils.git_utils import is_git_repository
from utils.ignore_cache import IgnoreFileCache
from utils.paths import normalize_root

PathT = TypeVar('PathT', str, os.PathLike)


@dataclass(frozen=True)
class FilterFilesOptions:
    respect_git_ignore: bool = True
    respect_gemini_ignore: bool = True


@dataclass
class FilterReport:
    filtered_paths: List = field(default_factory=list)
    ignored_count: int = 0


DEFAULT_FILTER_OPTIONS = FilterFilesOptions()


class FileDiscoveryService:
    """
    Filters file paths based on .gitignore, .geminiignore and custom ignore rules.

    Ignore files are read once, at construction. Create a new service to pick up
    changes made to them afterwards.
    """
    def __init__(self, project_root: str | Path, ignore_file_name: Optional[str] = None,
                 is_git_repo: Callable[[Path], bool] = is_git_repository,
                 cache: Optional[IgnoreFileCache] = None):
        self.project_root = normalize_root(project_root)
        self._git_ignore_filter: Optional[GitIgnoreParser] = None
        self._custom_ignore_filter: Optional[FileIgnoreParser] = None
        self._combined_ignore_filter: Optional[CombinedIgnoreFilter] = None

        if is_git_repo(self.project_root):
            logging.debug("Git repository detected, loading .gitignore patterns.")
            self._git_ignore_filter = GitIgnoreParser(self.project_root, cache=cache)

        self._gemini_ignore_filter = FileIgnoreParser(self.project_root, GEMINI_IGNORE_FILE_NAME, cache=cache)

        if ignore_file_name:
            logging.debug(f"Loading custom ignore file '{ignore_file_name}'.")
            self._custom_ignore_filter = FileIgnoreParser(self.project_root, ignore_file_name, cache=cache)

        if self._git_ignore_filter:
            supplements = [self._gemini_ignore_filter]
            if self._custom_ignore_filter:
                supplements.append(self._custom_ignore_filter)
            self._combined_ignore_filter = CombinedIgnoreFilter.from_filters(self._git_ignore_filter, supplements)

    def _is_ignored(self, file_path: str | os.PathLike, options: FilterFilesOptions) -> bool:
        if options.respect_git_ignore and options.respect_gemini_ignore and self._combined_ignore_filter:
            # The custom ignore file is always respected, so no extra flag here.
            return self._combined_ignore_filter.is_ignored(file_path)

        if options.respect_git_ignore and self._git_ignore_filter and self._git_ignore_filter.is_ignored(file_path):
            return True
        if options.respect_gemini_ignore and self._gemini_ignore_filter.is_ignored(file_path):
            return True
        if self._custom_ignore_filter and self._custom_ignore_filter.is_ignored(file_path):
            return True
        return False

    def filter_files(self, file_paths: Sequence[PathT], options: Optional[FilterFilesOptions | dict] = None) -> List[PathT]:
        """Filters a list of paths, keeping input order, returning only those not ignored."""
        if options is None:
            options = DEFAULT_FILTER_OPTIONS
        elif isinstance(options, dict):
            options = FilterFilesOptions(**options)
        elif not isinstance(options, FilterFilesOptions):
            raise TypeError(f"options must be FilterFilesOptions or a dict, not {type(options).__name__}")
        return [p for p in file_paths if not self._is_ignored(p, options)]

    def filter_files_with_report(self, file_paths: Sequence[PathT],
                                 options: Optional[FilterFilesOptions | dict] = None) -> FilterReport:
        """Filters a list of paths and reports how many were ignored."""
        filtered_paths = self.filter_files(file_paths, options)
        ignored_count = len(file_paths) - len(filtered_paths)
        logging.debug(f"Ignored {ignored_count} of {len(file_paths)} path(s).")
        return FilterReport(filtered_paths=filtered_paths, ignored_count=ignored_count)

    def should_ignore_file(self, file_path: str | os.PathLike, options: Optional[FilterFilesOptions | dict] = None) -> bool:
        """Checks a single path against the same rules as filter_files."""
        return len(self.filter_files([file_path], options)) == 0

    def get_gemini_ignore_patterns(self) -> List[str]:
        """Returns the raw patterns loaded from .geminiignore."""
        return self._gemini_ignore_filter.get_patterns()
