#
# File: utils/git_ignore_parser.py
# Revision: 3
# Description: Parsers for .gitignore, .geminiignore and custom ignore files,
# built on the pathspec-backed pattern compiler so that every source keeps its own
# ordered, last-match-wins rule list. Adds CombinedIgnoreFilter, which layers
# supplementary patterns on top of the git rules in a single ordered scan.
#

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from .errors import IgnoreFileError, get_error_message
from .ignore_cache import IgnoreFileCache
from .ignore_pattern import RuleSet, compile_patterns
from .paths import normalize_root, to_relative_posix

GEMINI_IGNORE_FILE_NAME = '.geminiignore'
GIT_IGNORE_FILE_NAME = '.gitignore'
GIT_EXCLUDE_FILE_NAME = '.git/info/exclude'
GIT_IMPLICIT_PATTERNS = ('.git',)


class IgnoreFilter(Protocol):
    """Anything that can classify paths and hand out its raw patterns."""
    def is_ignored(self, file_path: str | os.PathLike) -> bool: ...

    def get_patterns(self) -> List[str]: ...


@dataclass(frozen=True)
class PatternSource:
    """One contributor of rules: an ignore file under the root, or inline lines."""
    file_name: Optional[str] = None
    lines: Tuple[str, ...] = ()

    @classmethod
    def from_file(cls, file_name: str) -> 'PatternSource':
        return cls(file_name=file_name)

    @classmethod
    def inline(cls, lines: Iterable[str]) -> 'PatternSource':
        return cls(lines=tuple(lines))


def read_ignore_file(file_path: Path) -> RuleSet:
    """Reads and compiles one ignore file. The caller checks that it exists."""
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        logging.error(f"Could not read ignore file {file_path}: {e}")
        raise IgnoreFileError(file_path, get_error_message(e)) from e
    rule_set = compile_patterns(lines)
    logging.debug(f"Loaded {len(rule_set)} ignore pattern(s) from {file_path}")
    return rule_set


def _is_ignored(rule_set: RuleSet, project_root: Path, file_path: str | os.PathLike) -> bool:
    relative = to_relative_posix(file_path, project_root)
    if relative is None:
        # Outside the project root: not this filter's business.
        return False
    return rule_set.is_ignored(relative)


class IgnoreParser:
    """
    Parses an ordered list of pattern sources and determines if a given file
    path should be ignored. All patterns are relative to `project_root`.
    """
    def __init__(self, project_root: str | Path, sources: Sequence[PatternSource] = (),
                 cache: Optional[IgnoreFileCache] = None):
        self.project_root = normalize_root(project_root)
        self._cache = cache
        rule_set = RuleSet()
        for source in sources:
            if source.file_name is not None:
                rule_set = rule_set + self._load_file(source.file_name)
            if source.lines:
                rule_set = rule_set + compile_patterns(source.lines)
        self._rule_set = rule_set

    def _load_file(self, file_name: str) -> RuleSet:
        file_path = self.project_root / file_name
        if not file_path.is_file():
            logging.debug(f"Ignore file {file_path} not found, no patterns loaded from it.")
            return RuleSet()
        if self._cache is None:
            return read_ignore_file(file_path)
        try:
            mtime_ns = file_path.stat().st_mtime_ns
        except OSError as e:
            raise IgnoreFileError(file_path, get_error_message(e)) from e
        return self._cache.get_or_load(self.project_root, file_path, mtime_ns,
                                       lambda: read_ignore_file(file_path))

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    def get_patterns(self) -> List[str]:
        """Returns the raw pattern lines in rule order."""
        return self._rule_set.raw_patterns()

    def is_ignored(self, file_path: str | os.PathLike) -> bool:
        return _is_ignored(self._rule_set, self.project_root, file_path)


class FileIgnoreParser(IgnoreParser):
    """Rules from a single ignore file (.geminiignore unless another name is given)."""
    def __init__(self, project_root: str | Path, ignore_file_name: str = GEMINI_IGNORE_FILE_NAME,
                 additional_patterns: Optional[Sequence[str]] = None,
                 cache: Optional[IgnoreFileCache] = None):
        self.ignore_file_name = ignore_file_name
        super().__init__(
            project_root,
            [PatternSource.from_file(ignore_file_name), PatternSource.inline(additional_patterns or ())],
            cache=cache,
        )


class GitIgnoreParser(IgnoreParser):
    """
    Version-control rules: the .git directory itself, the root .gitignore and
    .git/info/exclude, in that order, followed by any additional patterns.
    """
    def __init__(self, project_root: str | Path, additional_patterns: Optional[Sequence[str]] = None,
                 cache: Optional[IgnoreFileCache] = None):
        super().__init__(
            project_root,
            [
                PatternSource.inline(GIT_IMPLICIT_PATTERNS),
                PatternSource.from_file(GIT_IGNORE_FILE_NAME),
                PatternSource.from_file(GIT_EXCLUDE_FILE_NAME),
                PatternSource.inline(additional_patterns or ()),
            ],
            cache=cache,
        )


class CombinedIgnoreFilter:
    """
    The base filter's rules followed by supplementary patterns, evaluated as
    one last-match-wins list. A later negation can re-include a path that an
    earlier source excluded, and the other way around.
    """
    def __init__(self, base: IgnoreParser, additional_patterns: Sequence[str] = ()):
        self.project_root = base.project_root
        self._rule_set = base.rule_set + compile_patterns(additional_patterns)

    @classmethod
    def from_filters(cls, base: IgnoreParser, supplements: Sequence[IgnoreFilter]) -> 'CombinedIgnoreFilter':
        """Layers the patterns of each supplement, in order, on top of `base`."""
        additional = [pattern for f in supplements for pattern in f.get_patterns()]
        return cls(base, additional)

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    def get_patterns(self) -> List[str]:
        return self._rule_set.raw_patterns()

    def is_ignored(self, file_path: str | os.PathLike) -> bool:
        return _is_ignored(self._rule_set, self.project_root, file_path)
