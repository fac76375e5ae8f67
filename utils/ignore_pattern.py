#
# File: utils/ignore_pattern.py
# Revision: 2
# Description: Compiles single lines of .gitignore syntax into immutable
# IgnorePattern rules backed by pathspec patterns, and evaluates ordered
# rule sets with last-match-wins through pathspec's GitIgnoreSpec.
#

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from pathspec import GitIgnoreSpec
from pathspec.patterns.gitignore import GitIgnorePatternError
from pathspec.patterns.gitignore.spec import GitIgnoreSpecPattern

DOUBLE_STAR = '**'


def _trim_trailing_whitespace(line: str) -> str:
    """Drops trailing whitespace, keeping one space escaped with a backslash."""
    stripped = line.rstrip()
    if stripped != line and stripped.endswith('\\'):
        backslashes = len(stripped) - len(stripped.rstrip('\\'))
        if backslashes % 2 == 1:
            return line[:len(stripped) + 1]
    return stripped


def _literal_pattern(text: str) -> GitIgnoreSpecPattern:
    """Builds a pattern that matches `text` character for character, keeping a leading '!'."""
    if text.startswith('!'):
        return GitIgnoreSpecPattern('!' + GitIgnoreSpecPattern.escape(text[1:]))
    return GitIgnoreSpecPattern(GitIgnoreSpecPattern.escape(text))


def _build_matcher(text: str) -> GitIgnoreSpecPattern:
    """
    Compiles `text` with pathspec. Lines pathspec rejects (a dangling backslash,
    a reversed range such as '[z-a]') or silently drops (an unclosed '[')
    are matched literally.
    """
    try:
        matcher = GitIgnoreSpecPattern(text)
    except (GitIgnorePatternError, re.error) as e:
        logging.debug(f"Ignore pattern '{text}' is invalid ({e}), matching it literally.")
        return _literal_pattern(text)
    if matcher.include is None:
        logging.debug(f"Ignore pattern '{text}' is discarded by pathspec, matching it literally.")
        return _literal_pattern(text)
    return matcher


@dataclass(frozen=True)
class IgnorePattern:
    """A single compiled ignore rule."""
    raw: str
    is_negation: bool
    is_directory_only: bool
    is_anchored: bool
    segments: Tuple[str, ...]
    matcher: GitIgnoreSpecPattern = field(repr=False, compare=False)

    @property
    def is_rooted(self) -> bool:
        """Rooted patterns match from the project root; others at any depth."""
        return self.is_anchored or len(self.segments) > 1

    def matches(self, path: str) -> bool:
        """
        Checks whether the rule applies to a root-relative POSIX path, either
        to the path itself or to one of its parent directories. A trailing '/'
        marks the path as a directory.
        """
        return self.matcher.match_file(path) is not None


def compile_pattern(line: str) -> Optional[IgnorePattern]:
    """
    Compiles one line of an ignore file.

    Returns None for blank lines, comments, and lines that reduce to nothing
    (for example a lone '/'). Never raises for malformed globs; they are
    matched literally instead.

    Leading whitespace is part of the pattern, so ' !x' is not a negation.
    '\\#' and '\\!' at the start are literal, '!!x' negates the pattern '!x'.
    """
    text = _trim_trailing_whitespace(line.rstrip('\r\n'))
    if not text.strip() or text.lstrip().startswith('#'):
        return None

    body = text[1:] if text.startswith('!') else text
    segments = tuple(s for s in body.split('/') if s and s != '.')
    if not segments:
        logging.debug(f"Ignore pattern '{text}' has no path segments, skipping.")
        return None

    matcher = _build_matcher(text)
    is_negation = matcher.include is False
    if not is_negation:
        body = text
        segments = tuple(s for s in body.split('/') if s and s != '.')
    is_anchored = body.startswith('/')
    is_directory_only = body.endswith('/')

    # Consecutive '**' segments are equivalent to one.
    collapsed: List[str] = []
    for segment in segments:
        if segment == DOUBLE_STAR and collapsed and collapsed[-1] == DOUBLE_STAR:
            continue
        collapsed.append(segment)

    return IgnorePattern(
        raw=text,
        is_negation=is_negation,
        is_directory_only=is_directory_only,
        is_anchored=is_anchored,
        segments=tuple(collapsed),
        matcher=matcher,
    )


class RuleSet:
    """An ordered, immutable list of IgnorePatterns evaluated last-match-wins."""
    def __init__(self, patterns: Iterable[IgnorePattern] = ()):
        self._patterns: Tuple[IgnorePattern, ...] = tuple(patterns)
        self._spec = GitIgnoreSpec([p.matcher for p in self._patterns])

    @property
    def patterns(self) -> Tuple[IgnorePattern, ...]:
        return self._patterns

    def __iter__(self):
        return iter(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __add__(self, other: 'RuleSet') -> 'RuleSet':
        if not isinstance(other, RuleSet):
            return NotImplemented
        return RuleSet(self._patterns + other._patterns)

    def raw_patterns(self) -> List[str]:
        return [p.raw for p in self._patterns]

    def is_ignored(self, path: str) -> bool:
        """
        Returns the verdict of the last rule that applies to a root-relative
        POSIX path, or False if none does. A trailing '/' marks a directory.
        """
        if not path or path == '/':
            return False
        return self._spec.match_file(path)


def compile_patterns(lines: Iterable[str]) -> RuleSet:
    """Compiles lines in order, dropping comments and blank lines."""
    compiled = (compile_pattern(line) for line in lines)
    return RuleSet(p for p in compiled if p is not None)
