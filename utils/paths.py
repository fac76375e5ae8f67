#
# File: utils/paths.py
# Revision: 5
# Description: Replaces the project temp-dir helpers with path normalization
# for ignore matching: any input path becomes a root-relative POSIX path.
# Project roots are made absolute without following symlinks.
#

import os
import posixpath
from pathlib import Path
from typing import Optional

from pathspec.util import normalize_file

# Backslashes are treated as separators on every host.
PATH_SEPARATORS = ('\\',)


def normalize_root(project_root: str | os.PathLike) -> Path:
    """Makes a project root absolute and collapses '..', keeping symlinks as given."""
    return Path(os.path.abspath(project_root))


def _inside_root(relative: str) -> Optional[str]:
    if relative in ('.', '..') or relative.startswith('../'):
        return None
    return relative


def to_relative_posix(file_path: str | os.PathLike, project_root: Path) -> Optional[str]:
    """
    Converts a path to a POSIX path relative to `project_root`.

    Relative inputs are taken as relative to the project root. Absolute inputs
    are compared with the root as given first, then with both sides' symlinks
    resolved, so a symlinked root accepts either spelling. Returns None for
    paths that resolve to the root itself or lie outside of it. A trailing
    '/' on the input is kept so callers can tell directories apart.
    """
    text = os.fspath(file_path).replace('\\', '/')
    if not text:
        return None
    is_dir = text.endswith('/')

    if Path(text).is_absolute():
        absolute = posixpath.normpath(text)
        relative = _inside_root(posixpath.relpath(absolute, project_root.as_posix()))
        if relative is None:
            real_root = Path(os.path.realpath(project_root)).as_posix()
            real_path = Path(os.path.realpath(absolute)).as_posix()
            if real_path != absolute or real_root != project_root.as_posix():
                relative = _inside_root(posixpath.relpath(real_path, real_root))
    else:
        relative = _inside_root(posixpath.normpath(normalize_file(text, separators=PATH_SEPARATORS)))

    if relative is None:
        return None
    return relative + '/' if is_dir else relative
