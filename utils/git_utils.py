#
# File: utils/git_utils.py
# Revision: 3
# Description: Treats a `.git` file (worktrees, submodules) as a repository
# marker alongside the usual `.git` directory.
#

from pathlib import Path

GIT_DIR_NAME = '.git'


def find_git_root(start_dir: str | Path) -> Path | None:
    """
    Finds the root directory of a git repository by traversing up from a
    starting directory.

    Returns:
        The Path object of the git root directory, or None if not found.
    """
    try:
        current_dir = Path(start_dir).resolve()
        while True:
            if (current_dir / GIT_DIR_NAME).exists():
                return current_dir
            if current_dir.parent == current_dir:
                # Reached the filesystem root (e.g., '/')
                return None
            current_dir = current_dir.parent
    except (OSError, PermissionError):
        return None


def is_git_repository(directory: str | Path) -> bool:
    """
    Checks if a directory is within a git repository.
    """
    return find_git_root(directory) is not None
