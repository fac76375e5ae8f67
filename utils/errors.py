#
# File: utils/errors.py
# Revision: 3
# Description: Error types for the ignore-file layer. A missing ignore file
# is not an error; an unreadable one surfaces as IgnoreFileError.
#

from pathlib import Path


class IgnoreFileError(Exception):
    """Raised when an existing ignore file cannot be read or decoded."""
    def __init__(self, path: Path, message: str):
        super().__init__(f"Could not read ignore file {path}: {message}")
        self.path = path


def get_error_message(error: Exception) -> str:
    """Extracts a user-friendly error message from an exception."""
    try:
        return str(error)
    except Exception:
        return "Failed to get error details."
