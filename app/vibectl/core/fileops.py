"""File operations on a user's project tree.

Writes, deletes and empty-directory cleanup shared by install, removal and
undo. Raw OSErrors (permission denied, disk full) propagate to the caller.
"""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def write_text_file(target: Path, content: str) -> bytes:
    """Write text as UTF-8, creating parent directories.

    The bytes are written without newline translation so the file content
    matches the checksum of the encoded text exactly.

    Args:
        target: File to write.
        content: Text to write.

    Returns:
        The bytes written.
    """
    data = content.encode("utf-8")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    return data


def delete_path(target: Path) -> bool:
    """Delete a file, symlink or directory tree.

    Directories (but not symlinks to directories) are removed recursively.

    Args:
        target: Path to delete.

    Returns:
        True if something was deleted, False if the path did not exist.
    """
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
        return True

    # Files, symlinks, and dead symlinks
    if target.exists() or target.is_symlink():
        target.unlink()
        return True

    return False


def prune_empty_parents(target: Path, stop_at: Path) -> None:
    """Remove empty directories above a deleted path.

    Walks up from the parent of target and removes each directory that is
    empty, stopping at the first non-empty one or at stop_at, which is
    never removed.

    Args:
        target: Path whose parents should be pruned.
        stop_at: Directory at which to stop (usually the project root).
    """
    stop = stop_at.resolve()
    current = target.parent
    while current.resolve() != stop and stop in current.resolve().parents:
        try:
            current.rmdir()
        except OSError:
            # Not empty (or already gone)
            return
        logger.debug("Removed empty directory %s", current)
        current = current.parent
