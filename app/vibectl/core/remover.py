"""Module removal.

Deletes the files a module installed, but only those whose content still
matches the checksum recorded at install time. A file the user edited is
left in place and reported as modified. A file that is already gone is
skipped without comment.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from vibectl.core.fileops import prune_empty_parents
from vibectl.core.manifest import compute_checksum, forget_module, load_manifest
from vibectl.core.paths import resolve_project_path
from vibectl.core.undo import record_remove
from vibectl.models.manifest import ManifestFile
from vibectl.models.undo import RestoreItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RemovalResult:
    """Outcome of removing a module's files.

    Attributes:
        removed: Paths deleted because they were unchanged since install.
        modified: Paths kept because their content changed since install.
    """

    removed: list[str] = field(default_factory=lambda: [])
    modified: list[str] = field(default_factory=lambda: [])


def _is_unmodified(target: Path, recorded: ManifestFile) -> bool:
    return compute_checksum(target.read_bytes()) == recorded.checksum


def remove_module_files(module_name: str, project_root: Path) -> RemovalResult:
    """Remove a module's unmodified files and drop it from the manifest.

    The module's record is removed from the manifest even when modified
    files remain on disk.

    Args:
        module_name: Module to remove.
        project_root: Root directory of the user's project.

    Returns:
        RemovalResult with removed and modified paths. Both are empty when
        the module is not installed.

    Raises:
        UnsafePathError: If a recorded path points outside the project.
        OSError: If a file cannot be read or deleted.
    """
    manifest = load_manifest(project_root)
    record = manifest.modules.get(module_name)
    if record is None:
        logger.debug("Module %s is not installed, nothing to remove", module_name)
        return RemovalResult()

    removed: list[str] = []
    modified: list[str] = []

    for recorded in record.files:
        target = resolve_project_path(project_root, recorded.path)

        if not target.is_file():
            logger.debug("Already absent, skipping %s", recorded.path)
            continue

        if _is_unmodified(target, recorded):
            target.unlink()
            prune_empty_parents(target, project_root)
            removed.append(recorded.path)
        else:
            logger.info("Keeping modified file %s", recorded.path)
            modified.append(recorded.path)

    forget_module(project_root, module_name)
    return RemovalResult(removed=removed, modified=modified)


def capture_restore_data(module_name: str, project_root: Path) -> list[RestoreItem]:
    """Capture the content of the files removal is about to delete.

    Only files that exist and still match their recorded checksum are
    captured, which is exactly the set remove_module_files deletes.

    Args:
        module_name: Module about to be removed.
        project_root: Root directory of the user's project.

    Returns:
        Captured content, in manifest order. Empty if not installed.
    """
    record = load_manifest(project_root).modules.get(module_name)
    if record is None:
        return []

    captured: list[RestoreItem] = []
    for recorded in record.files:
        target = resolve_project_path(project_root, recorded.path)
        if not target.is_file():
            continue
        data = target.read_bytes()
        if compute_checksum(data) != recorded.checksum:
            continue
        # Installed content was written as UTF-8, so an unchanged file decodes
        captured.append(RestoreItem(path=recorded.path, content=data.decode("utf-8")))
    return captured


def remove_module(project_root: Path, module_name: str) -> RemovalResult | None:
    """Remove an installed module and make the removal undoable.

    The content of every file about to be deleted is captured and pushed
    as a "remove" undo entry before anything is deleted.

    Args:
        project_root: Root directory of the user's project.
        module_name: Module to remove.

    Returns:
        RemovalResult, or None if the module is not installed.
    """
    record = load_manifest(project_root).modules.get(module_name)
    if record is None:
        return None

    restore_data = capture_restore_data(module_name, project_root)
    record_remove(project_root, f"remove {module_name}", restore_data, record=record)

    result = remove_module_files(module_name, project_root)
    logger.info(
        "Removed %s (%d removed, %d modified)",
        module_name,
        len(result.removed),
        len(result.modified),
    )
    return result
