"""Undo stack management.

The undo stack (.vibe/undo-stack.json) keeps the last MAX_STACK_DEPTH
reversible operations, oldest first. Each entry carries the action that
reverses it:

- add / generate -> delete the created files
- remove -> restore the deleted files from captured content

A reinstall is an add whose metadata also carries the module's earlier
record and the content of the files it overwrote; both are put back after
the delete.

Every operation loads the whole stack, changes it and writes it back. A
missing or corrupt stack file is read as an empty stack.
"""

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TypeVar

from pydantic import ValidationError

from vibectl.core.fileops import delete_path, prune_empty_parents, write_text_file
from vibectl.core.manifest import forget_module, restore_module_record
from vibectl.core.paths import get_undo_stack_path, resolve_project_path
from vibectl.core.persistence import load_document, with_persisted_document
from vibectl.models.manifest import InstalledModuleRecord
from vibectl.models.undo import (
    ENTRY_ID_PREFIX,
    OperationType,
    RestoreItem,
    ReverseAction,
    ReverseActionType,
    UndoEntry,
    UndoStack,
)

logger = logging.getLogger(__name__)

R = TypeVar("R")


def generate_entry_id(
    clock: Callable[[], int] = time.time_ns,
    rng: random.Random | None = None,
) -> str:
    """Generate a unique ID for an undo entry.

    The ID combines a high-resolution clock reading with a random draw, so
    no counter or other state is shared between calls. Both sources can be
    injected for deterministic tests.

    Args:
        clock: Returns the current time in nanoseconds.
        rng: Random source. A freshly seeded one is used if None.

    Returns:
        ID of the form "undo-<clock hex>-<8 hex digits>".
    """
    source = rng if rng is not None else random.Random()
    return f"{ENTRY_ID_PREFIX}{clock():x}-{source.getrandbits(32):08x}"


def create_undo_entry(
    operation: OperationType,
    description: str,
    reverse: ReverseAction,
    metadata: dict[str, Any] | None = None,
) -> UndoEntry:
    """Factory function to create a new UndoEntry.

    Automatically generates a unique ID and current timestamp.

    Args:
        operation: Operation being recorded.
        description: Human-readable summary.
        reverse: Action that undoes the operation.
        metadata: Optional context for manifest reconciliation.

    Returns:
        New UndoEntry.
    """
    return UndoEntry(
        id=generate_entry_id(),
        timestamp=datetime.now(UTC).isoformat(),
        operation=operation,
        description=description,
        reverse=reverse,
        metadata=metadata or {},
    )


def _update_stack(project_root: Path, mutate: Callable[[UndoStack], R]) -> R:
    return with_persisted_document(
        get_undo_stack_path(project_root),
        UndoStack,
        mutate,
        decode=UndoStack.from_dict,
        encode=UndoStack.to_dict,
    )


def load_stack(project_root: Path) -> UndoStack:
    """Load the undo stack of a project.

    Returns:
        The stored stack, or an empty one if missing or corrupt.
    """
    return load_document(get_undo_stack_path(project_root), UndoStack, UndoStack.from_dict)


def stack_depth(project_root: Path) -> int:
    """Get the number of entries on the undo stack."""
    return len(load_stack(project_root).entries)


def push_entry(project_root: Path, entry: UndoEntry) -> None:
    """Push an entry, evicting the oldest entries beyond the depth limit.

    Args:
        project_root: Root directory of the user's project.
        entry: Entry to push.
    """

    def _push(stack: UndoStack) -> None:
        for evicted in stack.push(entry):
            logger.debug("Evicted undo entry %s (%s)", evicted.id, evicted.description)

    _update_stack(project_root, _push)


def pop_entry(project_root: Path) -> UndoEntry | None:
    """Remove and return the most recent entry.

    Returns:
        The newest entry, or None if the stack is empty.
    """
    return _update_stack(project_root, UndoStack.pop)


def peek_entry(project_root: Path) -> UndoEntry | None:
    """Get the most recent entry without removing it."""
    return load_stack(project_root).peek()


def clear_stack(project_root: Path) -> None:
    """Remove every entry from the undo stack."""
    _update_stack(project_root, lambda stack: stack.entries.clear())


def record_generate(project_root: Path, description: str, files: list[str]) -> UndoEntry:
    """Record a generate operation, undone by deleting the generated files.

    Args:
        project_root: Root directory of the user's project.
        description: Human-readable summary.
        files: Project-relative paths of the generated files.

    Returns:
        The pushed entry.
    """
    entry = create_undo_entry(
        OperationType.GENERATE, description, ReverseAction.delete_files(files)
    )
    push_entry(project_root, entry)
    return entry


def record_add(
    project_root: Path,
    description: str,
    files: list[str],
    modules: list[str] | None = None,
    *,
    record: InstalledModuleRecord | None = None,
    restore_data: list[RestoreItem] | None = None,
) -> UndoEntry:
    """Record an add operation, undone by deleting the added files.

    A reinstall also passes the module's previous record and the content of
    the files it overwrote, so undo returns the module to its earlier state
    instead of uninstalling it.

    Args:
        project_root: Root directory of the user's project.
        description: Human-readable summary.
        files: Project-relative paths of the files the install wrote.
        modules: Modules whose manifest records the install created. They
            are dropped from the manifest when the entry is undone.
        record: Record of a reinstalled module before the reinstall.
        restore_data: Content of files the reinstall overwrote.

    Returns:
        The pushed entry.
    """
    metadata: dict[str, Any] = {}
    if modules:
        metadata["modules"] = modules
    if record is not None:
        metadata["record"] = record.model_dump(mode="json", by_alias=True)
    if restore_data:
        metadata["restoreData"] = [item.to_dict() for item in restore_data]

    entry = create_undo_entry(
        OperationType.ADD,
        description,
        ReverseAction.delete_files(files),
        metadata=metadata,
    )
    push_entry(project_root, entry)
    return entry


def record_remove(
    project_root: Path,
    description: str,
    restore_data: list[RestoreItem],
    record: InstalledModuleRecord | None = None,
) -> UndoEntry:
    """Record a remove operation, undone by restoring the deleted files.

    The caller must capture file content before deleting anything.

    Args:
        project_root: Root directory of the user's project.
        description: Human-readable summary.
        restore_data: Captured content of the files about to be deleted.
        record: Manifest record of the removed module, put back on undo.

    Returns:
        The pushed entry.
    """
    metadata = None
    if record is not None:
        metadata = {"record": record.model_dump(mode="json", by_alias=True)}

    entry = create_undo_entry(
        OperationType.REMOVE,
        description,
        ReverseAction.restore_files(restore_data),
        metadata=metadata,
    )
    push_entry(project_root, entry)
    return entry


def execute_undo(project_root: Path, entry: UndoEntry) -> list[str]:
    """Execute the reverse action of an entry.

    - delete-files: deletes each path that exists; missing paths are skipped.
    - restore-files: writes each captured file back, creating directories.
    - run-command: reserved; nothing is executed.

    Args:
        project_root: Root directory of the user's project.
        entry: Entry to reverse.

    Returns:
        Project-relative paths actually affected.

    Raises:
        UnsafePathError: If a recorded path points outside the project.
        OSError: If a file cannot be deleted or written.
    """
    reverse = entry.reverse

    if reverse.type == ReverseActionType.DELETE_FILES:
        return _delete_files(project_root, reverse.files)

    if reverse.type == ReverseActionType.RESTORE_FILES:
        return _restore_files(project_root, reverse.restore_data)

    logger.warning("Not running command for undo entry %s: commands are not executed", entry.id)
    return []


def _delete_files(project_root: Path, files: tuple[str, ...]) -> list[str]:
    affected: list[str] = []
    for path in files:
        target = resolve_project_path(project_root, path)
        if not delete_path(target):
            logger.debug("Already absent, skipping %s", path)
            continue
        prune_empty_parents(target, project_root)
        affected.append(path)
    return affected


def _restore_files(project_root: Path, restore_data: tuple[RestoreItem, ...]) -> list[str]:
    affected: list[str] = []
    for item in restore_data:
        write_text_file(resolve_project_path(project_root, item.path), item.content)
        affected.append(item.path)
    return affected


@dataclass(frozen=True, slots=True)
class UndoOutcome:
    """Result of undoing the most recent operation.

    Attributes:
        entry: The entry that was undone.
        affected: Paths deleted or restored.
    """

    entry: UndoEntry
    affected: list[str]


def undo_last(project_root: Path) -> UndoOutcome | None:
    """Pop the most recent entry, reverse it, and reconcile the manifest.

    Args:
        project_root: Root directory of the user's project.

    Returns:
        What was undone, or None if the stack was empty.
    """
    entry = pop_entry(project_root)
    if entry is None:
        return None

    affected = execute_undo(project_root, entry)
    for path in _restore_overwritten(project_root, entry):
        if path not in affected:
            affected.append(path)
    _reconcile_manifest(project_root, entry)
    return UndoOutcome(entry=entry, affected=affected)


def _restore_overwritten(project_root: Path, entry: UndoEntry) -> list[str]:
    """Write back the files a reinstall overwrote, after its files are deleted."""
    if entry.operation != OperationType.ADD:
        return []
    items = [RestoreItem.from_dict(item) for item in entry.metadata.get("restoreData") or []]
    return _restore_files(project_root, tuple(items))


def _reconcile_manifest(project_root: Path, entry: UndoEntry) -> None:
    """Bring the manifest in line with an undone entry's file changes.

    Undoing an add drops the records it created and, for a reinstall, puts
    back the earlier record. Undoing a remove puts back the removed record.
    """
    if entry.operation == OperationType.ADD:
        for name in entry.metadata.get("modules") or []:
            forget_module(project_root, name)

    raw_record = entry.metadata.get("record")
    if entry.operation == OperationType.GENERATE or raw_record is None:
        return

    try:
        record = InstalledModuleRecord.model_validate(raw_record)
    except ValidationError as e:
        logger.warning("Undo entry %s has an invalid module record: %s", entry.id, e)
        return
    restore_module_record(project_root, record)
