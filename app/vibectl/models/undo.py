"""Undo stack models.

This module defines the data structures stored in .vibe/undo-stack.json:
reversible operations, the action that reverses each of them, and the
bounded stack holding them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

UNDO_STACK_VERSION = 1
MAX_STACK_DEPTH = 10
ENTRY_ID_PREFIX = "undo-"


class OperationType(str, Enum):
    """Operation recorded on the undo stack.

    Attributes:
        GENERATE: Files generated by a generator command.
        ADD: Module installed.
        REMOVE: Module removed.
    """

    GENERATE = "generate"
    ADD = "add"
    REMOVE = "remove"


class ReverseActionType(str, Enum):
    """Kind of action that reverses an operation.

    Attributes:
        DELETE_FILES: Delete files that the operation created.
        RESTORE_FILES: Rewrite files that the operation deleted.
        RUN_COMMAND: Reserved. Never executed.
    """

    DELETE_FILES = "delete-files"
    RESTORE_FILES = "restore-files"
    RUN_COMMAND = "run-command"


def _string_list(value: object, what: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        msg = f"{what} must be a list of strings"
        raise TypeError(msg)
    return value


def _check_metadata(value: object) -> dict[str, Any]:
    """Validate the metadata keys that undo reconciliation reads.

    "modules" is a list of module names, "record" a manifest record object,
    "restoreData" a list of restore items. Other keys pass through.

    Raises:
        TypeError: If metadata or one of these keys has the wrong shape.
    """
    if not isinstance(value, dict):
        msg = "Undo entry metadata must be an object"
        raise TypeError(msg)
    if "modules" in value:
        _string_list(value["modules"], "Undo entry metadata modules")
    if "record" in value and not isinstance(value["record"], dict):
        msg = "Undo entry metadata record must be an object"
        raise TypeError(msg)
    if "restoreData" in value:
        items = value["restoreData"]
        if not isinstance(items, list):
            msg = "Undo entry metadata restoreData must be a list"
            raise TypeError(msg)
        for item in items:
            RestoreItem.from_dict(item)
    return dict(value)


@dataclass(frozen=True, slots=True)
class RestoreItem:
    """Content of a file captured before deletion.

    Attributes:
        path: Project-relative path.
        content: Full file content.
    """

    path: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {"path": self.path, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RestoreItem":
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            TypeError: If a field has the wrong type.
        """
        path, content = data["path"], data["content"]
        if not isinstance(path, str) or not isinstance(content, str):
            msg = "Restore item path and content must be strings"
            raise TypeError(msg)
        return cls(path=path, content=content)


@dataclass(frozen=True, slots=True)
class ReverseAction:
    """Tagged union describing how to undo an operation.

    Only the field matching the type is meaningful: files for
    DELETE_FILES, restore_data for RESTORE_FILES, command for RUN_COMMAND.

    Attributes:
        type: Which reverse action this is.
        files: Project-relative paths to delete.
        restore_data: File contents to write back.
        command: Reserved command string.
    """

    type: ReverseActionType
    files: tuple[str, ...] = ()
    restore_data: tuple[RestoreItem, ...] = ()
    command: str | None = None

    @classmethod
    def delete_files(cls, files: list[str]) -> "ReverseAction":
        """Build a reverse action that deletes created files."""
        return cls(type=ReverseActionType.DELETE_FILES, files=tuple(files))

    @classmethod
    def restore_files(cls, restore_data: list[RestoreItem]) -> "ReverseAction":
        """Build a reverse action that restores deleted files."""
        return cls(type=ReverseActionType.RESTORE_FILES, restore_data=tuple(restore_data))

    @property
    def paths(self) -> list[str]:
        """Paths this action touches, whatever its type."""
        if self.type == ReverseActionType.DELETE_FILES:
            return list(self.files)
        if self.type == ReverseActionType.RESTORE_FILES:
            return [item.path for item in self.restore_data]
        return []

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage.

        Returns:
            Dictionary with "type" and the field belonging to that type.
        """
        result: dict[str, Any] = {"type": self.type.value}
        if self.type == ReverseActionType.DELETE_FILES:
            result["files"] = list(self.files)
        elif self.type == ReverseActionType.RESTORE_FILES:
            result["restoreData"] = [item.to_dict() for item in self.restore_data]
        elif self.command is not None:
            result["command"] = self.command
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ReverseAction":
        """Deserialize from dictionary.

        Raises:
            KeyError: If the type is missing.
            ValueError: If the type is unknown.
            TypeError: If files or restoreData is not a list of the right items.
        """
        files = _string_list(data.get("files") or [], "Reverse action files")
        restore_data = data.get("restoreData") or []
        if not isinstance(restore_data, list):
            msg = "Reverse action restoreData must be a list"
            raise TypeError(msg)
        return cls(
            type=ReverseActionType(data["type"]),
            files=tuple(files),
            restore_data=tuple(RestoreItem.from_dict(item) for item in restore_data),
            command=data.get("command"),
        )


@dataclass(frozen=True, slots=True)
class UndoEntry:
    """One reversible unit of work.

    Immutable once pushed onto the stack.

    Attributes:
        id: Unique identifier, prefixed "undo-".
        timestamp: When the operation happened (ISO 8601, UTC).
        operation: What was done.
        description: Human-readable summary.
        reverse: How to undo it.
        metadata: Extra context used to reconcile the manifest on undo.
    """

    id: str
    timestamp: str
    operation: OperationType
    description: str
    reverse: ReverseAction
    metadata: dict[str, Any] = field(default_factory=lambda: {})

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.id.startswith(ENTRY_ID_PREFIX):
            msg = f"Undo entry ID must start with {ENTRY_ID_PREFIX!r}: {self.id!r}"
            raise ValueError(msg)
        if not self.timestamp:
            msg = "Timestamp cannot be empty"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        result: dict[str, Any] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "operation": self.operation.value,
            "description": self.description,
            "reverse": self.reverse.to_dict(),
        }
        if self.metadata:
            result["metadata"] = self.metadata
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UndoEntry":
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If operation or reverse data is invalid.
            TypeError: If reverse data or metadata has the wrong shape.
        """
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            operation=OperationType(data["operation"]),
            description=data.get("description", ""),
            reverse=ReverseAction.from_dict(data["reverse"]),
            metadata=_check_metadata(data.get("metadata") or {}),
        )


@dataclass(slots=True)
class UndoStack:
    """Persisted LIFO history of reversible operations.

    Entries are ordered oldest to newest and never exceed MAX_STACK_DEPTH.

    Attributes:
        version: Stack schema version.
        entries: Undo entries, oldest first.
    """

    version: int = UNDO_STACK_VERSION
    entries: list[UndoEntry] = field(default_factory=lambda: [])

    def push(self, entry: UndoEntry) -> list[UndoEntry]:
        """Append an entry, evicting the oldest beyond the depth limit.

        Returns:
            Entries evicted from the front, oldest first.
        """
        self.entries.append(entry)
        overflow = len(self.entries) - MAX_STACK_DEPTH
        if overflow <= 0:
            return []
        evicted = self.entries[:overflow]
        del self.entries[:overflow]
        return evicted

    def pop(self) -> UndoEntry | None:
        """Remove and return the newest entry, or None when empty."""
        if not self.entries:
            return None
        return self.entries.pop()

    def peek(self) -> UndoEntry | None:
        """Return the newest entry without removing it."""
        return self.entries[-1] if self.entries else None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "version": self.version,
            "entries": [entry.to_dict() for entry in self.entries],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UndoStack":
        """Deserialize from dictionary.

        Raises:
            KeyError: If version or entries are missing.
            TypeError: If entries is not a list.
            ValueError: If an entry is invalid.
        """
        raw_entries = data["entries"]
        if not isinstance(raw_entries, list):
            msg = "Undo stack entries must be a list"
            raise TypeError(msg)
        entries = [UndoEntry.from_dict(item) for item in raw_entries]
        # Trim a hand-edited or older stack to the current limit
        return cls(version=int(data["version"]), entries=entries[-MAX_STACK_DEPTH:])
