"""Unit tests for undo stack models.

Tests for UndoEntry, ReverseAction, RestoreItem, and UndoStack.
"""

import pytest
from vibectl.models.undo import (
    MAX_STACK_DEPTH,
    OperationType,
    RestoreItem,
    ReverseAction,
    ReverseActionType,
    UndoEntry,
    UndoStack,
)


def _entry(n: int) -> UndoEntry:
    return UndoEntry(
        id=f"undo-{n:x}-00000000",
        timestamp="2026-01-26T14:30:00+00:00",
        operation=OperationType.ADD,
        description=f"add module-{n}",
        reverse=ReverseAction.delete_files([f"file-{n}.md"]),
    )


class TestReverseAction:
    """Tests for ReverseAction dataclass."""

    def test_delete_files_to_dict(self) -> None:
        """Delete actions serialize only their files."""
        action = ReverseAction.delete_files(["a.md", "b.md"])

        assert action.to_dict() == {"type": "delete-files", "files": ["a.md", "b.md"]}
        assert action.paths == ["a.md", "b.md"]

    def test_restore_files_to_dict(self) -> None:
        """Restore actions serialize their captured content."""
        action = ReverseAction.restore_files([RestoreItem("a.md", "A")])

        assert action.to_dict() == {
            "type": "restore-files",
            "restoreData": [{"path": "a.md", "content": "A"}],
        }
        assert action.paths == ["a.md"]

    def test_run_command_to_dict(self) -> None:
        """Run-command actions carry their command."""
        action = ReverseAction(type=ReverseActionType.RUN_COMMAND, command="pnpm remove x")

        assert action.to_dict() == {"type": "run-command", "command": "pnpm remove x"}
        assert action.paths == []

    def test_from_dict(self) -> None:
        """Dictionaries deserialize to equal actions."""
        action = ReverseAction.restore_files([RestoreItem("a.md", "A")])
        assert ReverseAction.from_dict(action.to_dict()) == action

    def test_from_dict_unknown_type(self) -> None:
        """Unknown action types are rejected."""
        with pytest.raises(ValueError):
            ReverseAction.from_dict({"type": "explode"})

    def test_from_dict_rejects_non_string_files(self) -> None:
        """File lists must contain strings."""
        with pytest.raises(TypeError):
            ReverseAction.from_dict({"type": "delete-files", "files": [1, 2]})

    def test_from_dict_rejects_bare_string_files(self) -> None:
        """A single string is not a file list."""
        with pytest.raises(TypeError):
            ReverseAction.from_dict({"type": "delete-files", "files": "a.md"})

    def test_from_dict_rejects_non_list_restore_data(self) -> None:
        """Restore data must be a list."""
        with pytest.raises(TypeError):
            ReverseAction.from_dict({"type": "restore-files", "restoreData": {"path": "a"}})


class TestRestoreItem:
    """Tests for RestoreItem dataclass."""

    def test_from_dict_requires_strings(self) -> None:
        """Path and content must both be strings."""
        with pytest.raises(TypeError):
            RestoreItem.from_dict({"path": "a.md", "content": None})

    def test_from_dict_requires_fields(self) -> None:
        """Missing fields raise KeyError."""
        with pytest.raises(KeyError):
            RestoreItem.from_dict({"path": "a.md"})


class TestUndoEntry:
    """Tests for UndoEntry dataclass."""

    def test_rejects_bad_id(self) -> None:
        """IDs must carry the undo- prefix."""
        with pytest.raises(ValueError, match="must start with"):
            UndoEntry(
                id="abc",
                timestamp="2026-01-26T14:30:00+00:00",
                operation=OperationType.ADD,
                description="",
                reverse=ReverseAction.delete_files([]),
            )

    def test_rejects_empty_timestamp(self) -> None:
        """Timestamps cannot be empty."""
        with pytest.raises(ValueError, match="Timestamp"):
            UndoEntry(
                id="undo-1-00000000",
                timestamp="",
                operation=OperationType.ADD,
                description="",
                reverse=ReverseAction.delete_files([]),
            )

    def test_is_immutable(self) -> None:
        """Entries are frozen."""
        entry = _entry(1)
        with pytest.raises(AttributeError):
            entry.description = "changed"  # type: ignore[misc]

    def test_metadata_omitted_when_empty(self) -> None:
        """Only non-empty metadata is serialized."""
        assert "metadata" not in _entry(1).to_dict()

    def test_from_dict_with_metadata(self) -> None:
        """Metadata survives serialization."""
        data = _entry(1).to_dict()
        data["metadata"] = {"modules": ["payments", "finance"]}

        entry = UndoEntry.from_dict(data)

        assert entry.metadata == {"modules": ["payments", "finance"]}
        assert entry.operation == OperationType.ADD

    @pytest.mark.parametrize(
        "metadata",
        [
            {"modules": 5},
            {"modules": [1]},
            {"record": "sales"},
            {"restoreData": "a.md"},
            {"restoreData": [{"path": "a.md", "content": 1}]},
            ["modules"],
        ],
    )
    def test_from_dict_rejects_malformed_metadata(self, metadata: object) -> None:
        """Metadata read back during undo must have the expected shape."""
        data = _entry(1).to_dict()
        data["metadata"] = metadata

        with pytest.raises((TypeError, KeyError)):
            UndoEntry.from_dict(data)

    def test_from_dict_keeps_reinstall_metadata(self) -> None:
        """Record and restore data of a reinstall are accepted."""
        data = _entry(1).to_dict()
        data["metadata"] = {
            "record": {"name": "sales"},
            "restoreData": [{"path": "a.md", "content": "x"}],
        }

        assert UndoEntry.from_dict(data).metadata == data["metadata"]


class TestUndoStack:
    """Tests for UndoStack dataclass."""

    def test_push_returns_evicted(self) -> None:
        """Pushing past the limit evicts from the front."""
        stack = UndoStack()
        evicted = [e for n in range(MAX_STACK_DEPTH + 2) for e in stack.push(_entry(n))]

        assert [e.description for e in evicted] == ["add module-0", "add module-1"]
        assert len(stack.entries) == MAX_STACK_DEPTH
        assert stack.entries[0].description == "add module-2"

    def test_pop_and_peek(self) -> None:
        """Peek leaves the stack unchanged; pop removes the newest."""
        stack = UndoStack()
        stack.push(_entry(1))
        stack.push(_entry(2))

        assert stack.peek() == _entry(2)
        assert stack.pop() == _entry(2)
        assert stack.pop() == _entry(1)
        assert stack.pop() is None
        assert stack.peek() is None

    def test_from_dict_trims_to_limit(self) -> None:
        """Oversized stacks keep only the newest entries."""
        data = {"version": 1, "entries": [_entry(n).to_dict() for n in range(12)]}

        stack = UndoStack.from_dict(data)

        assert len(stack.entries) == MAX_STACK_DEPTH
        assert stack.entries[0] == _entry(2)

    def test_from_dict_requires_list(self) -> None:
        """Entries must be a list."""
        with pytest.raises(TypeError):
            UndoStack.from_dict({"version": 1, "entries": {}})
