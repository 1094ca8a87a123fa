"""Unit tests for the remove command."""

import json
from pathlib import Path

from typer.testing import CliRunner
from vibectl.cli.main import app
from vibectl.core.manifest import load_manifest
from vibectl.core.undo import peek_entry

runner = CliRunner()


class TestRemoveCommand:
    """Tests for remove command execution."""

    def test_remove_help(self) -> None:
        """Remove command shows help."""
        result = runner.invoke(app, ["remove", "--help"])

        assert result.exit_code == 0
        assert "Remove an installed module" in result.stdout

    def test_removes_module(self, project_root: Path) -> None:
        """Removing deletes unmodified files and suggests undo."""
        runner.invoke(app, ["-C", str(project_root), "add", "sales"])

        result = runner.invoke(app, ["-C", str(project_root), "remove", "sales"])

        assert result.exit_code == 0
        assert "vibectl undo" in result.stdout
        assert "Routes to remove from your router" in result.stdout
        assert "USE /api/sales" in result.stdout
        assert not (project_root / "src").exists()
        assert not load_manifest(project_root).is_installed("sales")

    def test_not_installed(self, project_root: Path) -> None:
        """Removing a module that is not installed fails."""
        result = runner.invoke(app, ["-C", str(project_root), "remove", "sales"])

        assert result.exit_code == 1
        assert "not installed" in result.output
        assert peek_entry(project_root) is None

    def test_modified_files_are_kept(self, project_root: Path) -> None:
        """Edited files survive and are reported."""
        runner.invoke(app, ["-C", str(project_root), "add", "sales"])
        skill = project_root / "src/modules/sales/SKILL.md"
        skill.write_text("my sales playbook")

        result = runner.invoke(app, ["-C", str(project_root), "remove", "sales"])

        assert result.exit_code == 0
        assert "modified file(s) were kept" in result.output
        assert skill.read_text() == "my sales playbook"

    def test_json_output(self, project_root: Path) -> None:
        """--json reports removed and modified paths."""
        runner.invoke(app, ["-C", str(project_root), "add", "sales"])

        result = runner.invoke(app, ["-C", str(project_root), "remove", "sales", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "module": "sales",
            "removed": ["src/modules/sales/SKILL.md"],
            "modified": [],
        }
