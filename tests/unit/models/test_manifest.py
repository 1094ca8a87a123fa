"""Unit tests for manifest models.

Tests for the Pydantic models representing .vibe/modules.json.
"""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError
from vibectl.models.manifest import InstalledModuleRecord, Manifest, ManifestFile

NOW = datetime(2026, 1, 15, 10, 30, tzinfo=UTC)


def _record(name: str, *paths: str) -> InstalledModuleRecord:
    return InstalledModuleRecord(
        name=name,
        package=f"@vibeonrails/{name}",
        installed_at=NOW,
        files=[ManifestFile(path=p, checksum="0" * 64) for p in paths],
    )


class TestManifestFile:
    """Tests for ManifestFile model."""

    def test_rejects_empty_path(self) -> None:
        """Paths cannot be empty."""
        with pytest.raises(ValidationError):
            ManifestFile(path="", checksum="abc")

    def test_is_frozen(self) -> None:
        """File records are immutable."""
        file = ManifestFile(path="a.md", checksum="abc")
        with pytest.raises(ValidationError):
            file.path = "b.md"  # type: ignore[misc]


class TestInstalledModuleRecord:
    """Tests for InstalledModuleRecord model."""

    def test_accepts_alias_and_field_name(self) -> None:
        """installedAt and installed_at both populate the timestamp."""
        by_alias = InstalledModuleRecord.model_validate(
            {"name": "ai", "package": "p", "installedAt": "2026-01-15T10:30:00Z"}
        )
        by_name = InstalledModuleRecord(name="ai", package="p", installed_at=NOW)

        assert by_alias.installed_at == by_name.installed_at
        assert by_alias.files == []

    def test_serializes_with_alias(self) -> None:
        """Dumping by alias writes installedAt."""
        data = _record("ai").model_dump(mode="json", by_alias=True)

        assert data["installedAt"].startswith("2026-01-15T10:30:00")
        assert data["files"] == []

    def test_paths(self) -> None:
        """paths lists the recorded file paths in order."""
        assert _record("ai", "b.md", "a.md").paths == ["b.md", "a.md"]


class TestManifest:
    """Tests for Manifest model."""

    def test_defaults(self) -> None:
        """A bare manifest is version 1 and empty."""
        manifest = Manifest()

        assert manifest.version == 1
        assert manifest.modules == {}

    def test_owner_of(self) -> None:
        """owner_of finds the module claiming a path."""
        manifest = Manifest(modules={"sales": _record("sales", "s.md")})

        assert manifest.owner_of("s.md") == "sales"
        assert manifest.owner_of("x.md") is None
        assert manifest.is_installed("sales")
        assert not manifest.is_installed("payments")

    def test_rejects_shared_paths(self) -> None:
        """A path may belong to only one module."""
        with pytest.raises(ValidationError, match="claimed by both"):
            Manifest(
                modules={
                    "a": _record("a", "shared.md"),
                    "b": _record("b", "shared.md"),
                }
            )
