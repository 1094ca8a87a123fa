"""Unit tests for manifest I/O.

Tests for loading, saving, and updating .vibe/modules.json.
"""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest
from vibectl.core.manifest import (
    compute_checksum,
    find_path_owner,
    forget_module,
    load_manifest,
    record_installed_module,
    restore_module_record,
    save_manifest,
    update_manifest,
)
from vibectl.core.paths import get_manifest_path
from vibectl.models.manifest import InstalledModuleRecord, Manifest, ManifestFile


def _record(name: str, *paths: str) -> InstalledModuleRecord:
    return InstalledModuleRecord(
        name=name,
        package=f"@vibeonrails/{name}",
        installed_at=datetime(2026, 1, 15, 10, 30, tzinfo=UTC),
        files=[ManifestFile(path=p, checksum=compute_checksum(p)) for p in paths],
    )


class TestComputeChecksum:
    """Tests for compute_checksum function."""

    def test_known_digest(self) -> None:
        """Checksum is the SHA-256 hex digest."""
        assert compute_checksum("") == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_deterministic(self) -> None:
        """Same content yields the same checksum."""
        assert compute_checksum("hello") == compute_checksum("hello")

    def test_text_and_bytes_agree(self) -> None:
        """Text is hashed as its UTF-8 encoding."""
        assert compute_checksum("café") == compute_checksum("café".encode())

    def test_different_content(self) -> None:
        """A single changed character changes the checksum."""
        assert compute_checksum("hello") != compute_checksum("hellO")


class TestLoadSaveManifest:
    """Tests for load_manifest and save_manifest."""

    def test_missing_manifest_is_empty(self, project_root: Path) -> None:
        """A project without a manifest has no modules."""
        manifest = load_manifest(project_root)

        assert manifest.version == 1
        assert manifest.modules == {}

    def test_round_trip(self, project_root: Path) -> None:
        """A saved manifest loads back equal."""
        manifest = Manifest(modules={"sales": _record("sales", "src/modules/sales/SKILL.md")})

        path = save_manifest(project_root, manifest)

        assert path == get_manifest_path(project_root)
        assert load_manifest(project_root) == manifest

    def test_uses_camel_case_on_disk(self, project_root: Path) -> None:
        """The installation timestamp is stored as installedAt."""
        save_manifest(project_root, Manifest(modules={"admin": _record("admin")}))

        data = json.loads(get_manifest_path(project_root).read_text())

        assert "installedAt" in data["modules"]["admin"]
        assert "installed_at" not in data["modules"]["admin"]

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            '{"version": 1, "modules": []}',
            '{"version": 1, "modules": {"x": {"name": "x"}}}',
        ],
    )
    def test_corrupt_manifest_is_empty(self, project_root: Path, content: str) -> None:
        """Malformed or invalid manifests read as empty."""
        path = get_manifest_path(project_root)
        path.parent.mkdir(parents=True)
        path.write_text(content)

        assert load_manifest(project_root).modules == {}

    def test_duplicate_owner_is_corrupt(self, project_root: Path) -> None:
        """A manifest claiming one path for two modules reads as empty."""
        path = get_manifest_path(project_root)
        path.parent.mkdir(parents=True)
        path.write_text(
            json.dumps(
                {
                    "version": 1,
                    "modules": {
                        "a": _record("a", "shared.md").model_dump(mode="json", by_alias=True),
                        "b": _record("b", "shared.md").model_dump(mode="json", by_alias=True),
                    },
                }
            )
        )

        assert load_manifest(project_root).modules == {}


class TestUpdateManifest:
    """Tests for manifest mutation helpers."""

    def test_update_returns_mutation_result(self, project_root: Path) -> None:
        """update_manifest passes through the callback result."""
        result = update_manifest(project_root, lambda m: len(m.modules))
        assert result == 0

    def test_record_installed_module(self, project_root: Path) -> None:
        """Recording a module makes it installed."""
        record_installed_module(project_root, _record("sales", "src/modules/sales/SKILL.md"))

        manifest = load_manifest(project_root)

        assert manifest.is_installed("sales")
        assert find_path_owner(manifest, "src/modules/sales/SKILL.md") == "sales"
        assert find_path_owner(manifest, "other.md") is None

    def test_record_replaces_previous(self, project_root: Path) -> None:
        """Recording a module again replaces its record."""
        record_installed_module(project_root, _record("sales", "old.md"))
        record_installed_module(project_root, _record("sales", "new.md"))

        assert load_manifest(project_root).modules["sales"].paths == ["new.md"]

    def test_forget_module(self, project_root: Path) -> None:
        """Forgetting returns the dropped record."""
        record_installed_module(project_root, _record("sales", "a.md"))

        dropped = forget_module(project_root, "sales")

        assert dropped is not None
        assert dropped.name == "sales"
        assert not load_manifest(project_root).is_installed("sales")

    def test_forget_unknown_module(self, project_root: Path) -> None:
        """Forgetting a module that is not installed returns None."""
        assert forget_module(project_root, "nope") is None

    def test_restore_module_record(self, project_root: Path) -> None:
        """A dropped record can be put back."""
        record = _record("sales", "a.md")

        assert restore_module_record(project_root, record) is True
        assert load_manifest(project_root).modules["sales"] == record

    def test_restore_skips_conflicting_record(self, project_root: Path) -> None:
        """A record whose path is now owned elsewhere is not restored."""
        record_installed_module(project_root, _record("payments", "shared.md"))

        assert restore_module_record(project_root, _record("sales", "shared.md")) is False

        manifest = load_manifest(project_root)
        assert not manifest.is_installed("sales")
        assert manifest.owner_of("shared.md") == "payments"
