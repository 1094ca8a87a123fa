"""Installation manifest I/O.

The manifest (.vibe/modules.json) records, for every installed module, each
file it wrote and the checksum of that file's content. Removal relies on
these checksums to tell generated files apart from user-edited ones.

A missing or corrupt manifest is read as an empty one: corruption means
"no install history", never a failure.
"""

import hashlib
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from vibectl.core.paths import get_manifest_path
from vibectl.core.persistence import load_document, save_document, with_persisted_document
from vibectl.models.manifest import MANIFEST_VERSION, InstalledModuleRecord, Manifest

logger = logging.getLogger(__name__)

R = TypeVar("R")


def compute_checksum(content: str | bytes) -> str:
    """Compute the SHA-256 hex digest of file content.

    Args:
        content: File content. Text is encoded as UTF-8 first.

    Returns:
        Lowercase hex digest.
    """
    data = content.encode("utf-8") if isinstance(content, str) else content
    return hashlib.sha256(data).hexdigest()


def empty_manifest() -> Manifest:
    """Create a manifest with no installed modules."""
    return Manifest(version=MANIFEST_VERSION, modules={})


def _decode(data: Any) -> Manifest:
    return Manifest.model_validate(data)


def _encode(manifest: Manifest) -> dict[str, Any]:
    return manifest.model_dump(mode="json", by_alias=True)


def load_manifest(project_root: Path) -> Manifest:
    """Load the manifest of a project.

    Args:
        project_root: Root directory of the user's project.

    Returns:
        The stored manifest, or an empty one if the file is missing,
        malformed, or fails validation.
    """
    return load_document(get_manifest_path(project_root), empty_manifest, _decode)


def save_manifest(project_root: Path, manifest: Manifest) -> Path:
    """Overwrite the manifest of a project.

    Creates the state directory if needed.

    Args:
        project_root: Root directory of the user's project.
        manifest: Manifest to store.

    Returns:
        Path where the manifest was saved.
    """
    return save_document(get_manifest_path(project_root), _encode(manifest))


def update_manifest(project_root: Path, mutate: Callable[[Manifest], R]) -> R:
    """Load the manifest, apply an in-place mutation, and save it back.

    Args:
        project_root: Root directory of the user's project.
        mutate: Callback that modifies the manifest.

    Returns:
        Whatever mutate returned.
    """
    return with_persisted_document(
        get_manifest_path(project_root),
        empty_manifest,
        mutate,
        decode=_decode,
        encode=_encode,
    )


def find_path_owner(manifest: Manifest, path: str) -> str | None:
    """Get the module that claims a path.

    Args:
        manifest: Manifest to search.
        path: Project-relative path.

    Returns:
        Name of the owning module, or None.
    """
    return manifest.owner_of(path)


def record_installed_module(project_root: Path, record: InstalledModuleRecord) -> None:
    """Store a module record, replacing any previous record of that module.

    Args:
        project_root: Root directory of the user's project.
        record: Installation record to store.
    """

    def _store(manifest: Manifest) -> None:
        manifest.modules[record.name] = record

    update_manifest(project_root, _store)
    logger.debug("Recorded %s with %d file(s)", record.name, len(record.files))


def forget_module(project_root: Path, name: str) -> InstalledModuleRecord | None:
    """Drop a module's record from the manifest.

    Args:
        project_root: Root directory of the user's project.
        name: Module name.

    Returns:
        The dropped record, or None if the module was not installed.
    """
    return update_manifest(project_root, lambda manifest: manifest.modules.pop(name, None))


def restore_module_record(project_root: Path, record: InstalledModuleRecord) -> bool:
    """Put back a previously dropped module record.

    The record is skipped if one of its paths has meanwhile been claimed by
    another module, so the manifest keeps at most one owner per path.

    Args:
        project_root: Root directory of the user's project.
        record: Record to restore.

    Returns:
        True if the record was stored, False if it conflicted.
    """

    def _restore(manifest: Manifest) -> bool:
        for path in record.paths:
            owner = manifest.owner_of(path)
            if owner is not None and owner != record.name:
                logger.warning(
                    "Not restoring record of %s: %s is now owned by %s",
                    record.name,
                    path,
                    owner,
                )
                return False
        manifest.modules[record.name] = record
        return True

    return update_manifest(project_root, _restore)
