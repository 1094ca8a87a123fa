"""Module installation.

Writes a module's generated files into a project, records their checksums
in the manifest, and pushes an undo entry that deletes them again.

A path owned by a different module is never overwritten: installation
stops with FileConflictError before writing anything. A pre-existing file
(or symlink) that no module owns is left alone and not recorded, so it is
never deleted by a later removal.

A write failure part way through leaves the earlier files on disk. They are
reported through PartialInstallError and recorded like a finished install,
so remove and undo still clean them up.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from vibectl.core.fileops import write_text_file
from vibectl.core.manifest import (
    compute_checksum,
    find_path_owner,
    load_manifest,
    record_installed_module,
)
from vibectl.core.paths import resolve_project_path
from vibectl.core.undo import record_add
from vibectl.models.manifest import InstalledModuleRecord, ManifestFile
from vibectl.models.module import GeneratedFile
from vibectl.models.undo import RestoreItem
from vibectl.modules.generator import FileGenerator, generate_module_files
from vibectl.modules.registry import get_module, resolve_dependencies

logger = logging.getLogger(__name__)


class InstallError(Exception):
    """Base exception for module installation errors."""


class UnknownModuleError(InstallError):
    """Raised when a module name is not in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown module: {name}")
        self.name = name


class FileConflictError(InstallError):
    """Raised when a module would overwrite a file owned by another module."""

    def __init__(self, module: str, path: str, owner: str) -> None:
        super().__init__(f"Cannot install {module}: {path} is owned by module {owner}")
        self.module = module
        self.path = path
        self.owner = owner


class PartialInstallError(InstallError):
    """Raised when a write fails after some of a module's files were written.

    Attributes:
        module: Module being installed.
        path: Path whose write failed.
        written: Files written before the failure, with their checksums.
    """

    def __init__(
        self,
        module: str,
        path: str,
        written: list[ManifestFile],
        cause: OSError,
    ) -> None:
        super().__init__(f"Cannot install {module}: writing {path} failed: {cause}")
        self.module = module
        self.path = path
        self.written = written


PlannedWrite = tuple[GeneratedFile, Path]


def plan_module_files(
    module_name: str,
    project_root: Path,
    generator: FileGenerator = generate_module_files,
) -> list[PlannedWrite]:
    """Decide which generated files an install writes.

    Raises:
        FileConflictError: If a path is owned by another module.
        UnsafePathError: If a generated path points outside the project.
    """
    manifest = load_manifest(project_root)

    planned: list[PlannedWrite] = []
    for generated in generator(module_name):
        target = resolve_project_path(project_root, generated.path)
        owner = find_path_owner(manifest, generated.path)

        if owner is not None and owner != module_name:
            raise FileConflictError(module_name, generated.path, owner)

        # A dangling symlink does not exist() but would be written through
        if owner is None and (target.exists() or target.is_symlink()):
            logger.warning("Keeping existing file %s (not created by vibectl)", generated.path)
            continue

        planned.append((generated, target))
    return planned


def write_planned_files(module_name: str, planned: list[PlannedWrite]) -> list[ManifestFile]:
    """Write planned files in order, checksumming each one as it lands.

    Raises:
        PartialInstallError: If a write fails. Carries the files written
            before the failure, which stay on disk.
    """
    written: list[ManifestFile] = []
    for generated, target in planned:
        try:
            data = write_text_file(target, generated.content)
        except OSError as e:
            raise PartialInstallError(module_name, generated.path, written, e) from e
        written.append(ManifestFile(path=generated.path, checksum=compute_checksum(data)))
        logger.debug("Wrote %s", generated.path)
    return written


def create_content_dirs(module_name: str, project_root: Path) -> None:
    """Create the content directories a registry module declares.

    Directories are not tracked; removal prunes them once empty.
    """
    descriptor = get_module(module_name)
    if descriptor is None:
        return
    for directory in descriptor.content_dirs:
        resolve_project_path(project_root, directory).mkdir(parents=True, exist_ok=True)


def install_module_files(
    module_name: str,
    project_root: Path,
    generator: FileGenerator = generate_module_files,
) -> list[ManifestFile]:
    """Write a module's files into a project.

    Only files and content directories are written; the manifest is not
    modified. The caller merges the returned records into the manifest and
    records the undo entry.

    Args:
        module_name: Module to install.
        project_root: Root directory of the user's project.
        generator: Produces the (path, content) pairs to write.

    Returns:
        One ManifestFile per file written, with the checksum of the
        written content.

    Raises:
        FileConflictError: If a path is owned by another module. Nothing
            is written in that case.
        UnsafePathError: If a generated path points outside the project.
        PartialInstallError: If a write fails. Files written before the
            failure stay and are listed on the exception.
    """
    written = write_planned_files(
        module_name, plan_module_files(module_name, project_root, generator)
    )
    create_content_dirs(module_name, project_root)
    return written


def capture_overwritten(planned: list[PlannedWrite]) -> list[RestoreItem]:
    """Capture the current content of files a reinstall is about to overwrite.

    Only paths the module already owns are planned over existing files, so
    these are the module's own files, possibly edited by the user. A file
    that is not valid UTF-8 cannot be captured and is logged.
    """
    captured: list[RestoreItem] = []
    for generated, target in planned:
        if not target.is_file():
            continue
        try:
            content = target.read_bytes().decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Cannot keep %s for undo: not UTF-8 text", generated.path)
            continue
        captured.append(RestoreItem(path=generated.path, content=content))
    return captured


@dataclass(frozen=True, slots=True)
class AddResult:
    """Result of adding a module and its dependencies.

    Attributes:
        installed: Modules installed by this call, dependencies first.
        skipped: Dependencies that were already installed.
        files: Files written, across all installed modules.
    """

    installed: list[str] = field(default_factory=lambda: [])
    skipped: list[str] = field(default_factory=lambda: [])
    files: list[ManifestFile] = field(default_factory=lambda: [])

    @property
    def paths(self) -> list[str]:
        """Paths of all files written."""
        return [f.path for f in self.files]


def add_module(
    project_root: Path,
    module_name: str,
    generator: FileGenerator | None = None,
    *,
    reinstall: bool = False,
) -> AddResult:
    """Install a module and any missing dependencies.

    Modules that are already installed are skipped, except the requested
    module when reinstall is set. Each installed module's record is merged
    into the manifest as soon as its files are written, and one "add" undo
    entry covering every written file is pushed at the end. Nothing is
    recorded when every module was skipped.

    Undoing the entry deletes the written files and drops the records of
    newly installed modules. A reinstalled module gets its earlier record
    and the previous content of the files it overwrote back.

    Args:
        project_root: Root directory of the user's project.
        module_name: Registry module to install.
        generator: Overrides the default template generator.
        reinstall: Rewrite the requested module even if installed.

    Returns:
        AddResult describing what was installed.

    Raises:
        UnknownModuleError: If the module is not in the registry and no
            generator was given.
        FileConflictError: If a file is owned by another module. Modules
            installed before the conflict stay installed and undoable.
        PartialInstallError: If a write fails. The files written so far are
            recorded and undoable.
    """
    if get_module(module_name) is None and generator is None:
        raise UnknownModuleError(module_name)

    generate = generator or generate_module_files
    manifest = load_manifest(project_root)
    installed: list[str] = []
    skipped: list[str] = []
    files: list[ManifestFile] = []
    previous: InstalledModuleRecord | None = None
    overwritten: list[RestoreItem] = []

    # Generated modules outside the registry have no dependencies
    names = resolve_dependencies(module_name) or [module_name]

    def finish(name: str, written: list[ManifestFile]) -> None:
        descriptor = get_module(name)
        record_installed_module(
            project_root,
            InstalledModuleRecord(
                name=name,
                package=descriptor.package if descriptor else "",
                installed_at=datetime.now(UTC),
                files=_merge_reinstalled(manifest.modules.get(name), written),
            ),
        )
        if name != module_name or previous is None:
            installed.append(name)
        files.extend(written)

    try:
        for name in names:
            is_reinstall = reinstall and name == module_name and manifest.is_installed(name)
            if manifest.is_installed(name) and not is_reinstall:
                skipped.append(name)
                continue

            planned = plan_module_files(name, project_root, generate)
            if is_reinstall:
                previous = manifest.modules[name]
                overwritten = capture_overwritten(planned)

            try:
                written = write_planned_files(name, planned)
            except PartialInstallError as e:
                if e.written or previous is not None:
                    finish(name, e.written)
                logger.warning(
                    "Install of %s stopped after %d file(s); recorded what was written",
                    name,
                    len(e.written),
                )
                raise

            create_content_dirs(name, project_root)
            finish(name, written)
            logger.info("Installed %s (%d file(s))", name, len(written))
    finally:
        # Modules installed before a failure stay undoable
        if installed or previous is not None:
            record_add(
                project_root,
                f"add {module_name}",
                [f.path for f in files],
                modules=installed,
                record=previous,
                restore_data=overwritten,
            )

    if previous is not None:
        installed.append(module_name)
    return AddResult(installed=installed, skipped=skipped, files=files)


def _merge_reinstalled(
    previous: InstalledModuleRecord | None,
    written: list[ManifestFile],
) -> list[ManifestFile]:
    """Combine a module's earlier file records with freshly written ones.

    Files the generator no longer produces keep their earlier records, so a
    later removal still cleans them up.
    """
    if previous is None:
        return written
    rewritten = {f.path for f in written}
    kept = [f for f in previous.files if f.path not in rewritten]
    return kept + written
