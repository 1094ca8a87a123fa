"""Installation manifest models.

This module defines the Pydantic models representing .vibe/modules.json,
the persisted record of every file each installed module wrote.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

MANIFEST_VERSION = 1


class ManifestFile(BaseModel):
    """A file written by a module, with the checksum of its content.

    Attributes:
        path: Project-relative POSIX path.
        checksum: SHA-256 hex digest of the exact bytes written.
    """

    model_config = ConfigDict(frozen=True)

    path: Annotated[str, Field(min_length=1, description="Project-relative path")]
    checksum: Annotated[str, Field(min_length=1, description="SHA-256 hex digest")]


class InstalledModuleRecord(BaseModel):
    """Record of one installed module.

    Replaced on reinstall, deleted on removal.

    Attributes:
        name: Module name (registry key).
        package: Package the module ships in.
        installed_at: When the module was (last) installed.
        files: Files written by the module.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: Annotated[str, Field(min_length=1, description="Module name")]
    package: Annotated[str, Field(description="Package name")]
    installed_at: Annotated[
        datetime,
        Field(alias="installedAt", description="Installation timestamp"),
    ]
    files: Annotated[
        list[ManifestFile],
        Field(default_factory=list, description="Files written by the module"),
    ]

    @property
    def paths(self) -> list[str]:
        """Paths of all files recorded for this module."""
        return [f.path for f in self.files]


class Manifest(BaseModel):
    """Map of installed module name to its installation record.

    A path can be claimed by at most one module at a time.

    Attributes:
        version: Manifest schema version.
        modules: Installed modules keyed by name.
    """

    version: Annotated[int, Field(description="Manifest schema version")] = MANIFEST_VERSION
    modules: Annotated[
        dict[str, InstalledModuleRecord],
        Field(default_factory=dict, description="Installed modules"),
    ]

    @model_validator(mode="after")
    def validate_unique_paths(self) -> "Manifest":
        """Validate that no path is claimed by two modules."""
        owners: dict[str, str] = {}
        for name, record in self.modules.items():
            for path in record.paths:
                owner = owners.setdefault(path, name)
                if owner != name:
                    msg = f"Path {path!r} claimed by both {owner!r} and {name!r}"
                    raise ValueError(msg)
        return self

    def owner_of(self, path: str) -> str | None:
        """Get the name of the module that owns a path.

        Args:
            path: Project-relative path.

        Returns:
            Owning module name, or None if no module claims the path.
        """
        for name, record in self.modules.items():
            if path in record.paths:
                return name
        return None

    def is_installed(self, name: str) -> bool:
        """Check whether a module has an installation record."""
        return name in self.modules
