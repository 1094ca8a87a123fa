"""Module descriptor models.

A module is a named, installable bundle of generated source files with a
fixed dependency list. Descriptors are static and live for the lifetime of
the program.
"""

from dataclasses import dataclass
from enum import Enum


class ModuleCategory(str, Enum):
    """Category a module is listed under.

    Attributes:
        OPS: Business operations (marketing, sales, support, finance).
        FEATURES: Application features (payments, admin).
        SITES: Site generators.
        INFRA: Shared infrastructure other modules build on.
    """

    OPS = "ops"
    FEATURES = "features"
    SITES = "sites"
    INFRA = "infra"

    @property
    def label(self) -> str:
        """Human-readable heading for listings."""
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    ModuleCategory.OPS: "Business Operations",
    ModuleCategory.FEATURES: "Features",
    ModuleCategory.SITES: "Sites",
    ModuleCategory.INFRA: "Infrastructure",
}


@dataclass(frozen=True, slots=True)
class ModuleFile:
    """Static template for a file a module creates.

    Attributes:
        path: Project-relative POSIX path of the file.
        template: File content.
        description: What the file is for.
    """

    path: str
    template: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class GeneratedFile:
    """A rendered file ready to be written into a project.

    Attributes:
        path: Project-relative POSIX path.
        content: Exact text to write.
    """

    path: str
    content: str

    def __post_init__(self) -> None:
        """Validate file data after initialization."""
        if not self.path:
            msg = "Generated file path cannot be empty"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class RouteRegistration:
    """A route the user adds to their router after installing a module.

    Attributes:
        path: URL path, e.g. "/api/sales".
        import_from: Package that exports the handler.
        method: Router method to mount it with ("use", "get", "post", ...).
    """

    path: str
    import_from: str
    method: str = "use"

    def __str__(self) -> str:
        return f"{self.method.upper()} {self.path} -> {self.import_from}"


@dataclass(frozen=True, slots=True)
class ConfigEntry:
    """A key the user adds to vibe.config.ts.

    Attributes:
        key: Dotted config key.
        value: Suggested value, as source text.
        description: What the key controls.
    """

    key: str
    value: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class ModuleDescriptor:
    """Registry entry describing an installable module.

    Attributes:
        name: Unique module name.
        package: Package the module's runtime code ships in.
        description: One-line summary.
        category: Listing category.
        dependencies: Names of modules this module requires.
        peer_dependencies: Packages this module's package expects alongside
            it. A peer shipped by a registered module is installed first.
        files: Files the module creates on install.
        routes: Routes the user registers by hand.
        config_entries: Configuration the user adds by hand.
        content_dirs: Directories created on install, even when empty.
        post_install_steps: Hints shown after a successful install.
    """

    name: str
    package: str
    description: str
    category: ModuleCategory
    dependencies: tuple[str, ...] = ()
    peer_dependencies: tuple[str, ...] = ()
    files: tuple[ModuleFile, ...] = ()
    routes: tuple[RouteRegistration, ...] = ()
    config_entries: tuple[ConfigEntry, ...] = ()
    content_dirs: tuple[str, ...] = ()
    post_install_steps: tuple[str, ...] = ()
