"""Data models for vibectl.

This module exports the core data structures used throughout the application.
"""

from vibectl.models.manifest import (
    MANIFEST_VERSION,
    InstalledModuleRecord,
    Manifest,
    ManifestFile,
)
from vibectl.models.module import (
    ConfigEntry,
    GeneratedFile,
    ModuleCategory,
    ModuleDescriptor,
    ModuleFile,
    RouteRegistration,
)
from vibectl.models.undo import (
    MAX_STACK_DEPTH,
    OperationType,
    RestoreItem,
    ReverseAction,
    ReverseActionType,
    UndoEntry,
    UndoStack,
)

__all__ = [
    "MANIFEST_VERSION",
    "MAX_STACK_DEPTH",
    "ConfigEntry",
    "GeneratedFile",
    "InstalledModuleRecord",
    "Manifest",
    "ManifestFile",
    "ModuleCategory",
    "ModuleDescriptor",
    "ModuleFile",
    "OperationType",
    "RestoreItem",
    "ReverseAction",
    "ReverseActionType",
    "RouteRegistration",
    "UndoEntry",
    "UndoStack",
]
