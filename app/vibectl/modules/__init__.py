"""Module catalog and file generation.

This package exports the module registry and the default file generator.
"""

from vibectl.modules.generator import FileGenerator, generate_module_files
from vibectl.modules.registry import (
    MODULE_REGISTRY,
    get_module,
    get_modules_by_category,
    list_modules,
    resolve_dependencies,
)

__all__ = [
    "MODULE_REGISTRY",
    "FileGenerator",
    "generate_module_files",
    "get_module",
    "get_modules_by_category",
    "list_modules",
    "resolve_dependencies",
]
