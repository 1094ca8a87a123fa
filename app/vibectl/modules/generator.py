"""Generator for registry module files.

A generator turns a module name into the (path, content) pairs to write.
The installer only depends on the FileGenerator signature, so callers can
plug in other generators, such as a code generator producing a new domain
module.
"""

from collections.abc import Callable

from vibectl.models.module import GeneratedFile
from vibectl.modules.registry import get_module

FileGenerator = Callable[[str], list[GeneratedFile]]


def generate_module_files(name: str) -> list[GeneratedFile]:
    """Render the static templates of a registry module.

    Args:
        name: Module name.

    Returns:
        Files to write, in declaration order. Empty for unknown modules
        and modules without files.
    """
    module = get_module(name)
    if module is None:
        return []
    return [GeneratedFile(path=f.path, content=f.template) for f in module.files]
